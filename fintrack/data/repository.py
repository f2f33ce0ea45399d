"""
Data access over the managed database.

Every row carries the owner's id in ``USER_COLUMN`` and every query is
filtered by it, so one user can never read or touch another's records.
Client failures are logged and re-raised as ``RemoteError``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from fintrack.config import PROFILES_TABLE, USER_COLUMN
from fintrack.errors import NotFound, RemoteError

logger = logging.getLogger(__name__)


class FinanceRepository:
    def __init__(self, client: Client) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def fetch_all(self, table: str, user_id: str) -> list[dict[str, Any]]:
        try:
            response = self.client.table(table).select("*").eq(USER_COLUMN, user_id).execute()
        except Exception as exc:
            logger.exception("Failed to fetch %s for user %s", table, user_id)
            raise RemoteError(f"Erro ao carregar {table}") from exc
        return response.data or []

    def add(self, table: str, user_id: str, document: dict[str, Any]) -> str:
        """Insert a document and return the id the database assigned."""
        payload = {**document, USER_COLUMN: user_id}
        try:
            response = self.client.table(table).insert(payload).execute()
        except Exception as exc:
            logger.exception("Failed to insert into %s", table)
            raise RemoteError(f"Erro ao salvar em {table}") from exc
        if not response.data:
            raise RemoteError(f"Erro ao salvar em {table}: nenhum registro retornado")
        return str(response.data[0]["id"])

    def update(self, table: str, user_id: str, record_id: str, changes: dict[str, Any]) -> None:
        try:
            response = (
                self.client.table(table)
                .update(changes)
                .eq("id", record_id)
                .eq(USER_COLUMN, user_id)
                .execute()
            )
        except Exception as exc:
            logger.exception("Failed to update %s/%s", table, record_id)
            raise RemoteError(f"Erro ao atualizar {table}") from exc
        if not response.data:
            raise NotFound(f"Registro {record_id} não encontrado")

    def delete(self, table: str, user_id: str, record_id: str) -> None:
        try:
            response = (
                self.client.table(table)
                .delete()
                .eq("id", record_id)
                .eq(USER_COLUMN, user_id)
                .execute()
            )
        except Exception as exc:
            logger.exception("Failed to delete %s/%s", table, record_id)
            raise RemoteError(f"Erro ao excluir de {table}") from exc
        if not response.data:
            raise NotFound(f"Registro {record_id} não encontrado")

    # ------------------------------------------------------------------
    # Profiles (keyed by the identity provider's user id)
    # ------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        try:
            response = self.client.table(PROFILES_TABLE).select("*").eq("id", user_id).execute()
        except Exception as exc:
            logger.exception("Failed to load profile %s", user_id)
            raise RemoteError("Erro ao carregar perfil") from exc
        return response.data[0] if response.data else None

    def create_profile(self, user_id: str, document: dict[str, Any]) -> None:
        try:
            self.client.table(PROFILES_TABLE).insert({**document, "id": user_id}).execute()
        except Exception as exc:
            logger.exception("Failed to create profile %s", user_id)
            raise RemoteError("Erro ao criar perfil") from exc
