"""
Identity — email/password and third-party sign-in against the managed
identity service, plus the user profile row that goes with an account.
"""
from __future__ import annotations

import datetime as dt
import logging
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from supabase import Client

from fintrack.config import (
    DEFAULT_PLAN,
    LOCAL_TIMEZONE,
    OAUTH_DEFAULT_PROVIDER,
    OAUTH_FLOW_TTL,
    OAUTH_REDIRECT_URL,
)
from fintrack.data.models import UserProfile
from fintrack.data.repository import FinanceRepository
from fintrack.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str]
    access_token: str


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: Optional[str]
    access_token: Optional[str]
    refresh_token: Optional[str]

    @property
    def confirmed(self) -> bool:
        """False when the provider is still waiting for an e-mail confirmation."""
        return self.access_token is not None


def _session_from(response) -> AuthSession:
    if response.user is None:
        raise AuthError("Não foi possível autenticar")
    session = response.session
    return AuthSession(
        user_id=str(response.user.id),
        email=response.user.email,
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
    )


@dataclass(frozen=True)
class OAuthFlow:
    flow_id: str
    url: str


def _with_query(url: str, **params: str) -> str:
    parts = urlsplit(url)
    query = parse_qsl(parts.query) + list(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


class IdentityService:
    """Wraps the identity client and keeps user profiles in step with accounts.

    ``client`` should be dedicated to auth: signing in stores a session on
    the client it is called on. ``flow_client_factory`` builds a fresh
    client for every redirect sign-in.
    """

    def __init__(
        self,
        client: Client,
        repository: FinanceRepository,
        flow_client_factory: Callable[[], Client],
    ) -> None:
        self.client = client
        self.repository = repository
        self.flow_client_factory = flow_client_factory
        self._flows: dict[str, tuple[float, Client]] = {}
        self._flows_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Email + password
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            logger.warning("Sign-in failed for %s: %s", email, exc)
            raise AuthError("E-mail ou senha inválidos") from exc
        return _session_from(response)

    def sign_up(self, email: str, password: str) -> AuthSession:
        """Create the account and its profile (plan ``free``)."""
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:
            logger.warning("Sign-up failed for %s: %s", email, exc)
            raise AuthError(f"Não foi possível criar a conta: {exc}") from exc

        session = _session_from(response)
        profile = UserProfile(email=email, plan=DEFAULT_PLAN, created_at=_now())
        self.repository.create_profile(session.user_id, profile.to_document())
        logger.info("Created account %s", session.user_id)
        return session

    # ------------------------------------------------------------------
    # Third-party redirect sign-in
    # ------------------------------------------------------------------

    def start_oauth(self, provider: str = OAUTH_DEFAULT_PROVIDER, redirect_to: str = OAUTH_REDIRECT_URL) -> OAuthFlow:
        """Begin a redirect sign-in on a client of its own.

        The client keeps this flow's PKCE verifier until the callback
        names the flow again, so concurrent sign-ins never share one.
        """
        flow_id = secrets.token_urlsafe(16)
        client = self.flow_client_factory()
        try:
            response = client.auth.sign_in_with_oauth({
                "provider": provider,
                "options": {"redirect_to": _with_query(redirect_to, flow=flow_id)},
            })
        except Exception as exc:
            logger.warning("OAuth start failed for %s: %s", provider, exc)
            raise AuthError(f"Provedor de login indisponível: {provider}") from exc

        now = time.monotonic()
        with self._flows_lock:
            expired = [key for key, (started, _) in self._flows.items() if now - started > OAUTH_FLOW_TTL]
            for key in expired:
                del self._flows[key]
            self._flows[flow_id] = (now, client)
        if expired:
            logger.info("Discarded %d expired sign-in flow(s)", len(expired))
        return OAuthFlow(flow_id=flow_id, url=response.url)

    def complete_oauth(self, code: str, flow_id: str) -> AuthSession:
        """Exchange the callback code on the flow's own client; the profile is created only if missing."""
        with self._flows_lock:
            entry = self._flows.pop(flow_id, None)
        if entry is None or time.monotonic() - entry[0] > OAUTH_FLOW_TTL:
            logger.info("OAuth callback for unknown or expired flow %s", flow_id)
            raise AuthError("Login expirado, tente novamente")
        _, client = entry

        try:
            response = client.auth.exchange_code_for_session({"auth_code": code})
        except Exception as exc:
            logger.warning("OAuth callback failed: %s", exc)
            raise AuthError("Não foi possível concluir o login") from exc

        session = _session_from(response)
        if self.repository.get_profile(session.user_id) is None:
            metadata = response.user.user_metadata or {}
            profile = UserProfile(
                email=response.user.email,
                name=metadata.get("full_name") or metadata.get("name"),
                photo_url=metadata.get("avatar_url") or metadata.get("picture"),
                plan=DEFAULT_PLAN,
                created_at=_now(),
            )
            self.repository.create_profile(session.user_id, profile.to_document())
            logger.info("Created profile for %s after third-party sign-in", session.user_id)
        return session

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def verify(self, access_token: str) -> CurrentUser:
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as exc:
            logger.info("Rejected access token: %s", exc)
            raise AuthError("Sessão inválida ou expirada") from exc
        if response is None or response.user is None:
            raise AuthError("Sessão inválida ou expirada")
        return CurrentUser(id=str(response.user.id), email=response.user.email, access_token=access_token)

    def sign_out(self, access_token: str) -> None:
        try:
            self.client.auth.admin.sign_out(access_token)
        except Exception as exc:
            logger.warning("Sign-out failed: %s", exc)
            raise AuthError("Não foi possível encerrar a sessão") from exc

    def profile(self, user_id: str) -> Optional[UserProfile]:
        document = self.repository.get_profile(user_id)
        if document is None:
            return None
        return UserProfile.model_validate({**document, "id": str(document["id"])})


def _now() -> dt.datetime:
    return dt.datetime.now(LOCAL_TIMEZONE)
