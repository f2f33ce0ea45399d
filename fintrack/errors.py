"""
Error taxonomy shared by the data layer and the API.
"""
from __future__ import annotations


class FinanceError(Exception):
    """Base class for every failure a user action can end in."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RemoteError(FinanceError):
    """The managed database or identity service rejected or failed a call."""

    status_code = 502


class NotFound(FinanceError):
    status_code = 404


class AuthError(FinanceError):
    status_code = 401


class ImportFailed(FinanceError):
    """The uploaded file could not be read as delimited text at all."""

    status_code = 400


class NothingToExport(FinanceError):
    status_code = 404
