"""
Failure taxonomy shared by the storage gateway, content core and API.

Every failure carries a ``kind`` so callers can tell validation problems,
missing rows, rejected credentials and storage errors apart without
string matching.
"""

from __future__ import annotations

from typing import Any, Optional


class ContentFailure(Exception):
    """Base class for all structured failures."""

    kind = "failure"
    status_code = 500

    def __init__(self, message: str, *, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.message, "kind": self.kind}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationFailure(ContentFailure):
    """Malformed or missing input. Raised before any storage is touched."""

    kind = "validation"
    status_code = 400


class NotFoundFailure(ContentFailure):
    """A referenced section, grid, product or user does not exist."""

    kind = "not_found"
    status_code = 404


class AuthFailure(ContentFailure):
    """Missing (401) or invalid/expired (403) credential."""

    kind = "auth"

    def __init__(self, message: str, *, status_code: int = 401, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.status_code = status_code


class PersistenceFailure(ContentFailure):
    """Storage error during a read or a write."""

    kind = "persistence"
    status_code = 500


# Read paths surface storage errors under this name.
ReadFailure = PersistenceFailure
