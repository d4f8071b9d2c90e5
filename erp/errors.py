"""
erp/errors.py

Error taxonomy shared by the gate, the store and the blueprints.

Every error carries the HTTP status it maps to. The app factory registers a
single handler that renders them as {"message": ..., "errors": {...}}.
"""

from __future__ import annotations

from typing import Dict, List, Optional


class ErpError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"message": self.message}


class Unauthenticated(ErpError):
    """No valid session."""

    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ErpError):
    """Session present, role insufficient."""

    status_code = 403
    default_message = "Forbidden"


class NotFound(ErpError):
    status_code = 404
    default_message = "Not found"


class ValidationFailure(ErpError):
    """
    Malformed or missing input, detected before anything is persisted.

    `errors` maps field names to messages, in the shape WTForms produces.
    """

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class StoreFailure(ErpError):
    """Backing store unreachable or constraint violated. Never retried."""

    status_code = 500
    default_message = "Storage failure"


class DataIntegrityError(StoreFailure):
    """Persisted data violates an invariant (e.g. unknown budget item type)."""

    default_message = "Stored data failed an integrity check"
