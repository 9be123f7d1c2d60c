"""
Domain error taxonomy.

Services raise these; the HTTP layer maps them to status codes
(ValidationError -> 400, NotFoundError -> 404, ConflictError -> 409).
"""
from typing import Any, Dict, List, Optional


class DealershipError(Exception):
    """Base class for errors surfaced by the domain services."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DealershipError):
    """Malformed or missing input. Raised before any record store access."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or [{"msg": message}]

    @classmethod
    def from_problems(cls, problems: List[Dict[str, Any]]) -> "ValidationError":
        summary = "; ".join(p["msg"] for p in problems)
        return cls(summary, problems)


class NotFoundError(DealershipError):
    """A referenced id does not resolve to a record."""

    status_code = 404


class ConflictError(DealershipError):
    """The write would violate a uniqueness constraint."""

    status_code = 409
