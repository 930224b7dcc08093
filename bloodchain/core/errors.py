"""
Error types for BloodChain

Every error raised by the storage layer or the request handlers derives from
BloodChainError and carries the HTTP status it maps to, so the API layer can
translate it into a JSON error body without knowing the concrete type.
"""

from typing import Any


class BloodChainError(Exception):
    """Base class for BloodChain errors"""
    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(BloodChainError):
    """Raised when a request payload is malformed or carries invalid values"""
    status_code = 400


class ConflictError(BloodChainError):
    """Raised when a unique key (wallet address, token id) is already taken"""
    status_code = 400


class NotFoundError(BloodChainError):
    """Raised when a lookup by id or key has no match"""
    status_code = 404


class InternalError(BloodChainError):
    """Raised for unexpected failures"""
    status_code = 500
