from __future__ import annotations

from typing import Optional

from .enums import DenyReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when no authenticated principal can be established."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""

    def __init__(self, message: str, *, reason: DenyReason = DenyReason.NO_PERMISSION):
        super().__init__(message)
        self.reason = reason


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when the current state of an entity forbids the operation."""

    retryable = False


class ConcurrentModificationError(ConflictError):
    """Raised when an optimistic version check fails; the caller may re-read and retry."""

    retryable = True

    def __init__(self, entity: str, entity_id: object, expected_version: Optional[int] = None):
        super().__init__(f"{entity} {entity_id} was modified concurrently")
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
