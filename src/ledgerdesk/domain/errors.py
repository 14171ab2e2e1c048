"""Shared domain error messages and error types."""

from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class PreconditionError(DomainError):
    """Missing session identity or required identifier, raised before any remote call."""


class ValidationError(DomainError):
    """Invalid input or failed ledger validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist in the loaded list."""


class OperationError(DomainError):
    """The backend answered but reported failure.

    Carries the backend message verbatim and the raw response for diagnostics.
    """

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.response = response


class CacheCorruptionError(DomainError):
    """Serialized overlay cache content could not be decoded."""


DEFAULT_OPERATION_MESSAGE = "Operation failed"


def missing_session() -> str:
    """Return message for a session without its identity token."""
    return "Invalid session (missing session id)"


def missing_identifier(entity_label: str, id_field: str) -> str:
    """Return message for update/deactivate without the entity id."""
    return f"Cannot modify {entity_label}: missing {id_field}"


def required_field(field_name: str) -> str:
    """Return message for a required, empty field."""
    return f"{field_name} is required"


def self_parent(group_id: Any) -> str:
    """Return message for an account group pointing at itself."""
    return f"Account group {group_id} cannot be its own parent"


def entity_not_found(entity_label: str, ref: Any) -> str:
    """Return message for an unknown id or code."""
    return f"{entity_label} '{ref}' not found"
