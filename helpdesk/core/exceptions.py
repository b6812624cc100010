"""Domain-level exception hierarchy for service and repository layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist (or is inactive)."""


class NotFoundOrForbiddenError(NotFoundError):
    """Raised when an entity is missing or owned by someone else.

    The two cases are reported identically so callers cannot probe for
    reports they do not own.
    """


class InvalidStateError(DomainError):
    """Raised when the entity's current status disallows the operation."""


class ConflictError(DomainError):
    """Raised when a state conflict occurs (e.g. duplicate entries)."""


class ValidationError(DomainError):
    """Raised when input validation fails at the domain/service layer."""


class AuthenticationError(DomainError):
    """Raised when credentials are rejected."""


class InfrastructureError(DomainError):
    """Raised when infrastructure (DB or external service) is unavailable."""
