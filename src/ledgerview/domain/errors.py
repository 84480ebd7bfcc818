"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested collection or record does not exist."""


class InvalidArgumentError(ValidationError):
    """A caller passed an argument outside the operation's domain.

    Treated as a programming error rather than a user-facing condition.
    """


class InvalidTransitionError(ValidationError):
    """Dialog state change not allowed from the current state."""


def invalid_page_size(page_size: int) -> str:
    """Return message for a non-positive page size."""
    return f"Page size must be a positive integer, got {page_size}"


def invalid_page(page: object) -> str:
    """Return message for a page number that is not an integer."""
    return f"Page must be an integer, got {page!r}"


def invalid_transition(action: str, state: str) -> str:
    """Return message for a dialog transition attempted from the wrong state."""
    return f"Cannot {action} a dialog that is {state}"


def collection_not_found(collection: str, location: str) -> str:
    """Return message for a missing snapshot collection."""
    return f"Collection '{collection}' not found in {location}"


def malformed_collection(collection: str, reason: str) -> str:
    """Return message for a snapshot that could not be decoded."""
    return f"Collection '{collection}' is not valid JSON: {reason}"


def unknown_status_filter(status: str) -> str:
    """Return message for an unsupported personnel status filter."""
    return f"Unknown status filter '{status}'. Supported: all, active, inactive"
