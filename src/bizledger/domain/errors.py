"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class BusinessDeletionError(DomainError):
    """Deleting the business would leave the business list empty."""


class ImportFormatError(DomainError):
    """Backup text is not a usable backup record."""


class StorageError(RuntimeError):
    """Base class for key-value store failures."""


class StorageWriteError(StorageError):
    """Value could not be serialized or written."""


class StorageReadError(StorageError):
    """Stored value could not be read or decoded.

    Raised and caught inside the store adapter only; callers observe ``None``.
    """


class MigrationError(StorageError):
    """A migration step failed; the stored version is left unchanged."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction '{transaction_id}' not found"


def business_not_found(business_id: str) -> str:
    """Return message for missing business."""
    return f"Business '{business_id}' not found"


def last_business_delete_blocked(business_id: str) -> str:
    """Return message when the only remaining business would be deleted."""
    return (
        f"Cannot delete business '{business_id}': it is the last business. "
        "Create another business first."
    )


def invalid_choice(field: str, value: object, choices: list[str]) -> str:
    """Return message for a value outside an enumerated set."""
    return f"Invalid {field} {value!r}. Expected one of: {', '.join(choices)}"
