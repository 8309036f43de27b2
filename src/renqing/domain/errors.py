"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested transaction or contact does not exist."""


class LedgerImportError(DomainError):
    """Base class for outcomes that stop an import from applying."""


class ParseError(LedgerImportError):
    """Data is not valid serialized structure."""


class FormatError(LedgerImportError):
    """Data parsed, but is not one of the supported container shapes."""


class AllDuplicatesError(LedgerImportError):
    """Every incoming transaction already exists. Informational, not a failure."""


class ReadError(LedgerImportError):
    """The import file could not be read."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction '{transaction_id}' not found"


def person_not_found(person_id: str) -> str:
    """Return message for missing contact."""
    return f"Person '{person_id}' not found"


def unknown_import_format() -> str:
    """Return message for an unrecognized import container."""
    return (
        "Unknown file format: expected {\"transactions\": [...]} "
        "or {\"payload\": {\"transactions\": [...]}}"
    )


def invalid_import_record(index: int, reason: str) -> str:
    """Return message for an import record that cannot be mapped."""
    return f"Record {index}: {reason}"


def all_duplicates(count: int) -> str:
    """Return message when nothing new was found in an import."""
    if count == 0:
        return "File contains no transactions; nothing to import"
    return (
        f"All {count} transaction{'s' if count != 1 else ''} already exist; "
        "nothing new to import"
    )
