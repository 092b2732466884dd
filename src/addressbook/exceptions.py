"""Error types raised by the address book utility."""

from typing import Optional


class AddressBookError(Exception):
    """Base error for every failure the utility reports."""


class UsageError(AddressBookError):
    """Raised for missing or conflicting command-line arguments."""


class InputUnavailableError(AddressBookError):
    """Raised when the input path is unreadable or the URL is unreachable."""


class UnsupportedMimeTypeError(AddressBookError):
    """Raised when the input is neither JSON nor XML."""

    def __init__(self, mime_type: Optional[str], source: str,
                 expected: str = "one of application/json or application/xml") -> None:
        self.mime_type = mime_type
        self.source = source
        super().__init__(f"Input {source} has type {mime_type or 'unknown'}; must be {expected}")


class MalformedInputError(AddressBookError):
    """Raised when content does not parse as the type it claims to be."""


class EmptyInputError(MalformedInputError):
    """Raised when there is no content to convert or validate."""


class AmbiguousRootError(AddressBookError):
    """Raised when a JSON document does not have exactly one root key."""


class ValidationError(AddressBookError):
    """Raised with the first schema violation found in an XML document."""

    def __init__(self, reason: str, path: Optional[str] = None, element: Optional[str] = None) -> None:
        self.reason = reason
        self.path = path
        self.element = element
        message = reason
        if path:
            message = f"{reason} (at {path})"
        elif element:
            message = f"{reason} (in <{element}>)"
        super().__init__(message)


class SchemaLoadError(AddressBookError):
    """Raised when the address book schema cannot be compiled."""


class OutputNotWritableError(AddressBookError):
    """Raised when the destination cannot be written."""


__all__ = [
    "AddressBookError",
    "UsageError",
    "InputUnavailableError",
    "UnsupportedMimeTypeError",
    "MalformedInputError",
    "EmptyInputError",
    "AmbiguousRootError",
    "ValidationError",
    "SchemaLoadError",
    "OutputNotWritableError",
]
