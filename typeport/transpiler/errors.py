"""
Exceptions and error handling for the type transpiler.

This module defines custom exceptions that are raised during the transpilation process.
"""

from typing import Any, Optional, Sequence


class TranspilerError(Exception):
    """Exception raised for errors during type definition transpilation.

    This is the main exception class used throughout the transpiler to report errors
    in a user-friendly way. Every error can carry the identity of the type item it
    was raised for, so callers can build an actionable message.

    Examples:
        >>> raise TranspilerError("Unknown type", item="Point")
        TranspilerError: Unknown type (in Point)
    """

    def __init__(self, message: str, item: Optional[str] = None):
        """Initialize the exception with a message and optional item identity.

        Args:
            message: The error message
            item: Optional name of the type item where the error occurred
        """
        self.message = message
        self.item = item

        location_info = f" (in {item})" if item else ""
        super().__init__(f"{message}{location_info}")

    def with_item(self, item: str) -> "TranspilerError":
        """Create a new TranspilerError with the same message but a different item.

        Args:
            item: Name of the type item to associate with the error

        Returns:
            A new TranspilerError instance with the updated item
        """
        return type(self)(self.message, item)


class UnresolvableCycleError(TranspilerError):
    """Raised when type items reference each other in a cycle with no indirection.

    Such a graph cannot be linearized, and picking an arbitrary order would
    produce invalid output for targets that need declared-before-use types.
    """

    def __init__(self, participants: Sequence[str]):
        self.participants = tuple(participants)
        super().__init__(
            "Unresolvable reference cycle between types: "
            + " -> ".join(self.participants)
        )

    def with_item(self, item: str) -> "UnresolvableCycleError":
        return self


class UnsupportedConstructError(TranspilerError):
    """Raised when a backend is asked to emit a construct it cannot represent."""

    def __init__(self, construct: str, item: str, language: str):
        self.construct = construct
        self.language = language
        super().__init__(f"{construct} is not supported by the {language} backend", item)

    def with_item(self, item: str) -> "UnsupportedConstructError":
        return UnsupportedConstructError(self.construct, item, self.language)


class TypeFormatError(TranspilerError):
    """Raised when a type reference cannot be expressed in the target language."""

    def __init__(self, message: str, ty: Any = None, item: Optional[str] = None):
        self.ty = ty
        super().__init__(message, item)

    def with_item(self, item: str) -> "TypeFormatError":
        return TypeFormatError(self.message, self.ty, item)


class SinkWriteError(TranspilerError):
    """Raised when the output sink rejects a write.

    The original ``OSError`` is kept as ``__cause__``; the write is not retried.
    """


class SnapshotError(TranspilerError):
    """Raised for malformed snapshot documents handed over by the parser."""


class ConfigError(TranspilerError):
    """Raised for invalid generator configuration."""
