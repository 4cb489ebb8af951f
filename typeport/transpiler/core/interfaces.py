"""Core interfaces for the transpiler system.

This module defines the core interfaces used throughout the transpiling process,
providing language-agnostic abstractions for the various components.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from typeport.transpiler.formatter import TypeIndex
    from typeport.transpiler.models import SpecialType


class TargetLanguage(Enum):
    """Supported target language types."""

    PYTHON = "python"
    GO = "go"

    @classmethod
    def from_name(cls, name: str) -> "TargetLanguage":
        """Look up a target language by its configuration name.

        Args:
            name: Case-insensitive language name, e.g. ``"python"``

        Returns:
            The matching target language

        Raises:
            ValueError: If no target language has that name
        """
        try:
            return cls(name.lower())
        except ValueError:
            known = ", ".join(lang.value for lang in cls)
            raise ValueError(f"Unknown target language: {name} (known: {known})")


class TypeRenderer(Protocol):
    """Interface the type formatter needs from a target language backend."""

    language: TargetLanguage

    @property
    def type_mappings(self) -> Mapping[str, str]:
        """Source type name to target type name substitutions."""
        ...

    def format_special_type(
        self,
        special: "SpecialType",
        generic_types: Sequence[str],
        index: "TypeIndex",
    ) -> str:
        """Render a built-in shape in the target language.

        Args:
            special: The built-in shape to render
            generic_types: Generic parameter names in scope
            index: Per-run lookup tables derived from the snapshot

        Returns:
            Target language type expression
        """
        ...

    def format_generic_parameters(self, parameters: Sequence[str]) -> str:
        """Render already formatted generic arguments, e.g. ``[A, B]``.

        Args:
            parameters: Formatted generic arguments

        Returns:
            Argument list suffix to append to a type name
        """
        ...

    def format_forward_reference(self, name: str) -> str:
        """Render a reference to a type that is only declared later in the output."""
        ...
