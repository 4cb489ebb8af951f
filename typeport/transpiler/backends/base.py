"""Backend contract shared by all target language generators."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TextIO

from loguru import logger

from typeport.transpiler.core.dependency import sort_items
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import (
    SinkWriteError,
    TranspilerError,
    UnsupportedConstructError,
)
from typeport.transpiler.formatter import EMPTY_INDEX, TypeIndex, format_type
from typeport.transpiler.models import (
    AliasDef,
    EnumDef,
    FieldDef,
    NamedType,
    ParsedData,
    SpecialType,
    StructDef,
    TypeItem,
    TypeRef,
)
from typeport.transpiler.backends.models import BackendConfig


class Backend(ABC):
    """Base abstract interface for all target language backends.

    A backend renders each kind of type item into lines of target language code.
    The driver, ``generate_types``, is shared: it orders the items, renders the
    whole document and writes it to the sink only once everything succeeded.
    """

    language: TargetLanguage
    supports_enums: bool = False
    comment_prefix: str = "//"
    indent: str = "\t"
    item_separator: str = "\n\n"

    def __init__(self, config: BackendConfig):
        self.config = config

    @property
    def type_mappings(self) -> Mapping[str, str]:
        return self.config.type_mappings

    def type_overrides(self) -> dict[tuple[str, TargetLanguage], str]:
        """Literal field types keyed by (``Struct.field`` or type name, language)."""
        return {
            (key, self.language): value
            for key, value in self.config.type_overrides.items()
        }

    def generate_types(self, sink: TextIO, data: ParsedData) -> None:
        """Generate the code for all types in the snapshot and write it to the sink.

        Args:
            sink: Append-only text output
            data: Snapshot of all type definitions

        Raises:
            TranspilerError: If any item cannot be generated; nothing is written
            SinkWriteError: If the sink rejects the write
        """
        code = self.generate_code(data)
        try:
            sink.write(code)
        except OSError as e:
            raise SinkWriteError(
                f"Failed to write {self.config.name} output: {e}"
            ) from e

    def generate_code(self, data: ParsedData) -> str:
        """Generate the code for all types in the snapshot.

        Args:
            data: Snapshot of all type definitions

        Returns:
            The complete generated document
        """
        logger.debug(f"Starting {self.config.name} generation")

        items = data.items()
        ordered = sort_items(items)
        index = TypeIndex.from_items(items, ordered)

        blocks = [self.begin_file(data)]
        for item in ordered:
            blocks.append(self.write_item(item, index))
        blocks.append(self.end_file(data))

        code = self.item_separator.join("\n".join(b) for b in blocks if b)
        return f"{code}\n"

    def write_item(self, item: TypeItem, index: TypeIndex) -> list[str]:
        """Dispatch a type item to the matching writer.

        Errors raised without an item identity get the item's name attached.
        """
        logger.debug(f"Writing {type(item).__name__} {item.id.original}")
        try:
            if isinstance(item, StructDef):
                return self.write_struct(item, index)
            elif isinstance(item, EnumDef):
                return self.write_enum(item, index)
            elif isinstance(item, AliasDef):
                return self.write_type_alias(item, index)
            else:
                raise TranspilerError(f"Unknown type item: {item!r}")
        except TranspilerError as e:
            if e.item is None:
                raise e.with_item(item.id.original) from e
            raise

    def begin_file(self, data: ParsedData) -> list[str]:
        """Generate file framing emitted before all items."""
        return []

    def end_file(self, data: ParsedData) -> list[str]:
        """Generate file framing emitted after all items."""
        return []

    @abstractmethod
    def write_struct(self, rs: StructDef, index: TypeIndex = EMPTY_INDEX) -> list[str]:
        """Generate a struct declaration."""
        pass

    def write_enum(self, e: EnumDef, index: TypeIndex = EMPTY_INDEX) -> list[str]:
        """Generate an enum declaration.

        Backends that can represent sum types set ``supports_enums`` and override
        this method.

        Raises:
            UnsupportedConstructError: Always, for backends without enum support
        """
        raise UnsupportedConstructError("enum", e.id.original, self.config.name)

    @abstractmethod
    def write_type_alias(
        self, ty: AliasDef, index: TypeIndex = EMPTY_INDEX
    ) -> list[str]:
        """Generate a type alias declaration."""
        pass

    @abstractmethod
    def format_special_type(
        self,
        special: SpecialType,
        generic_types: Sequence[str],
        index: TypeIndex = EMPTY_INDEX,
    ) -> str:
        """Render a built-in shape in the target language."""
        pass

    @abstractmethod
    def format_generic_parameters(self, parameters: Sequence[str]) -> str:
        """Render already formatted generic arguments."""
        pass

    def format_forward_reference(self, name: str) -> str:
        """Render a reference to a type emitted later in the document."""
        return name

    def format_type(
        self,
        ty: TypeRef,
        generic_types: Sequence[str],
        index: TypeIndex = EMPTY_INDEX,
    ) -> str:
        return format_type(self, ty, generic_types, index)

    def field_type_override(self, owner: str, f: FieldDef) -> str | None:
        """Find a literal type forced for a field in this backend.

        The field's own override wins, then ``Owner.field``, then the name of the
        field's (non-optional) named type.
        """
        override = f.type_override(self.language.value)
        if override is not None:
            return override

        overrides = self.type_overrides()
        override = overrides.get((f"{owner}.{f.id.original}", self.language))
        if override is not None:
            return override

        inner = f.ty.unwrap_optional()
        if isinstance(inner, NamedType):
            return overrides.get((inner.name, self.language))
        return None

    def format_field_type(
        self,
        owner: str,
        f: FieldDef,
        generic_types: Sequence[str],
        index: TypeIndex = EMPTY_INDEX,
    ) -> str:
        """Resolve the effective type of a field, without its nullability marker.

        A top-level ``Option`` is unwrapped here; the caller decides how to mark
        the field nullable, so optional fields are never wrapped twice.
        """
        override = self.field_type_override(owner, f)
        if override is not None:
            return override
        return self.format_type(f.ty.unwrap_optional(), generic_types, index)

    def write_comments(self, comments: Sequence[str], indent: int = 0) -> list[str]:
        prefix = self.indent * indent
        return [
            f"{prefix}{self.comment_prefix} {comment}".rstrip() for comment in comments
        ]
