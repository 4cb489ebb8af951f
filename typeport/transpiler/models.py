"""
Data models and structures for the type transpiler.

This module contains the dataclass definitions used throughout the transpiler
to represent structs, enums, type aliases, fields and the type references they
carry. Every model is immutable: the upstream parser builds a snapshot once and
the generators only ever read it.
"""

from collections.abc import Iterator, Mapping
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class SpecialKind(Enum):
    """Built-in type shapes with universal cross-language semantics.

    Values are the spellings used in source type expressions.
    """

    VEC = "Vec"
    ARRAY = "Array"
    SLICE = "Slice"
    OPTION = "Option"
    MAP = "HashMap"
    UNIT = "()"
    STRING = "String"
    CHAR = "char"
    BOOL = "bool"
    F32 = "f32"
    F64 = "f64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I54 = "I54"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U53 = "U53"
    U64 = "u64"
    USIZE = "usize"


# Shapes that hold their parameters behind a layer of indirection
INDIRECT_KINDS = frozenset(
    {
        SpecialKind.VEC,
        SpecialKind.ARRAY,
        SpecialKind.SLICE,
        SpecialKind.OPTION,
        SpecialKind.MAP,
    }
)

INTEGER_KINDS = frozenset(
    {
        SpecialKind.I8,
        SpecialKind.I16,
        SpecialKind.I32,
        SpecialKind.I64,
        SpecialKind.I54,
        SpecialKind.ISIZE,
        SpecialKind.U8,
        SpecialKind.U16,
        SpecialKind.U32,
        SpecialKind.U53,
        SpecialKind.U64,
        SpecialKind.USIZE,
    }
)


@dataclass(frozen=True)
class TypeRef(ABC):
    """Base class for a reference to a type from a field, variant or alias."""

    @property
    @abstractmethod
    def id(self) -> str:
        pass

    @property
    def is_optional(self) -> bool:
        return False

    def unwrap_optional(self) -> "TypeRef":
        """Return the wrapped type of a top-level ``Option``, or the type itself."""
        return self

    @abstractmethod
    def named_references(self, direct: bool = True) -> Iterator[tuple[str, bool]]:
        """Yield every named reference reachable from this type.

        Args:
            direct: Whether this type itself is reached without indirection

        Yields:
            Tuples of (type name, reached without container or optional indirection)
        """
        pass


@dataclass(frozen=True)
class NamedType(TypeRef):
    """Reference to a user type or a generic parameter.

    Attributes:
        name: Referenced type name as written in the source
        parameters: Generic arguments, in order
    """

    name: str
    parameters: tuple[TypeRef, ...] = ()

    @property
    def id(self) -> str:
        return self.name

    def named_references(self, direct: bool = True) -> Iterator[tuple[str, bool]]:
        yield self.name, direct
        for parameter in self.parameters:
            yield from parameter.named_references(direct)


@dataclass(frozen=True)
class SpecialType(TypeRef):
    """One of the closed set of built-in shapes.

    Attributes:
        kind: Which built-in shape this is
        parameters: Element, key/value or wrapped types for container shapes
        length: Element count for fixed-size arrays
    """

    kind: SpecialKind
    parameters: tuple[TypeRef, ...] = ()
    length: int | None = None

    @property
    def id(self) -> str:
        return self.kind.value

    @property
    def is_optional(self) -> bool:
        return self.kind is SpecialKind.OPTION

    def unwrap_optional(self) -> TypeRef:
        if self.is_optional:
            return self.parameters[0]
        return self

    def named_references(self, direct: bool = True) -> Iterator[tuple[str, bool]]:
        inner_direct = direct and self.kind not in INDIRECT_KINDS
        for parameter in self.parameters:
            yield from parameter.named_references(inner_direct)


@dataclass(frozen=True)
class Id:
    """Identity of a type, field or variant.

    Attributes:
        original: Name as declared in the source language
        renamed: Exported or serialized name, defaults to the original
    """

    original: str
    renamed: str = ""

    def __post_init__(self) -> None:
        if not self.renamed:
            object.__setattr__(self, "renamed", self.original)

    @property
    def is_renamed(self) -> bool:
        return self.renamed != self.original


@dataclass(frozen=True)
class FieldDef:
    """Field of a struct or of a struct-shaped enum variant.

    Attributes:
        id: Field identity; a differing renamed form needs a mapping annotation
        ty: Field type
        comments: Documentation comment lines
        type_overrides: Literal type per target language name, bypassing formatting
        has_default: Whether the source declares a default for the field
    """

    id: Id
    ty: TypeRef
    comments: tuple[str, ...] = ()
    type_overrides: Mapping[str, str] = field(default_factory=dict, hash=False)
    has_default: bool = False

    def type_override(self, language: str) -> str | None:
        return self.type_overrides.get(language)


@dataclass(frozen=True)
class StructDef:
    """Record type with named fields.

    Attributes:
        id: Struct identity
        fields: Fields in declaration order
        generic_types: Names of the generic parameters
        comments: Documentation comment lines
    """

    id: Id
    fields: tuple[FieldDef, ...] = ()
    generic_types: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()

    def dependencies(self) -> Iterator[tuple[str, bool]]:
        for f in self.fields:
            yield from f.ty.named_references()


class VariantKind(Enum):
    """Shape of an enum variant's payload."""

    UNIT = auto()
    TUPLE = auto()
    STRUCT = auto()


@dataclass(frozen=True)
class EnumVariant:
    """Single variant of an enum.

    Attributes:
        id: Variant identity
        kind: Payload shape
        ty: Payload type for tuple variants
        fields: Payload fields for struct variants
        comments: Documentation comment lines
    """

    id: Id
    kind: VariantKind = VariantKind.UNIT
    ty: TypeRef | None = None
    fields: tuple[FieldDef, ...] = ()
    comments: tuple[str, ...] = ()

    def dependencies(self) -> Iterator[tuple[str, bool]]:
        if self.ty is not None:
            yield from self.ty.named_references()
        for f in self.fields:
            yield from f.ty.named_references()


@dataclass(frozen=True)
class EnumDef:
    """Sum type.

    Attributes:
        id: Enum identity
        variants: Variants in declaration order
        generic_types: Names of the generic parameters
        comments: Documentation comment lines
        tag_key: Serialized key holding the variant name of algebraic enums
        content_key: Serialized key holding the variant payload of algebraic enums
    """

    id: Id
    variants: tuple[EnumVariant, ...] = ()
    generic_types: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()
    tag_key: str = "type"
    content_key: str = "content"

    @property
    def is_unit(self) -> bool:
        return all(v.kind is VariantKind.UNIT for v in self.variants)

    def dependencies(self) -> Iterator[tuple[str, bool]]:
        for variant in self.variants:
            yield from variant.dependencies()


@dataclass(frozen=True)
class AliasDef:
    """New name bound to an existing type.

    Attributes:
        id: Alias identity
        ty: Aliased type
        generic_types: Names of the generic parameters
        comments: Documentation comment lines
    """

    id: Id
    ty: TypeRef
    generic_types: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()

    def dependencies(self) -> Iterator[tuple[str, bool]]:
        yield from self.ty.named_references()


TypeItem = Union[StructDef, EnumDef, AliasDef]


@dataclass(frozen=True)
class ParsedData:
    """Snapshot of all type definitions handed over by the parser.

    Attributes:
        structs: Struct definitions in declaration order
        enums: Enum definitions in declaration order
        aliases: Type alias definitions in declaration order
    """

    structs: tuple[StructDef, ...] = ()
    enums: tuple[EnumDef, ...] = ()
    aliases: tuple[AliasDef, ...] = ()

    def items(self) -> list[TypeItem]:
        """Collect every definition into one worklist: structs, enums, then aliases."""
        return [*self.structs, *self.enums, *self.aliases]
