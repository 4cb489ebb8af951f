"""Type reference formatting shared by every backend.

The formatter walks a (possibly generic, possibly nested) type reference and
asks the backend only for the syntax of each built-in shape. Named references
are resolved here, so every backend treats renames and type mappings the same
way.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from typeport.transpiler.core.interfaces import TypeRenderer
from typeport.transpiler.errors import TypeFormatError
from typeport.transpiler.models import (
    AliasDef,
    NamedType,
    SpecialType,
    StructDef,
    TypeItem,
    TypeRef,
)


def struct_like_types(items: Iterable[TypeItem]) -> frozenset[str]:
    """Find every type name that behaves as a multi-field record.

    Seeds the set with all struct names, then adds aliases whose target names a
    struct-like type until nothing changes, so alias chains resolve regardless of
    declaration order.

    Args:
        items: Type items of the current generation run

    Returns:
        Original names of all struct-like types
    """
    items = list(items)
    struct_like = {item.id.original for item in items if isinstance(item, StructDef)}
    aliases = [item for item in items if isinstance(item, AliasDef)]

    changed = True
    while changed:
        changed = False
        for alias in aliases:
            if alias.id.original in struct_like:
                continue
            if isinstance(alias.ty, NamedType) and alias.ty.name in struct_like:
                struct_like.add(alias.id.original)
                changed = True

    return frozenset(struct_like)


@dataclass(frozen=True)
class TypeIndex:
    """Lookup tables derived once per generation run from the snapshot.

    Attributes:
        struct_like: Names of types that behave as records (see ``struct_like_types``)
        renamed: Original type name to exported name, for renamed types only
        order: Emission position of every type name
        forward: Names to render as forward references
    """

    struct_like: frozenset[str] = frozenset()
    renamed: Mapping[str, str] = field(default_factory=dict, hash=False)
    order: Mapping[str, int] = field(default_factory=dict, hash=False)
    forward: frozenset[str] = frozenset()

    @classmethod
    def from_items(
        cls, items: Iterable[TypeItem], ordered: Iterable[TypeItem] = ()
    ) -> "TypeIndex":
        items = list(items)
        return cls(
            struct_like=struct_like_types(items),
            renamed={
                item.id.original: item.id.renamed
                for item in items
                if item.id.is_renamed
            },
            order={item.id.original: i for i, item in enumerate(ordered)},
        )

    def emitted_after(self, name: str) -> frozenset[str]:
        """Names of the types emitted after ``name``, empty if its position is unknown."""
        position = self.order.get(name)
        if position is None:
            return frozenset()
        return frozenset(other for other, p in self.order.items() if p > position)

    def with_forward(self, names: Iterable[str]) -> "TypeIndex":
        return replace(self, forward=frozenset(names))


EMPTY_INDEX = TypeIndex()


def format_type(
    renderer: TypeRenderer,
    ty: TypeRef,
    generic_types: Sequence[str],
    index: TypeIndex = EMPTY_INDEX,
) -> str:
    """Render a type reference in the renderer's target language.

    Args:
        renderer: Backend supplying the syntax of built-in shapes
        ty: Type reference to render
        generic_types: Generic parameter names in scope
        index: Per-run lookup tables derived from the snapshot

    Returns:
        Target language type expression

    Raises:
        TypeFormatError: If the type cannot be expressed in the target language
    """
    if isinstance(ty, SpecialType):
        return renderer.format_special_type(ty, generic_types, index)
    if isinstance(ty, NamedType):
        if ty.parameters:
            return format_generic_type(renderer, ty, generic_types, index)
        return format_simple_type(renderer, ty.name, generic_types, index)
    raise TypeFormatError(f"Cannot format type reference {ty!r}", ty)


def format_simple_type(
    renderer: TypeRenderer,
    name: str,
    generic_types: Sequence[str],
    index: TypeIndex = EMPTY_INDEX,
) -> str:
    """Render a named reference without generic arguments."""
    if name in generic_types:
        return name
    mapped = renderer.type_mappings.get(name)
    if mapped is not None:
        return mapped
    resolved = index.renamed.get(name, name)
    if name in index.forward:
        return renderer.format_forward_reference(resolved)
    return resolved


def format_generic_type(
    renderer: TypeRenderer,
    ty: NamedType,
    generic_types: Sequence[str],
    index: TypeIndex = EMPTY_INDEX,
) -> str:
    """Render a named reference carrying generic arguments.

    A registered type mapping replaces the whole reference, arguments included.
    A forward reference covers the whole expression, so its arguments are
    rendered without nested forward references.
    """
    if ty.name in generic_types:
        raise TypeFormatError(
            f"Generic parameter {ty.name} cannot take type arguments", ty
        )
    mapped = renderer.type_mappings.get(ty.name)
    if mapped is not None:
        return mapped

    if ty.name in index.forward:
        inner = index.with_forward(())
        parameters = [
            format_type(renderer, parameter, generic_types, inner)
            for parameter in ty.parameters
        ]
        base = index.renamed.get(ty.name, ty.name)
        return renderer.format_forward_reference(
            f"{base}{renderer.format_generic_parameters(parameters)}"
        )

    parameters = [
        format_type(renderer, parameter, generic_types, index)
        for parameter in ty.parameters
    ]
    base = format_simple_type(renderer, ty.name, generic_types, index)
    return f"{base}{renderer.format_generic_parameters(parameters)}"
