"""Python backend generating pydantic models."""

import json
import keyword
from collections.abc import Sequence

from typeport.transpiler.backends.base import Backend
from typeport.transpiler.backends.models import BackendConfig
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import TypeFormatError
from typeport.transpiler.formatter import EMPTY_INDEX, TypeIndex
from typeport.transpiler.models import (
    INTEGER_KINDS,
    AliasDef,
    FieldDef,
    ParsedData,
    SpecialKind,
    SpecialType,
    StructDef,
)

SCALAR_TYPES: dict[SpecialKind, str] = {
    SpecialKind.UNIT: "None",
    SpecialKind.STRING: "str",
    SpecialKind.CHAR: "str",
    SpecialKind.BOOL: "bool",
    SpecialKind.F32: "float",
    SpecialKind.F64: "float",
    # Python ints are arbitrary precision, every width fits
    **{kind: "int" for kind in INTEGER_KINDS},
}


class PythonBackend(Backend):
    """Python backend emitting one pydantic ``BaseModel`` per struct.

    Sum types have no native counterpart here, so enums are rejected.
    """

    language = TargetLanguage.PYTHON
    supports_enums = False
    comment_prefix = "#"
    indent = "    "
    item_separator = "\n\n\n"

    def begin_file(self, data: ParsedData) -> list[str]:
        generic_names = _generic_names(data)
        has_generic_structs = any(s.generic_types for s in data.structs)
        has_renames = any(
            f.id.is_renamed or keyword.iskeyword(f.id.original)
            for s in data.structs
            for f in s.fields
        )

        lines = ["from __future__ import annotations"]

        typing_names = []
        if has_generic_structs:
            typing_names.append("Generic")
        if generic_names:
            typing_names.append("TypeVar")
        if typing_names:
            lines += ["", f"from typing import {', '.join(typing_names)}"]

        pydantic_names = []
        if data.structs:
            pydantic_names.append("BaseModel")
        if has_renames:
            pydantic_names.append("Field")
        if pydantic_names:
            lines += ["", f"from pydantic import {', '.join(pydantic_names)}"]

        if generic_names:
            lines.append("")
            lines += [f'{name} = TypeVar("{name}")' for name in generic_names]

        return lines

    def write_type_alias(
        self, ty: AliasDef, index: TypeIndex = EMPTY_INDEX
    ) -> list[str]:
        lines = self.write_comments(ty.comments)
        # Evaluated at import time, unlike class annotations
        index = index.with_forward(index.emitted_after(ty.id.original))
        type_name = self.format_type(ty.ty, ty.generic_types, index)
        lines.append(f"{ty.id.renamed} = {type_name}")
        return lines

    def write_struct(self, rs: StructDef, index: TypeIndex = EMPTY_INDEX) -> list[str]:
        lines = self.write_comments(rs.comments)

        bases = ["BaseModel"]
        if rs.generic_types:
            bases.append(f"Generic{self.format_generic_parameters(rs.generic_types)}")
        lines.append(f"class {rs.id.renamed}({', '.join(bases)}):")

        if not rs.fields:
            lines.append(f"{self.indent}pass")
        for f in rs.fields:
            lines.extend(self.write_field(rs.id.original, f, rs.generic_types, index))
        return lines

    def write_field(
        self,
        owner: str,
        f: FieldDef,
        generic_types: Sequence[str],
        index: TypeIndex = EMPTY_INDEX,
    ) -> list[str]:
        lines = self.write_comments(f.comments, 1)

        type_name = self.format_field_type(owner, f, generic_types, index)
        if f.ty.is_optional and type_name != "None":
            type_name = f"{type_name} | None"

        name = f.id.original
        alias = f.id.renamed if f.id.is_renamed else None
        if keyword.iskeyword(name):
            name = f"{name}_"
            alias = alias or f.id.original

        if alias is not None:
            alias_arg = f"alias={json.dumps(alias)}"
            if f.ty.is_optional:
                default = f"Field(default=None, {alias_arg})"
            else:
                default = f"Field({alias_arg})"
        elif f.ty.is_optional:
            default = "None"
        else:
            default = None

        line = f"{self.indent}{name}: {type_name}"
        if default is not None:
            line += f" = {default}"
        lines.append(line)
        return lines

    def format_special_type(
        self,
        special: SpecialType,
        generic_types: Sequence[str],
        index: TypeIndex = EMPTY_INDEX,
    ) -> str:
        kind = special.kind
        params = [self.format_type(p, generic_types, index) for p in special.parameters]

        if kind in (SpecialKind.VEC, SpecialKind.ARRAY, SpecialKind.SLICE):
            return f"list[{params[0]}]"
        elif kind is SpecialKind.OPTION:
            if params[0] == "None":
                return "None"
            if _is_forward_reference(params[0]):
                # A string cannot take part in a runtime union
                inner = json.loads(params[0])
                return self.format_forward_reference(f"{inner} | None")
            return f"{params[0]} | None"
        elif kind is SpecialKind.MAP:
            return f"dict[{params[0]}, {params[1]}]"
        elif kind in SCALAR_TYPES:
            return SCALAR_TYPES[kind]
        raise TypeFormatError(f"Unsupported special type {kind.value}", special)

    def format_generic_parameters(self, parameters: Sequence[str]) -> str:
        return f"[{', '.join(parameters)}]"

    def format_forward_reference(self, name: str) -> str:
        return json.dumps(name)


def _is_forward_reference(type_name: str) -> bool:
    return type_name.startswith('"')


def _generic_names(data: ParsedData) -> list[str]:
    """Collect generic parameter names in first-use order."""
    names: list[str] = []
    for item in (*data.structs, *data.aliases):
        for name in item.generic_types:
            if name not in names:
                names.append(name)
    return names


def create_python_backend(config: BackendConfig | None = None) -> PythonBackend:
    """Create a Python backend."""
    if config is None:
        config = BackendConfig(name="python", file_extension=".py")
    return PythonBackend(config)
