"""Go backend generating structs with JSON tags."""

from collections.abc import Sequence

from typeport.transpiler.backends.base import Backend
from typeport.transpiler.backends.models import BackendConfig
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import TypeFormatError
from typeport.transpiler.formatter import EMPTY_INDEX, TypeIndex
from typeport.transpiler.models import (
    AliasDef,
    EnumDef,
    EnumVariant,
    FieldDef,
    Id,
    NamedType,
    ParsedData,
    SpecialKind,
    SpecialType,
    StructDef,
    TypeRef,
    VariantKind,
)

SCALAR_TYPES: dict[SpecialKind, str] = {
    SpecialKind.UNIT: "struct{}",
    SpecialKind.STRING: "string",
    SpecialKind.CHAR: "rune",
    SpecialKind.BOOL: "bool",
    SpecialKind.F32: "float32",
    SpecialKind.F64: "float64",
    SpecialKind.I8: "int8",
    SpecialKind.I16: "int16",
    SpecialKind.I32: "int32",
    SpecialKind.I64: "int64",
    SpecialKind.I54: "int64",
    SpecialKind.ISIZE: "int",
    SpecialKind.U8: "uint8",
    SpecialKind.U16: "uint16",
    SpecialKind.U32: "uint32",
    SpecialKind.U53: "uint64",
    SpecialKind.U64: "uint64",
    SpecialKind.USIZE: "uint",
}


class GoBackend(Backend):
    """Go backend.

    Algebraic enums become a tagged struct with custom JSON (un)marshalling.
    Payloads of struct-like types are carried through pointers, everything else
    by value. Go output does not support generics.
    """

    language = TargetLanguage.GO
    supports_enums = True
    comment_prefix = "//"
    indent = "\t"

    @property
    def package(self) -> str:
        return self.config.additional_options.get("package", "types")

    @property
    def uppercase_acronyms(self) -> list[str]:
        return self.config.additional_options.get("uppercase_acronyms", [])

    def begin_file(self, data: ParsedData) -> list[str]:
        lines = [f"package {self.package}"]
        if any(not e.is_unit for e in data.enums):
            lines += ["", 'import "encoding/json"']
        return lines

    def write_type_alias(
        self, ty: AliasDef, index: TypeIndex = EMPTY_INDEX
    ) -> list[str]:
        self._reject_generics(ty.generic_types, ty.id.original)
        lines = self.write_comments(ty.comments)
        lines.append(f"type {ty.id.renamed} {self.format_type(ty.ty, (), index)}")
        return lines

    def write_struct(self, rs: StructDef, index: TypeIndex = EMPTY_INDEX) -> list[str]:
        self._reject_generics(rs.generic_types, rs.id.original)
        lines = self.write_comments(rs.comments)
        lines.append(f"type {rs.id.renamed} struct {{")
        for f in rs.fields:
            lines.extend(self.write_field(rs.id.original, f, index))
        lines.append("}")
        return lines

    def write_field(
        self, owner: str, f: FieldDef, index: TypeIndex = EMPTY_INDEX
    ) -> list[str]:
        lines = self.write_comments(f.comments, 1)

        type_name = self.format_field_type(owner, f, (), index)
        tag = f.id.renamed
        if f.ty.is_optional:
            type_name = f"*{type_name}"
        if f.ty.is_optional or f.has_default:
            tag += ",omitempty"

        lines.append(
            f'{self.indent}{self.field_name(f.id.original)} {type_name} `json:"{tag}"`'
        )
        return lines

    def field_name(self, name: str) -> str:
        """Turn a source field name into an exported Go identifier."""
        acronyms = {a.upper() for a in self.uppercase_acronyms}
        parts = []
        for part in name.split("_"):
            if not part:
                continue
            if part.upper() in acronyms:
                parts.append(part.upper())
            else:
                parts.append(part[0].upper() + part[1:])
        return "".join(parts)

    def write_enum(self, e: EnumDef, index: TypeIndex = EMPTY_INDEX) -> list[str]:
        self._reject_generics(e.generic_types, e.id.original)
        if e.is_unit:
            return self._write_unit_enum(e)
        return self._write_algebraic_enum(e, index)

    def _write_unit_enum(self, e: EnumDef) -> list[str]:
        name = e.id.renamed
        lines = self.write_comments(e.comments)
        lines.append(f"type {name} string")
        lines.append("const (")
        for v in e.variants:
            lines.extend(self.write_comments(v.comments, 1))
            lines.append(f'{self.indent}{name}{v.id.original} {name} = "{v.id.renamed}"')
        lines.append(")")
        return lines

    def _write_algebraic_enum(self, e: EnumDef, index: TypeIndex) -> list[str]:
        name = e.id.renamed
        tag_type = f"{name}Types"
        receiver = name[0].lower()
        t = self.indent

        lines: list[str] = []
        payloads: dict[str, tuple[str, bool]] = {}
        for v in e.variants:
            if v.kind is VariantKind.STRUCT:
                inner = self._inner_struct(e, v)
                lines.extend(self.write_struct(inner, index))
                lines.append("")
                payloads[v.id.original] = (inner.id.renamed, True)
            elif v.kind is VariantKind.TUPLE:
                if v.ty is None:
                    raise TypeFormatError(
                        f"Tuple variant {v.id.original} has no payload type"
                    )
                payload = self.format_type(v.ty, (), index)
                payloads[v.id.original] = (payload, _is_struct_like(v.ty, index))

        lines.append(f"type {tag_type} string")
        lines.append("const (")
        for v in e.variants:
            lines.extend(self.write_comments(v.comments, 1))
            lines.append(
                f'{t}{self._variant_const(name, v)} {tag_type} = "{v.id.renamed}"'
            )
        lines.append(")")
        lines.append("")

        lines.extend(self.write_comments(e.comments))
        lines += [
            f"type {name} struct {{",
            f'{t}Type {tag_type} `json:"{e.tag_key}"`',
            f"{t}content interface{{}}",
            "}",
            "",
            f"func ({receiver} *{name}) UnmarshalJSON(data []byte) error {{",
            f"{t}var enum struct {{",
            f'{t}{t}Tag {tag_type} `json:"{e.tag_key}"`',
            f'{t}{t}Content json.RawMessage `json:"{e.content_key}"`',
            f"{t}}}",
            f"{t}if err := json.Unmarshal(data, &enum); err != nil {{",
            f"{t}{t}return err",
            f"{t}}}",
            "",
            f"{t}{receiver}.Type = enum.Tag",
            f"{t}switch {receiver}.Type {{",
        ]
        for v in e.variants:
            lines.append(f"{t}case {self._variant_const(name, v)}:")
            if v.id.original in payloads:
                payload, _ = payloads[v.id.original]
                lines.append(f"{t}{t}var res {payload}")
                lines.append(f"{t}{t}{receiver}.content = &res")
            else:
                lines.append(f"{t}{t}return nil")
        lines += [
            f"{t}}}",
            f"{t}if err := json.Unmarshal(enum.Content, &{receiver}.content); err != nil {{",
            f"{t}{t}return err",
            f"{t}}}",
            "",
            f"{t}return nil",
            "}",
            "",
            f"func ({receiver} {name}) MarshalJSON() ([]byte, error) {{",
            f"{t}var enum struct {{",
            f'{t}{t}Tag {tag_type} `json:"{e.tag_key}"`',
            f'{t}{t}Content interface{{}} `json:"{e.content_key},omitempty"`',
            f"{t}}}",
            f"{t}enum.Tag = {receiver}.Type",
            f"{t}enum.Content = {receiver}.content",
            f"{t}return json.Marshal(enum)",
            "}",
        ]

        for v in e.variants:
            if v.id.original not in payloads:
                continue
            payload, struct_like = payloads[v.id.original]
            accessor = f"*{payload}" if struct_like else payload
            lines += [
                "",
                f"func ({receiver} {name}) {v.id.original}() {accessor} {{",
                f"{t}res, _ := {receiver}.content.(*{payload})",
                f"{t}return {'res' if struct_like else '*res'}",
                "}",
            ]

        for v in e.variants:
            const = self._variant_const(name, v)
            lines.append("")
            if v.id.original in payloads:
                payload, struct_like = payloads[v.id.original]
                param = f"*{payload}" if struct_like else payload
                lines += [
                    f"func New{const}(content {param}) {name} {{",
                    f"{t}return {name}{{",
                    f"{t}{t}Type: {const},",
                    f"{t}{t}content: {'content' if struct_like else '&content'},",
                    f"{t}}}",
                    "}",
                ]
            else:
                lines += [
                    f"func New{const}() {name} {{",
                    f"{t}return {name}{{",
                    f"{t}{t}Type: {const},",
                    f"{t}}}",
                    "}",
                ]
        return lines

    def _variant_const(self, enum_name: str, v: EnumVariant) -> str:
        return f"{enum_name}TypeVariant{v.id.original}"

    def _inner_struct(self, e: EnumDef, v: EnumVariant) -> StructDef:
        """Hoist the fields of a struct-shaped variant into a named struct."""
        return StructDef(
            id=Id(f"{e.id.renamed}{v.id.original}Inner"),
            fields=v.fields,
            comments=v.comments,
        )

    def _reject_generics(self, generic_types: Sequence[str], item: str) -> None:
        if generic_types:
            raise TypeFormatError(
                f"Generic parameters ({', '.join(generic_types)}) are not supported in Go",
                item=item,
            )

    def format_special_type(
        self,
        special: SpecialType,
        generic_types: Sequence[str],
        index: TypeIndex = EMPTY_INDEX,
    ) -> str:
        kind = special.kind
        params = [self.format_type(p, generic_types, index) for p in special.parameters]

        if kind in (SpecialKind.VEC, SpecialKind.ARRAY, SpecialKind.SLICE):
            return f"[]{params[0]}"
        elif kind is SpecialKind.OPTION:
            return f"*{params[0]}"
        elif kind is SpecialKind.MAP:
            return f"map[{params[0]}]{params[1]}"
        elif kind in SCALAR_TYPES:
            return SCALAR_TYPES[kind]
        raise TypeFormatError(f"Unsupported special type {kind.value}", special)

    def format_generic_parameters(self, parameters: Sequence[str]) -> str:
        raise TypeFormatError(
            f"Generic type arguments [{', '.join(parameters)}] are not supported in Go"
        )


def _is_struct_like(ty: TypeRef, index: TypeIndex) -> bool:
    return isinstance(ty, NamedType) and ty.name in index.struct_like


def create_go_backend(config: BackendConfig | None = None) -> GoBackend:
    """Create a Go backend."""
    if config is None:
        config = BackendConfig(name="go", file_extension=".go")
    return GoBackend(config)
