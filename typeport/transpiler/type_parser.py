"""
Parsing of source type expressions for the type transpiler.

Snapshot documents spell field, variant and alias types in Rust syntax, e.g.
``Vec<Option<Point>>``, ``[u8; 4]`` or ``HashMap<String, u32>``. This module turns
such expressions into ``TypeRef`` values.
"""

import re

from typeport.transpiler.errors import SnapshotError
from typeport.transpiler.models import NamedType, SpecialKind, SpecialType, TypeRef

TOKEN_PATTERN = re.compile(
    r"\s*(?:(?P<lifetime>'[A-Za-z_]\w*)|(?P<ident>[A-Za-z_]\w*)|(?P<number>\d+)"
    r"|(?P<path>::)|(?P<punct>[<>\[\](),;&]))"
)

# Wrapper types that carry no meaning across languages
TRANSPARENT_WRAPPERS = {"Box", "Rc", "Arc"}

CONTAINER_ARITY: dict[str, tuple[SpecialKind, int]] = {
    "Vec": (SpecialKind.VEC, 1),
    "Option": (SpecialKind.OPTION, 1),
    "HashMap": (SpecialKind.MAP, 2),
    "BTreeMap": (SpecialKind.MAP, 2),
}

SCALAR_NAMES: dict[str, SpecialKind] = {
    "String": SpecialKind.STRING,
    "str": SpecialKind.STRING,
    "char": SpecialKind.CHAR,
    "bool": SpecialKind.BOOL,
    "f32": SpecialKind.F32,
    "f64": SpecialKind.F64,
    "i8": SpecialKind.I8,
    "i16": SpecialKind.I16,
    "i32": SpecialKind.I32,
    "i64": SpecialKind.I64,
    "I54": SpecialKind.I54,
    "isize": SpecialKind.ISIZE,
    "u8": SpecialKind.U8,
    "u16": SpecialKind.U16,
    "u32": SpecialKind.U32,
    "U53": SpecialKind.U53,
    "u64": SpecialKind.U64,
    "usize": SpecialKind.USIZE,
}


def tokenize(text: str) -> list[str]:
    """Split a type expression into tokens, dropping lifetimes.

    Raises:
        SnapshotError: On characters that cannot appear in a type expression
    """
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = TOKEN_PATTERN.match(text, pos)
        if match is None:
            raise SnapshotError(
                f"Invalid type expression {text!r}: unexpected {text[pos:].strip()!r}"
            )
        pos = match.end()
        if match.lastgroup != "lifetime":
            tokens.append(match.group(match.lastgroup))
    return tokens


class _TypeParser:
    """Recursive descent parser over the tokens of one type expression."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def error(self, message: str) -> SnapshotError:
        return SnapshotError(f"Invalid type expression {self.text!r}: {message}")

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> str:
        token = self.peek()
        if token is None:
            raise self.error("unexpected end")
        self.pos += 1
        return token

    def expect(self, token: str) -> None:
        found = self.next()
        if found != token:
            raise self.error(f"expected {token!r}, found {found!r}")

    def parse(self) -> TypeRef:
        ty = self.parse_type()
        if self.peek() is not None:
            raise self.error(f"unexpected {self.peek()!r}")
        return ty

    def parse_type(self) -> TypeRef:
        token = self.peek()
        if token == "(":
            self.next()
            self.expect(")")
            return SpecialType(SpecialKind.UNIT)
        if token == "[":
            self.next()
            element = self.parse_type()
            self.expect(";")
            length = self.next()
            if not length.isdigit():
                raise self.error(f"array length must be a number, found {length!r}")
            self.expect("]")
            return SpecialType(SpecialKind.ARRAY, (element,), int(length))
        if token == "&":
            self.next()
            if self.peek() == "mut":
                self.next()
            if self.peek() == "[":
                self.next()
                element = self.parse_type()
                self.expect("]")
                return SpecialType(SpecialKind.SLICE, (element,))
            return self.parse_type()
        return self.parse_path()

    def parse_path(self) -> TypeRef:
        name = self.next()
        if not (name[0].isalpha() or name[0] == "_"):
            raise self.error(f"expected a type name, found {name!r}")
        while self.peek() == "::":
            self.next()
            name = self.next()

        parameters: list[TypeRef] = []
        if self.peek() == "<":
            self.next()
            while True:
                parameters.append(self.parse_type())
                if self.peek() == ",":
                    self.next()
                    if self.peek() == ">":
                        break
                    continue
                break
            self.expect(">")

        if name in TRANSPARENT_WRAPPERS and len(parameters) == 1:
            return parameters[0]
        if name in CONTAINER_ARITY:
            kind, arity = CONTAINER_ARITY[name]
            if len(parameters) != arity:
                raise self.error(
                    f"{name} takes {arity} type argument(s), got {len(parameters)}"
                )
            return SpecialType(kind, tuple(parameters))
        if name in SCALAR_NAMES and not parameters:
            return SpecialType(SCALAR_NAMES[name])
        return NamedType(name, tuple(parameters))


def parse_type(text: str) -> TypeRef:
    """Parse a source type expression.

    Args:
        text: Type expression in Rust syntax, e.g. ``Vec<Option<Point>>``

    Returns:
        The parsed type reference

    Raises:
        SnapshotError: If the expression is malformed
    """
    if not text or not text.strip():
        raise SnapshotError("Invalid type expression: empty")
    return _TypeParser(text).parse()
