"""Tests for the shared type formatter."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from typeport.transpiler.backends import BackendConfig, create_go_backend, create_python_backend
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import TypeFormatError
from typeport.transpiler.formatter import (
    EMPTY_INDEX,
    TypeIndex,
    format_type,
    struct_like_types,
)
from typeport.transpiler.models import AliasDef, EnumDef, Id, TypeRef
from typeport.transpiler.type_parser import parse_type

from tests.transpiler.builders import alias, field, struct


class OpaqueType(TypeRef):
    """Type reference kind the formatter does not know."""

    @property
    def id(self):
        return "Opaque"

    def named_references(self, direct=True):
        return iter(())


class BracketRenderer:
    """Renders every built-in shape as ``Kind<params>``."""

    language = TargetLanguage.PYTHON

    def __init__(self, type_mappings=None):
        self.type_mappings = type_mappings or {}

    def format_special_type(self, special, generic_types, index):
        params = [format_type(self, p, generic_types, index) for p in special.parameters]
        if not params:
            return special.kind.value
        return f"{special.kind.value}<{', '.join(params)}>"

    def format_generic_parameters(self, parameters):
        return f"<{', '.join(parameters)}>"

    def format_forward_reference(self, name):
        return f"'{name}'"


class TestFormatType:
    @pytest.mark.parametrize(
        "expr,expected",
        [
            ("Point", "Point"),
            ("Vec<Point>", "Vec<Point>"),
            ("Option<Vec<HashMap<String, Point>>>", "Option<Vec<HashMap<String, Point>>>"),
            ("Page<Vec<u8>>", "Page<Vec<u8>>"),
        ],
    )
    def test_recursion(self, expr, expected):
        assert format_type(BracketRenderer(), parse_type(expr), ()) == expected

    def test_generic_parameter(self):
        renderer = BracketRenderer({"T": "Mapped"})
        assert format_type(renderer, parse_type("Vec<T>"), ("T",)) == "Vec<T>"

    def test_generic_parameter_with_arguments(self):
        with pytest.raises(TypeFormatError, match="cannot take type arguments"):
            format_type(BracketRenderer(), parse_type("T<u8>"), ("T",))

    def test_type_mapping(self):
        renderer = BracketRenderer({"DateTime": "datetime"})
        assert format_type(renderer, parse_type("Vec<DateTime>"), ()) == "Vec<datetime>"

    def test_type_mapping_replaces_generic_reference(self):
        renderer = BracketRenderer({"Page": "PageModel"})
        assert format_type(renderer, parse_type("Page<u8>"), ()) == "PageModel"

    def test_renamed_reference(self):
        # Arrange
        index = TypeIndex(renamed={"Point": "PointRecord"})

        # Act
        result = format_type(BracketRenderer(), parse_type("Vec<Point>"), (), index)

        # Assert
        assert result == "Vec<PointRecord>"

    def test_type_mapping_wins_over_rename(self):
        renderer = BracketRenderer({"Point": "Vec2"})
        index = TypeIndex(renamed={"Point": "PointRecord"})
        assert format_type(renderer, parse_type("Point"), (), index) == "Vec2"

    def test_unknown_type_reference(self):
        with pytest.raises(TypeFormatError, match="Cannot format type reference"):
            format_type(BracketRenderer(), OpaqueType(), ())

    def test_forward_reference(self):
        index = TypeIndex(forward=frozenset({"Tree"}))
        result = format_type(BracketRenderer(), parse_type("Vec<Tree>"), (), index)
        assert result == "Vec<'Tree'>"

    def test_forward_generic_reference(self):
        """The whole generic expression is deferred, not each argument."""
        # Arrange
        index = TypeIndex(
            renamed={"Page": "TreePage"}, forward=frozenset({"Page", "Tree"})
        )

        # Act
        result = format_type(BracketRenderer(), parse_type("Page<Tree>"), (), index)

        # Assert
        assert result == "'TreePage<Tree>'"

    @given(
        expr=st.recursive(
            st.sampled_from(["u8", "String", "Point", "T", "()"]),
            lambda inner: st.one_of(
                inner.map("Vec<{}>".format),
                inner.map("Option<{}>".format),
                inner.map("[{}; 3]".format),
                st.tuples(inner, inner).map(lambda kv: f"HashMap<{kv[0]}, {kv[1]}>"),
                st.tuples(inner, inner).map(lambda ab: f"Pair<{ab[0]}, {ab[1]}>"),
            ),
            max_leaves=10,
        ),
        language=st.sampled_from(["python", "bracket"]),
    )
    @settings(max_examples=50, deadline=None)
    def test_pure(self, expr, language):
        """Formatting the same reference twice yields the same text."""
        renderer = create_python_backend() if language == "python" else BracketRenderer()
        ty = parse_type(expr)
        assert format_type(renderer, ty, ("T",)) == format_type(renderer, ty, ("T",))


class TestBackendFormatting:
    @pytest.mark.parametrize(
        "expr,python,go",
        [
            ("u8", "int", "uint8"),
            ("U53", "int", "uint64"),
            ("I54", "int", "int64"),
            ("usize", "int", "uint"),
            ("char", "str", "rune"),
            ("f32", "float", "float32"),
            ("()", "None", "struct{}"),
            ("[u8; 4]", "list[int]", "[]uint8"),
            ("&[String]", "list[str]", "[]string"),
            ("Option<Point>", "Point | None", "*Point"),
            (
                "Vec<Option<HashMap<String, Point>>>",
                "list[dict[str, Point] | None]",
                "[]*map[string]Point",
            ),
        ],
    )
    def test_special_types(self, expr, python, go):
        ty = parse_type(expr)
        assert create_python_backend().format_type(ty, ()) == python
        assert create_go_backend().format_type(ty, ()) == go

    def test_python_generic_arguments(self):
        backend = create_python_backend()
        assert backend.format_type(parse_type("Page<User, u8>"), ()) == "Page[User, int]"

    def test_go_generic_arguments(self):
        with pytest.raises(TypeFormatError, match="not supported in Go"):
            create_go_backend().format_type(parse_type("Page<User>"), ())

    def test_backend_type_mappings(self):
        config = BackendConfig(
            name="go", file_extension=".go", type_mappings={"DateTime": "time.Time"}
        )
        backend = create_go_backend(config)
        assert backend.format_type(parse_type("Option<DateTime>"), ()) == "*time.Time"


class TestStructLike:
    def test_structs(self, point_data):
        assert struct_like_types(point_data.items()) == {"Point"}

    def test_alias_chain_in_any_order(self):
        # Arrange
        items = [
            alias("Outer", "Middle"),
            alias("Middle", "Inner"),
            alias("Inner", "Point"),
            struct("Point", field("x", "f64")),
        ]

        # Act
        result = struct_like_types(items)

        # Assert
        assert result == {"Point", "Inner", "Middle", "Outer"}

    def test_non_struct_aliases(self):
        items = [
            struct("Point"),
            alias("Points", "Vec<Point>"),
            alias("MaybePoint", "Option<Point>"),
            alias("Id", "u64"),
            alias("Other", "Unknown"),
            EnumDef(Id("Shape")),
            alias("AnyShape", "Shape"),
        ]
        assert struct_like_types(items) == {"Point"}

    def test_type_index(self):
        items = [
            struct("Point"),
            alias("Position", "Point"),
            AliasDef(Id("Path", "PointPath"), parse_type("u8")),
        ]
        index = TypeIndex.from_items(items)
        assert index.struct_like == {"Point", "Position"}
        assert index.renamed == {"Path": "PointPath"}

    def test_empty_index(self):
        assert EMPTY_INDEX.struct_like == frozenset()
        assert dict(EMPTY_INDEX.renamed) == {}

    def test_emission_order(self):
        # Arrange
        items = [struct("Tree"), alias("Forest", "Vec<Tree>"), alias("Grove", "Forest")]

        # Act
        index = TypeIndex.from_items(items, [items[1], items[0], items[2]])

        # Assert
        assert index.emitted_after("Forest") == {"Tree", "Grove"}
        assert index.emitted_after("Grove") == frozenset()
        assert index.emitted_after("Unknown") == frozenset()
        assert index.with_forward({"Tree"}).forward == {"Tree"}
