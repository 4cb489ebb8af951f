"""
Pytest configuration and shared fixtures for transpiler tests.

This module contains fixtures that are shared across multiple test modules.
"""

import pytest

from typeport.transpiler.backends import create_go_backend, create_python_backend
from typeport.transpiler.models import EnumDef, EnumVariant, Id, ParsedData, VariantKind
from typeport.transpiler.type_parser import parse_type

from tests.transpiler.builders import alias, field, struct


@pytest.fixture
def python_backend():
    """Fixture providing a Python backend with default configuration."""
    return create_python_backend()


@pytest.fixture
def go_backend():
    """Fixture providing a Go backend with default configuration."""
    return create_go_backend()


@pytest.fixture
def point_data():
    """Fixture providing a struct and an alias over a list of it."""
    return ParsedData(
        structs=(struct("Point", field("x", "f64"), field("y", "f64")),),
        aliases=(alias("Coordinates", "Vec<Point>"),),
    )


@pytest.fixture
def shape_data():
    """Fixture providing an algebraic enum with every variant shape."""
    shape = EnumDef(
        Id("Shape"),
        variants=(
            EnumVariant(Id("Circle"), VariantKind.TUPLE, parse_type("Circle")),
            EnumVariant(Id("Round"), VariantKind.TUPLE, parse_type("Round")),
            EnumVariant(Id("Label"), VariantKind.TUPLE, parse_type("String")),
            EnumVariant(
                Id("Square"), VariantKind.STRUCT, fields=(field("side", "f64"),)
            ),
            EnumVariant(Id("Empty", "empty")),
        ),
    )
    return ParsedData(
        structs=(struct("Circle", field("radius", "f64")),),
        enums=(shape,),
        aliases=(alias("Round", "Circle"),),
    )


@pytest.fixture
def color_enum():
    """Fixture providing a unit-only enum."""
    return EnumDef(
        Id("Color"),
        variants=(
            EnumVariant(Id("Red", "red")),
            EnumVariant(Id("Green", "green"), comments=("Default color",)),
        ),
    )
