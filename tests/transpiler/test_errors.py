"""Tests for the transpiler exceptions."""

import pytest

from typeport.transpiler.errors import (
    ConfigError,
    SinkWriteError,
    SnapshotError,
    TranspilerError,
    TypeFormatError,
    UnresolvableCycleError,
    UnsupportedConstructError,
)


class TestTranspilerError:
    def test_message_without_item(self):
        error = TranspilerError("Unknown type")
        assert str(error) == "Unknown type"
        assert error.item is None

    def test_message_with_item(self):
        error = TranspilerError("Unknown type", item="Point")
        assert str(error) == "Unknown type (in Point)"

    @pytest.mark.parametrize("cls", [SinkWriteError, SnapshotError, ConfigError])
    def test_with_item_keeps_class(self, cls):
        # Arrange
        error = cls("Broken")

        # Act
        located = error.with_item("Point")

        # Assert
        assert type(located) is cls
        assert located.item == "Point"
        assert located.message == "Broken"

    def test_all_errors_are_transpiler_errors(self):
        for cls in (
            UnresolvableCycleError,
            UnsupportedConstructError,
            TypeFormatError,
            SinkWriteError,
            SnapshotError,
            ConfigError,
        ):
            assert issubclass(cls, TranspilerError)


class TestUnresolvableCycleError:
    def test_participants(self):
        error = UnresolvableCycleError(["A", "B"])
        assert error.participants == ("A", "B")
        assert "A -> B" in str(error)

    def test_with_item_is_noop(self):
        error = UnresolvableCycleError(["A", "B"])
        assert error.with_item("C") is error


class TestUnsupportedConstructError:
    def test_names_item_and_language(self):
        error = UnsupportedConstructError("enum", "Shape", "python")
        assert str(error) == "enum is not supported by the python backend (in Shape)"
        assert error.construct == "enum"
        assert error.language == "python"

    def test_with_item(self):
        error = UnsupportedConstructError("enum", "Shape", "python").with_item("Color")
        assert isinstance(error, UnsupportedConstructError)
        assert error.item == "Color"
        assert error.language == "python"


class TestTypeFormatError:
    def test_with_item_keeps_type(self):
        error = TypeFormatError("Cannot format", ty="T<u8>")
        located = error.with_item("Wrapper")
        assert isinstance(located, TypeFormatError)
        assert located.ty == "T<u8>"
        assert str(located) == "Cannot format (in Wrapper)"
