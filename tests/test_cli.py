"""Tests for the typeport command-line interface."""

import sys
import textwrap

import pytest
from loguru import logger
from typer.testing import CliRunner

from typeport.main import app

runner = CliRunner()

POINT_SNAPSHOT = """
structs:
  - name: Point
    fields:
      - {name: x, type: f64}
      - {name: y, type: f64}
aliases:
  - name: Coordinates
    type: Vec<Point>
"""

SHAPE_SNAPSHOT = """
structs:
  - name: Circle
    fields:
      - {name: radius, type: f64}
enums:
  - name: Shape
    variants:
      - {name: Circle, type: Circle}
      - {name: Empty}
"""

CYCLE_SNAPSHOT = """
structs:
  - name: A
    fields: [{name: b, type: B}]
  - name: B
    fields: [{name: a, type: A}]
"""


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def write_snapshot(tmp_path):
    def write(text: str, name: str = "snapshot.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text))
        return path

    return write


def test_help():
    """Test that the CLI help command works."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Transpile type definitions into other languages" in result.stdout


def test_generate_help():
    result = runner.invoke(app, ["generate", "--help"])
    assert result.exit_code == 0
    assert "--lang" in result.stdout


def test_generate_to_stdout(write_snapshot):
    """Test generation to stdout (no output directory)."""
    snapshot = write_snapshot(POINT_SNAPSHOT)

    result = runner.invoke(app, ["generate", str(snapshot)])

    assert result.exit_code == 0
    assert "class Point(BaseModel):" in result.stdout
    assert "Coordinates = list[Point]" in result.stdout


def test_generate_to_directory(write_snapshot, tmp_path):
    # Arrange
    snapshot = write_snapshot(POINT_SNAPSHOT)
    out_dir = tmp_path / "generated"

    # Act
    result = runner.invoke(
        app,
        ["generate", str(snapshot), "-l", "python", "-l", "go", "-o", str(out_dir), "-n", "geometry"],
    )

    # Assert
    assert result.exit_code == 0
    assert "class Point(BaseModel):" in (out_dir / "geometry.py").read_text()
    assert "type Coordinates []Point" in (out_dir / "geometry.go").read_text()


def test_generate_with_config(write_snapshot, tmp_path):
    snapshot = write_snapshot(POINT_SNAPSHOT)
    config = tmp_path / "typeport.yaml"
    config.write_text("go:\n  package: geometry\n")

    result = runner.invoke(app, ["generate", str(snapshot), "-l", "go", "-c", str(config)])

    assert result.exit_code == 0
    assert result.stdout.startswith("package geometry\n")


def test_failing_language_still_writes_others(write_snapshot, tmp_path):
    # Arrange
    snapshot = write_snapshot(SHAPE_SNAPSHOT)
    out_dir = tmp_path / "generated"

    # Act
    result = runner.invoke(
        app, ["generate", str(snapshot), "-l", "python", "-l", "go", "-o", str(out_dir)]
    )

    # Assert
    assert result.exit_code == 1
    assert "enum is not supported by the python backend" in result.output
    assert not (out_dir / "types.py").exists()
    assert "type Shape struct {" in (out_dir / "types.go").read_text()


def test_generate_cycle(write_snapshot):
    snapshot = write_snapshot(CYCLE_SNAPSHOT)

    result = runner.invoke(app, ["generate", str(snapshot)])

    assert result.exit_code == 1
    assert "Unresolvable reference cycle between types: A -> B" in result.output


def test_generate_missing_snapshot(tmp_path):
    result = runner.invoke(app, ["generate", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
    assert "Cannot read snapshot" in result.output


def test_generate_unknown_language(write_snapshot):
    snapshot = write_snapshot(POINT_SNAPSHOT)
    result = runner.invoke(app, ["generate", str(snapshot), "-l", "cobol"])
    assert result.exit_code == 2


def test_order(write_snapshot):
    snapshot = write_snapshot(
        """
        structs:
          - name: Order
            fields:
              - {name: customer, type: Customer}
          - name: Customer
            fields:
              - {name: name, type: String}
        aliases:
          - name: Orders
            type: Vec<Order>
        """
    )

    result = runner.invoke(app, ["order", str(snapshot)])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["Customer", "Order", "Orders"]


def test_order_cycle(write_snapshot):
    snapshot = write_snapshot(CYCLE_SNAPSHOT)
    result = runner.invoke(app, ["order", str(snapshot)])
    assert result.exit_code == 1
