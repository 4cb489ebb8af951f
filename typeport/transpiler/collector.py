"""
Snapshot collector for the type transpiler.

This module collects structs, enums and type aliases from the snapshot document
written by the upstream parser (YAML or JSON) into an immutable ``ParsedData``.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from typeport.transpiler.errors import SnapshotError
from typeport.transpiler.models import (
    AliasDef,
    EnumDef,
    EnumVariant,
    FieldDef,
    Id,
    ParsedData,
    StructDef,
    VariantKind,
)
from typeport.transpiler.type_parser import parse_type

_COMMON_KEYS = {"name", "renamed", "comments"}
STRUCT_KEYS = frozenset(_COMMON_KEYS | {"generic_types", "fields"})
FIELD_KEYS = frozenset(_COMMON_KEYS | {"type", "type_overrides", "has_default"})
ENUM_KEYS = frozenset(
    _COMMON_KEYS | {"generic_types", "variants", "tag_key", "content_key"}
)
VARIANT_KEYS = frozenset(_COMMON_KEYS | {"type", "fields"})
ALIAS_KEYS = frozenset(_COMMON_KEYS | {"type", "generic_types"})


def _require(entry: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(entry, Mapping):
        raise SnapshotError(f"Expected a mapping for {where}, got {type(entry).__name__}")
    if key not in entry:
        raise SnapshotError(f"Missing '{key}' in {where}")
    return entry[key]


def _strings(entry: Mapping[str, Any], key: str, where: str) -> tuple[str, ...]:
    values = entry.get(key) or []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise SnapshotError(f"'{key}' in {where} must be a list of strings")
    return tuple(values)


def _id(entry: Mapping[str, Any], where: str) -> Id:
    name = _require(entry, "name", where)
    return Id(str(name), str(entry.get("renamed") or ""))


def _check_keys(entry: Mapping[str, Any], allowed: frozenset[str], where: str) -> None:
    unknown = sorted(str(key) for key in set(entry) - allowed)
    if unknown:
        raise SnapshotError(f"Unknown keys in {where}: {', '.join(unknown)}")


def _collect_field(entry: Mapping[str, Any], where: str) -> FieldDef:
    field_id = _id(entry, where)
    where = f"{where}.{field_id.original}"
    _check_keys(entry, FIELD_KEYS, where)
    overrides = entry.get("type_overrides") or {}
    if not isinstance(overrides, Mapping):
        raise SnapshotError(f"'type_overrides' in {where} must be a mapping")
    return FieldDef(
        id=field_id,
        ty=parse_type(str(_require(entry, "type", where))),
        comments=_strings(entry, "comments", where),
        type_overrides={str(k).lower(): str(v) for k, v in overrides.items()},
        has_default=bool(entry.get("has_default", False)),
    )


def _collect_fields(entries: Any, where: str) -> tuple[FieldDef, ...]:
    if not isinstance(entries, list):
        raise SnapshotError(f"'fields' in {where} must be a list")
    fields = tuple(_collect_field(entry, where) for entry in entries)
    seen: set[str] = set()
    for f in fields:
        if f.id.original in seen:
            raise SnapshotError(f"Duplicate field '{f.id.original}' in {where}")
        seen.add(f.id.original)
    return fields


def _collect_struct(entry: Mapping[str, Any]) -> StructDef:
    struct_id = _id(entry, "struct")
    where = f"struct {struct_id.original}"
    _check_keys(entry, STRUCT_KEYS, where)
    return StructDef(
        id=struct_id,
        fields=_collect_fields(entry.get("fields") or [], where),
        generic_types=_strings(entry, "generic_types", where),
        comments=_strings(entry, "comments", where),
    )


def _collect_variant(entry: Mapping[str, Any], where: str) -> EnumVariant:
    variant_id = _id(entry, f"{where} variant")
    where = f"{where}::{variant_id.original}"
    _check_keys(entry, VARIANT_KEYS, where)
    if "type" in entry and "fields" in entry:
        raise SnapshotError(f"Variant {where} has both 'type' and 'fields'")
    comments = _strings(entry, "comments", where)
    if "type" in entry:
        return EnumVariant(
            id=variant_id,
            kind=VariantKind.TUPLE,
            ty=parse_type(str(entry["type"])),
            comments=comments,
        )
    if "fields" in entry:
        return EnumVariant(
            id=variant_id,
            kind=VariantKind.STRUCT,
            fields=_collect_fields(entry["fields"], where),
            comments=comments,
        )
    return EnumVariant(id=variant_id, comments=comments)


def _collect_enum(entry: Mapping[str, Any]) -> EnumDef:
    enum_id = _id(entry, "enum")
    where = f"enum {enum_id.original}"
    _check_keys(entry, ENUM_KEYS, where)
    variants = entry.get("variants") or []
    if not isinstance(variants, list):
        raise SnapshotError(f"'variants' in {where} must be a list")
    return EnumDef(
        id=enum_id,
        variants=tuple(_collect_variant(v, where) for v in variants),
        generic_types=_strings(entry, "generic_types", where),
        comments=_strings(entry, "comments", where),
        tag_key=str(entry.get("tag_key", "type")),
        content_key=str(entry.get("content_key", "content")),
    )


def _collect_alias(entry: Mapping[str, Any]) -> AliasDef:
    alias_id = _id(entry, "alias")
    where = f"alias {alias_id.original}"
    _check_keys(entry, ALIAS_KEYS, where)
    return AliasDef(
        id=alias_id,
        ty=parse_type(str(_require(entry, "type", where))),
        generic_types=_strings(entry, "generic_types", where),
        comments=_strings(entry, "comments", where),
    )


def collect_info(document: Mapping[str, Any] | None) -> ParsedData:
    """Collect structs, enums and aliases from a snapshot document.

    Args:
        document: Deserialized snapshot with ``structs``, ``enums`` and ``aliases``

    Returns:
        ParsedData containing every definition in declaration order

    Raises:
        SnapshotError: If the document is malformed
    """
    if document is None:
        return ParsedData()
    if not isinstance(document, Mapping):
        raise SnapshotError("Snapshot document must be a mapping")

    unknown = set(document) - {"structs", "enums", "aliases"}
    if unknown:
        raise SnapshotError(f"Unknown snapshot sections: {', '.join(sorted(unknown))}")

    sections = {}
    for key in ("structs", "enums", "aliases"):
        entries = document.get(key) or []
        if not isinstance(entries, list):
            raise SnapshotError(f"'{key}' must be a list")
        sections[key] = entries

    data = ParsedData(
        structs=tuple(_collect_struct(e) for e in sections["structs"]),
        enums=tuple(_collect_enum(e) for e in sections["enums"]),
        aliases=tuple(_collect_alias(e) for e in sections["aliases"]),
    )

    seen: set[str] = set()
    for item in data.items():
        if item.id.original in seen:
            raise SnapshotError(f"Duplicate type name '{item.id.original}'")
        seen.add(item.id.original)

    logger.debug(
        f"Collected {len(data.structs)} structs, {len(data.enums)} enums, "
        f"{len(data.aliases)} aliases"
    )
    return data


def load_parsed_data(path: str | Path) -> ParsedData:
    """Load a snapshot document from a YAML or JSON file.

    Args:
        path: Path to the snapshot file

    Returns:
        ParsedData read from the file

    Raises:
        SnapshotError: If the file cannot be read or is malformed
    """
    path = Path(path)
    logger.debug(f"Loading snapshot from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SnapshotError(f"Cannot parse snapshot {path}: {e}") from e
    return collect_info(document)
