"""Generator configuration loading.

The configuration file is YAML, keyed by target language name::

    python:
      type_mappings: {DateTime: datetime}
      type_overrides: {Timestamp: int}
    go:
      package: models
      uppercase_acronyms: [ID, URL]
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from typeport.transpiler.backends.models import BackendConfig
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import ConfigError

FILE_EXTENSIONS: dict[TargetLanguage, str] = {
    TargetLanguage.PYTHON: ".py",
    TargetLanguage.GO: ".go",
}


def default_config(language: TargetLanguage) -> BackendConfig:
    """Get the configuration used when a language has no section."""
    return BackendConfig(name=language.value, file_extension=FILE_EXTENSIONS[language])


def _string_table(section: Mapping[str, Any], key: str, where: str) -> dict[str, str]:
    table = section.get(key) or {}
    if not isinstance(table, Mapping):
        raise ConfigError(f"'{key}' in {where} must be a mapping")
    return {str(k): str(v) for k, v in table.items()}


def parse_config(document: Mapping[str, Any] | None) -> dict[TargetLanguage, BackendConfig]:
    """Build backend configurations from a configuration document.

    Args:
        document: Deserialized configuration, keyed by language name

    Returns:
        Configuration for every supported language, defaults where not configured

    Raises:
        ConfigError: On unknown languages or malformed sections
    """
    configs = {language: default_config(language) for language in TargetLanguage}
    if document is None:
        return configs
    if not isinstance(document, Mapping):
        raise ConfigError("Configuration must be a mapping of language sections")

    for name, section in document.items():
        try:
            language = TargetLanguage.from_name(str(name))
        except ValueError as e:
            raise ConfigError(str(e)) from e
        section = section or {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"Section '{name}' must be a mapping")

        config = configs[language]
        config.type_mappings = _string_table(section, "type_mappings", name)
        config.type_overrides = _string_table(section, "type_overrides", name)
        config.additional_options = {
            k: v
            for k, v in section.items()
            if k not in ("type_mappings", "type_overrides")
        }
        logger.debug(f"Configured {name}: {config}")

    return configs


def load_config(path: str | Path | None) -> dict[TargetLanguage, BackendConfig]:
    """Load backend configurations from a YAML file.

    Args:
        path: Path to the configuration file; ``None`` or a missing file yields defaults

    Returns:
        Configuration for every supported language

    Raises:
        ConfigError: If the file cannot be parsed or is malformed
    """
    if path is None:
        return parse_config(None)
    path = Path(path)
    if not path.exists():
        logger.debug(f"No configuration at {path}, using defaults")
        return parse_config(None)

    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse configuration {path}: {e}") from e
    return parse_config(document)
