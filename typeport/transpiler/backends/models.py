from dataclasses import dataclass, field
from typing import Any


@dataclass
class BackendConfig:
    """Configuration for a target language backend.

    Attributes:
        name: Backend name, matches the target language name
        file_extension: Extension of generated files, including the dot
        type_mappings: Source type name to target type name substitutions
        type_overrides: Literal types keyed by ``Struct.field`` or type name
        additional_options: Backend specific settings (Go ``package``, ...)
    """

    name: str
    file_extension: str
    type_mappings: dict[str, str] = field(default_factory=dict)
    type_overrides: dict[str, str] = field(default_factory=dict)
    additional_options: dict[str, Any] = field(default_factory=dict)
