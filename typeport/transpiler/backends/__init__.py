from typeport.transpiler.backends.base import Backend
from typeport.transpiler.backends.go import GoBackend, create_go_backend
from typeport.transpiler.backends.models import BackendConfig
from typeport.transpiler.backends.python import PythonBackend, create_python_backend
from typeport.transpiler.core.interfaces import TargetLanguage


def create_backend(
    language: TargetLanguage = TargetLanguage.PYTHON,
    config: BackendConfig | None = None,
) -> Backend:
    """Create a backend instance based on target language.

    Args:
        language: The target language to generate
        config: Backend configuration, defaults are used when omitted

    Returns:
        An instance of the requested backend

    Raises:
        ValueError: If the target language is not supported
    """
    if language == TargetLanguage.PYTHON:
        return create_python_backend(config)
    elif language == TargetLanguage.GO:
        return create_go_backend(config)
    else:
        raise ValueError(f"Unsupported target language: {language}")


__all__ = [
    "Backend",
    "BackendConfig",
    "GoBackend",
    "PythonBackend",
    "create_backend",
    "create_go_backend",
    "create_python_backend",
]
