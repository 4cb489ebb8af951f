"""
Code generation for type definitions.

This module provides the top-level interface for transpiling a snapshot of type
definitions to one or more target languages.
"""

import io
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from loguru import logger

from typeport.transpiler.backends import Backend, BackendConfig, create_backend
from typeport.transpiler.core.dependency import sort_items
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import TranspilerError
from typeport.transpiler.models import ParsedData


@dataclass
class GenerationReport:
    """Outcome of a multi-backend run.

    Attributes:
        outputs: Generated document per language that succeeded
        errors: Error per language that failed
    """

    outputs: dict[TargetLanguage, str] = field(default_factory=dict)
    errors: dict[TargetLanguage, TranspilerError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def generate(data: ParsedData, backend: Backend) -> str:
    """Run a single backend over a snapshot.

    Args:
        data: Snapshot of all type definitions
        backend: Backend for the target language

    Returns:
        The generated document

    Raises:
        TranspilerError: If generation fails
    """
    sink = io.StringIO()
    backend.generate_types(sink, data)
    return sink.getvalue()


def transpile(
    data: ParsedData,
    languages: Iterable[TargetLanguage] = (TargetLanguage.PYTHON,),
    configs: Mapping[TargetLanguage, BackendConfig] | None = None,
) -> GenerationReport:
    """Transpile a snapshot to several target languages.

    Each backend runs independently: a failing backend is recorded in the
    report and the others still produce output.

    Args:
        data: Snapshot of all type definitions
        languages: Target languages to generate
        configs: Backend configuration per language, defaults where missing

    Returns:
        Report with the output or the error of every backend

    Raises:
        UnresolvableCycleError: If the types cannot be ordered at all
    """
    configs = configs or {}

    # Ordering does not depend on the backend; a cycle aborts the whole run
    sort_items(data.items())

    report = GenerationReport()
    for language in languages:
        backend = create_backend(language, configs.get(language))
        try:
            report.outputs[language] = generate(data, backend)
            logger.debug(f"Generated {language.value} output")
        except TranspilerError as e:
            logger.debug(f"{language.value} generation failed: {e}")
            report.errors[language] = e
    return report


__all__ = ["GenerationReport", "generate", "transpile"]
