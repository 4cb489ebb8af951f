"""Core transpiler functionality.

This module defines the core interfaces and ordering logic for the transpiler
that are independent of specific target languages.
"""

# Re-export core interfaces and processing classes
from typeport.transpiler.core.dependency import DependencyResolver, sort_items
from typeport.transpiler.core.interfaces import TargetLanguage, TypeRenderer

# Define what's available for import from this package
__all__ = [
    "DependencyResolver",
    "sort_items",
    "TargetLanguage",
    "TypeRenderer",
]
