from typeport.transpiler import GenerationReport, generate, transpile
from typeport.transpiler.backends import create_backend
from typeport.transpiler.collector import collect_info, load_parsed_data
from typeport.transpiler.core.interfaces import TargetLanguage

__version__ = "0.1.0"


__all__ = [
    "GenerationReport",
    "TargetLanguage",
    "collect_info",
    "create_backend",
    "generate",
    "load_parsed_data",
    "transpile",
]
