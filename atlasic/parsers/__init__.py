"""Language-specific lexical dependency extractors and their factory."""

from atlasic.parsers.factory import ExtractorFactory
from atlasic.parsers.go_parser import GoDependencyExtractor
from atlasic.parsers.java_parser import JavaDependencyExtractor
from atlasic.parsers.javascript_parser import JavaScriptDependencyExtractor
from atlasic.parsers.python_parser import PythonDependencyExtractor

BUILTIN_EXTRACTORS = (
    JavaScriptDependencyExtractor,
    PythonDependencyExtractor,
    JavaDependencyExtractor,
    GoDependencyExtractor,
)

__all__ = [
    "ExtractorFactory",
    "BUILTIN_EXTRACTORS",
    "JavaScriptDependencyExtractor",
    "PythonDependencyExtractor",
    "JavaDependencyExtractor",
    "GoDependencyExtractor",
]
