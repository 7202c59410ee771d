"""Analyzer package - The built-in review analyzers and how they are loaded.

Core analyzers are legacy-style classes: collaborators arrive through
the constructor and ``analyze()`` returns a list of issues. They are run
through ``LegacyAnalyzerAdapter``. Analyzers NEVER run shell commands
directly; they only use the collaborators collected by the scanners.
"""

from magento_doctor.analyzer.legacy_adapter import (
    LEGACY_DEPENDENCIES,
    LegacyAnalyzerAdapter,
    MissingDependencyError,
    register_legacy_dependencies,
)
from magento_doctor.analyzer.registry import CORE_ANALYZERS, AnalyzerDescriptor, AnalyzerLoader

__all__ = [
    "CORE_ANALYZERS",
    "LEGACY_DEPENDENCIES",
    "AnalyzerDescriptor",
    "AnalyzerLoader",
    "LegacyAnalyzerAdapter",
    "MissingDependencyError",
    "register_legacy_dependencies",
]
