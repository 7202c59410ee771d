"""Analyzer plugin contract for magento-doctor.

Every pluggable analyzer implements ``Checkable``. Two optional
capabilities let an analyzer opt into more:

- ``Configurable``: receives its per-analyzer ``config`` map from YAML.
- ``DependencyAware``: receives the shared ``Dependencies`` bag.

Capabilities are detected with ``isinstance``/``issubclass``, so an
analyzer must inherit from the base classes it wants to be treated as.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from magento_doctor.model.collection import IssueCollection
    from magento_doctor.model.dependencies import Dependencies

logger = logging.getLogger(__name__)


class Checkable(ABC):
    """Required capability: inspect something and report issues."""

    @abstractmethod
    def analyze(self, collection: "IssueCollection") -> None:
        """Append zero or more issues to *collection*.

        Conditions that can be detected should be reported as issues.
        Raise only for unexpected failures; the runner records those as a
        low priority "System" issue and moves on.
        """
        ...


class Configurable(ABC):
    """Optional capability: accept per-analyzer settings."""

    @abstractmethod
    def set_config(self, config: dict[str, Any]) -> None:
        """Store settings. Missing keys must fall back to defaults."""
        ...


class DependencyAware(ABC):
    """Optional capability: access shared collaborators."""

    @abstractmethod
    def set_dependencies(self, dependencies: "Dependencies") -> None:
        """Store the dependency bag.

        Any collaborator may be absent; check before use and skip the
        check rather than fail.
        """
        ...


class AnalyzerResolutionError(LookupError):
    """A class identifier from configuration could not be resolved."""


# Short identifier -> analyzer class
_analyzer_registry: dict[str, type] = {}


def register_analyzer(identifier: str | None = None):
    """Decorator to register an analyzer class under a short identifier.

    Without an identifier the class is registered under its dotted path.
    """

    def decorator(cls: type) -> type:
        key = identifier or f"{cls.__module__}.{cls.__qualname__}"
        _analyzer_registry[key] = cls
        return cls

    return decorator


def class_identifier(identifier: str) -> str:
    """Normalize ``package.module:Class`` to ``package.module.Class``."""
    return identifier.strip().replace(":", ".")


def resolve_class(identifier: str) -> type:
    """Resolve a configured class identifier to a class.

    Looks in the registry first, then imports ``package.module.Class`` or
    ``package.module:Class``.

    Raises:
        AnalyzerResolutionError: Unknown identifier, import failure, or the
            name does not refer to a class.
    """
    if not isinstance(identifier, str) or not identifier.strip():
        raise AnalyzerResolutionError(f"Invalid analyzer class identifier: {identifier!r}")

    if identifier in _analyzer_registry:
        return _analyzer_registry[identifier]

    path = class_identifier(identifier)
    if path in _analyzer_registry:
        return _analyzer_registry[path]

    module_name, _, class_name = path.rpartition(".")
    if not module_name:
        raise AnalyzerResolutionError(f"Analyzer class not found: {identifier}")

    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        raise AnalyzerResolutionError(
            f"Analyzer class not found: {identifier} ({type(e).__name__}: {e})"
        ) from e

    cls = getattr(module, class_name, None)
    if cls is None:
        raise AnalyzerResolutionError(f"Analyzer class not found: {identifier}")
    if not isinstance(cls, type):
        raise AnalyzerResolutionError(f"{identifier} is not a class")
    return cls
