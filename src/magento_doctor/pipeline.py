"""Shared review pipeline.

Public API:
    build_runner(connector, root, ...) -> ReviewRunner
    ReviewRunner.list_analyzers() -> list[dict]
    ReviewRunner.run(category, skip_ids) -> ReviewResult
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable

from magento_doctor.analyzer.legacy_adapter import LegacyAnalyzerAdapter
from magento_doctor.analyzer.registry import AnalyzerDescriptor, AnalyzerLoader
from magento_doctor.checks import Checkable, DependencyAware
from magento_doctor.config import ConfigLoader, review_timeout
from magento_doctor.connector.base import Connector
from magento_doctor.model.collection import IssueCollection
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.model.issue import Issue, Priority
from magento_doctor.scanner.environment import collect_dependencies

logger = logging.getLogger(__name__)

FAILURE_CATEGORY = "System"


class RunState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class AnalyzerRun:
    """Execution record of one analyzer within a review."""

    descriptor: AnalyzerDescriptor
    state: RunState = RunState.PENDING
    issue_count: int = 0
    duration: float = 0.0
    error: str | None = None

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name


@dataclass
class ReviewResult:
    """Issues of one review plus how each analyzer fared."""

    issues: list[Issue] = field(default_factory=list)
    runs: list[AnalyzerRun] = field(default_factory=list)

    @property
    def high_priority_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_high)

    @property
    def exit_code(self) -> int:
        return 1 if self.high_priority_count > 0 else 0

    @property
    def nothing_to_run(self) -> bool:
        return not self.runs

    @property
    def failed_runs(self) -> list[AnalyzerRun]:
        return [run for run in self.runs if run.state == RunState.FAILED]


class AnalyzerTimeoutError(TimeoutError):
    def __init__(self, seconds: float) -> None:
        super().__init__(f"Timed out after {seconds:g} seconds")


class ReviewRunner:
    """Runs the selected analyzers in order and isolates their failures.

    Example:
        >>> runner = ReviewRunner(AnalyzerLoader(config).load(), dependencies)
        >>> result = runner.run(category="redis")
        >>> result.high_priority_count
        1
    """

    def __init__(
        self,
        descriptors: dict[str, AnalyzerDescriptor],
        dependencies: Dependencies,
        *,
        timeout: float | None = None,
        progress: Callable[[AnalyzerRun], None] | None = None,
    ) -> None:
        self.descriptors = descriptors
        self.dependencies = dependencies
        self.timeout = timeout if timeout and timeout > 0 else None
        self.progress = progress

    def list_analyzers(self) -> list[dict[str, str]]:
        return [descriptor.summary() for descriptor in self.descriptors.values()]

    def select(self, category: str | None = None, skip_ids: Iterable[str] = ()) -> list[AnalyzerDescriptor]:
        skip = set(skip_ids)
        return [
            descriptor
            for analyzer_id, descriptor in self.descriptors.items()
            if analyzer_id not in skip and (not category or descriptor.category == category)
        ]

    def run(self, category: str | None = None, skip_ids: Iterable[str] = ()) -> ReviewResult:
        selected = self.select(category, skip_ids)
        if not selected:
            logger.info("No analyzers selected (category=%s)", category)
            return ReviewResult()

        collection = IssueCollection()
        runs = [AnalyzerRun(descriptor) for descriptor in selected]
        for run in runs:
            self._execute(run, collection)
        return ReviewResult(issues=list(collection.issues), runs=runs)

    def _notify(self, run: AnalyzerRun) -> None:
        if self.progress:
            self.progress(run)

    def _execute(self, run: AnalyzerRun, collection: IssueCollection) -> None:
        run.state = RunState.RUNNING
        self._notify(run)
        before = len(collection)
        started = time.monotonic()

        try:
            analyzer = self._prepare(run.descriptor)
            if self.timeout is None:
                analyzer.analyze(collection)
            else:
                self._analyze_with_timeout(analyzer, collection)
        except Exception as e:
            run.state = RunState.FAILED
            run.error = str(e) or type(e).__name__
            logger.warning('Analyzer "%s" failed: %s', run.name, run.error)
            logger.debug("Analyzer %s traceback", run.id, exc_info=True)
            (
                collection.create_issue()
                .set_priority(Priority.LOW)
                .set_category(FAILURE_CATEGORY)
                .set_issue(f'Analyzer "{run.name}" failed')
                .set_details(run.error)
                .finalize()
            )
        else:
            run.state = RunState.SUCCEEDED
        finally:
            run.duration = time.monotonic() - started
            run.issue_count = len(collection) - before
            self._notify(run)

    def _prepare(self, descriptor: AnalyzerDescriptor) -> Checkable:
        """Wire dependencies and configuration into a ready analyzer."""
        if descriptor.instance is not None:
            analyzer = descriptor.instance
            if isinstance(analyzer, DependencyAware):
                analyzer.set_dependencies(self.dependencies)
            return analyzer

        adapter = LegacyAnalyzerAdapter(descriptor.legacy_class or "")
        if descriptor.config:
            adapter.set_config(descriptor.config)
        adapter.set_dependencies(self.dependencies)
        return adapter

    def _analyze_with_timeout(self, analyzer: Checkable, collection: IssueCollection) -> None:
        """Run on a worker thread against a staged collection.

        Staged issues are merged only on success. A timed-out worker is left
        behind as a daemon thread writing to the discarded stage, so it
        never keeps the process alive.
        """
        staged = IssueCollection()
        errors: list[Exception] = []

        def work() -> None:
            try:
                analyzer.analyze(staged)
            except Exception as e:
                errors.append(e)

        worker = threading.Thread(target=work, name="analyzer", daemon=True)
        worker.start()
        worker.join(self.timeout)
        if worker.is_alive():
            raise AnalyzerTimeoutError(self.timeout or 0)
        if errors:
            raise errors[0]
        collection.extend(staged)


def build_runner(
    connector: Connector,
    root: str,
    config_file: str | Path | None = None,
    timeout: float | None = None,
    progress: Callable[[AnalyzerRun], None] | None = None,
    config_loader: ConfigLoader | None = None,
) -> ReviewRunner:
    """Load configuration, collect the environment and load analyzers.

    Raises:
        MagentoNotFoundError: *root* is not a Magento installation.
    """
    config: dict[str, Any] = (config_loader or ConfigLoader()).load(connector, root, config_file)
    dependencies = collect_dependencies(connector, root)
    descriptors = AnalyzerLoader(config).load()
    logger.info("Loaded %d analyzers", len(descriptors))

    if timeout is None:
        timeout = review_timeout(config)
    return ReviewRunner(descriptors, dependencies, timeout=timeout, progress=progress)
