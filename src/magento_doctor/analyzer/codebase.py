"""Codebase Analyzer - Code structure, custom code volume and disk usage."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.filesystem import Filesystem
from magento_doctor.scanner.modules import ComponentRegistrar
from magento_doctor.units import abbreviate, format_bytes

MB = 1024**2
GB = 1024**3


class CodebaseAnalyzer:
    CATEGORY = "Codebase"

    GENERATED_WARNING = 1 * GB
    GENERATED_CRITICAL = 5 * GB
    VAR_WARNING = 10 * GB
    CUSTOM_MODULE_WARNING = 20
    MODULE_SIZE_WARNING = 50 * MB
    MEDIA_FILE_MB = 10

    def __init__(
        self,
        filesystem: Filesystem,
        component_registrar: ComponentRegistrar,
        issue_factory: IssueFactory,
    ) -> None:
        self.filesystem = filesystem
        self.component_registrar = component_registrar
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_generated_directory(),
            *self.check_var_directory(),
            *self.check_custom_code(),
            *self.check_core_modifications(),
            *self.check_media_files(),
        ]

    def check_generated_directory(self) -> list[LegacyIssue]:
        size = self.filesystem.size("generated")
        if size > self.GENERATED_CRITICAL:
            return [self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Generated directory exceeds 5GB",
                "Extremely large generated directory impacts deployment and can cause disk space issues.",
                format_bytes(size),
                "Under 1GB",
            )]
        if size > self.GENERATED_WARNING:
            return [self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "Generated directory exceeds 1GB",
                "Large generated directory may indicate need for cleanup. Run setup:di:compile after cleaning.",
                format_bytes(size),
                "Under 1GB",
            )]
        return []

    def check_var_directory(self) -> list[LegacyIssue]:
        size = self.filesystem.size("var")
        if size <= self.VAR_WARNING:
            return []
        return [self.issue_factory.create_issue(
            "medium",
            self.CATEGORY,
            "Var directory exceeds 10GB",
            "Large var directory indicates need for cleanup of logs, reports, and cache files.",
            format_bytes(size),
            "Regular cleanup",
        )]

    def check_custom_code(self) -> list[LegacyIssue]:
        issues = []
        paths = self.component_registrar.get_paths()

        if len(paths) > self.CUSTOM_MODULE_WARNING:
            issues.append(self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "High number of custom modules in app/code",
                "Many custom modules can increase complexity and maintenance overhead. "
                "Consider consolidating functionality.",
                str(len(paths)),
                "Consolidated modules",
            ))

        large = []
        for name, path in paths.items():
            size = self.filesystem.size(path)
            if size > self.MODULE_SIZE_WARNING:
                large.append(f"{name} ({format_bytes(size)})")
        if large:
            issues.append(self.issue_factory.create_issue(
                "low",
                self.CATEGORY,
                "Large custom modules detected",
                "Large modules may contain unnecessary files or assets. Review and optimize module contents.",
                abbreviate(large),
                "Optimized module size",
                {"large_modules": large},
            ))
        return issues

    def check_core_modifications(self) -> list[LegacyIssue]:
        issues = []
        if self.filesystem.is_dir("app/code/local"):
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Local code pool detected",
                "app/code/local indicates Magento 1 style core modifications. This is not supported in Magento 2.",
                "app/code/local exists",
                "Use plugins/preferences",
            ))
        if self.filesystem.is_dir("vendor/.git"):
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Vendor directory under version control",
                "Having vendor directory in git may indicate core modifications. Use composer patches instead.",
                "vendor/.git exists",
                "Composer patches",
            ))
        return issues

    def check_media_files(self) -> list[LegacyIssue]:
        files = self.filesystem.large_files("pub/media", self.MEDIA_FILE_MB)
        if not files:
            return []
        total = sum(size for _, size in files)
        return [self.issue_factory.create_issue(
            "low",
            self.CATEGORY,
            "Large media files detected",
            f"Found {len(files)} files over 10MB (total: {format_bytes(total)}). "
            "Consider using CDN or image optimization.",
            f"{len(files)} files",
            "Files under 10MB",
            {"large_files": [path for path, _ in files[:20]]},
        )]
