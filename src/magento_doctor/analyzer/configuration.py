"""Configuration Analyzer - Application mode, cache backends and asset settings."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.deployment import AppState, CacheTypeList, DeploymentConfig
from magento_doctor.scanner.scope_config import ScopeConfig

FILE_BACKEND = "Magento\\Framework\\Cache\\Backend\\File"


class ConfigurationAnalyzer:
    """Checks the settings every production store should have."""

    CATEGORY = "Config"

    # path -> (priority, title, details)
    ASSET_FLAGS = {
        "dev/js/minify_files": (
            "medium",
            "Enable JavaScript minification",
            "Minifying JavaScript files reduces file size by removing unnecessary characters, "
            "resulting in faster downloads.",
        ),
        "dev/css/minify_files": (
            "medium",
            "Enable CSS minification",
            "Minifying CSS files reduces file size and improves page load times.",
        ),
        "dev/js/enable_js_bundling": (
            "low",
            "Consider enabling JavaScript bundling",
            "JS bundling reduces the number of HTTP requests by combining multiple JS files.",
        ),
        "dev/css/merge_css_files": (
            "medium",
            "Enable CSS merging",
            "Merging CSS files reduces the number of HTTP requests, improving page load performance.",
        ),
    }

    def __init__(
        self,
        deployment_config: DeploymentConfig,
        app_state: AppState,
        cache_type_list: CacheTypeList,
        scope_config: ScopeConfig,
        issue_factory: IssueFactory,
    ) -> None:
        self.deployment_config = deployment_config
        self.app_state = app_state
        self.cache_type_list = cache_type_list
        self.scope_config = scope_config
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_mode(),
            *self.check_cache_backends(),
            *self.check_session_storage(),
            *self.check_asset_settings(),
            *self.check_cache_types(),
        ]

    def check_mode(self) -> list[LegacyIssue]:
        mode = self.app_state.get_mode()
        if mode == AppState.MODE_PRODUCTION:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            "Switch from developer mode to production",
            "Developer mode significantly impacts performance. Production mode disables certain "
            "debugging features and enables caching optimizations.",
            mode,
            AppState.MODE_PRODUCTION,
        )]

    def check_cache_backends(self) -> list[LegacyIssue]:
        issues = []
        default = self.deployment_config.get("cache/frontend/default/backend")
        if not default or default == FILE_BACKEND:
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Use Redis for cache backend",
                "File-based cache significantly impacts performance. Redis provides in-memory "
                "caching with much faster read/write operations.",
                "File",
                "Redis",
            ))

        page_cache = self.deployment_config.get("cache/frontend/page_cache/backend")
        if not page_cache or page_cache == FILE_BACKEND:
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Use Varnish or Redis for page cache",
                "File-based page cache severely limits performance. Varnish or Redis provide much "
                "better full page cache performance.",
                "File",
                "Varnish/Redis",
            ))
        return issues

    def check_session_storage(self) -> list[LegacyIssue]:
        save = self.deployment_config.get("session/save", "files")
        if save != "files":
            return []
        return [self.issue_factory.create_issue(
            "medium",
            self.CATEGORY,
            "Use Redis for session storage",
            "File-based sessions can impact performance with high traffic. Redis provides better "
            "session handling and supports session clustering.",
            "files",
            "redis",
        )]

    def check_asset_settings(self) -> list[LegacyIssue]:
        return [
            self.issue_factory.create_issue(priority, self.CATEGORY, title, details, "Disabled", "Enabled")
            for path, (priority, title, details) in self.ASSET_FLAGS.items()
            if not self.scope_config.is_set_flag(path)
        ]

    def check_cache_types(self) -> list[LegacyIssue]:
        disabled = self.cache_type_list.disabled()
        if not disabled:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            "Enable all cache types",
            f"{len(disabled)} cache type(s) are disabled. Disabled caches significantly impact performance.",
            ", ".join(disabled),
            "All enabled",
            {"disabled_caches": disabled},
        )]
