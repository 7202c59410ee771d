"""Frontend Analyzer - Storefront asset and image settings."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.scope_config import ScopeConfig

JS_BUNDLING = "dev/js/enable_js_bundling"
JS_MINIFY = "dev/js/minify_files"
JS_MERGE = "dev/js/merge_files"
CSS_MINIFY = "dev/css/minify_files"
CSS_MERGE = "dev/css/merge_css_files"
HTML_MINIFY = "dev/template/minify_html"
SIGN_STATIC = "dev/static/sign"
LAZY_LOADING = "catalog/frontend/lazy_loading_enable"
IMAGE_RESIZE = "system/upload_configuration/enable_resize_images"


class FrontendAnalyzer:
    CATEGORY = "Frontend"

    def __init__(self, scope_config: ScopeConfig, issue_factory: IssueFactory) -> None:
        self.scope_config = scope_config
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_javascript(),
            *self.check_css(),
            *self.check_html_and_static(),
            *self.check_images(),
        ]

    def _disabled(self, priority: str, title: str, details: str, recommended: str = "Enabled") -> LegacyIssue:
        return self.issue_factory.create_issue(priority, self.CATEGORY, title, details, "Disabled", recommended)

    def check_javascript(self) -> list[LegacyIssue]:
        issues = []
        minify = self.scope_config.is_set_flag(JS_MINIFY)
        merge = self.scope_config.is_set_flag(JS_MERGE)
        bundling = self.scope_config.is_set_flag(JS_BUNDLING)

        if not minify:
            issues.append(self._disabled(
                "high",
                "JavaScript minification disabled",
                "Minifying JavaScript reduces file size and improves page load times.",
            ))
        if not merge and not bundling:
            issues.append(self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "JavaScript merging/bundling disabled",
                "Merging or bundling JavaScript files reduces HTTP requests and improves performance.",
                "Both disabled",
                "Enable merging or bundling",
            ))
        if merge and bundling:
            issues.append(self.issue_factory.create_issue(
                "low",
                self.CATEGORY,
                "Both JS merge and bundling enabled",
                "Using both merge and bundling can cause conflicts. Choose one approach.",
                "Both enabled",
                "Use one method",
            ))
        return issues

    def check_css(self) -> list[LegacyIssue]:
        issues = []
        if not self.scope_config.is_set_flag(CSS_MINIFY):
            issues.append(self._disabled(
                "high", "CSS minification disabled", "Minifying CSS reduces file size and improves page load times."
            ))
        if not self.scope_config.is_set_flag(CSS_MERGE):
            issues.append(self._disabled(
                "medium", "CSS merging disabled", "Merging CSS files reduces HTTP requests and improves performance."
            ))
        return issues

    def check_html_and_static(self) -> list[LegacyIssue]:
        issues = []
        if not self.scope_config.is_set_flag(HTML_MINIFY):
            issues.append(self._disabled(
                "medium", "HTML minification disabled", "Minifying HTML reduces page size and improves load times."
            ))
        if not self.scope_config.is_set_flag(SIGN_STATIC):
            issues.append(self._disabled(
                "low",
                "Static content signing disabled",
                "Signing static files enables better browser caching after deployments.",
            ))
        return issues

    def check_images(self) -> list[LegacyIssue]:
        issues = []
        if not self.scope_config.is_set_flag(IMAGE_RESIZE):
            issues.append(self._disabled(
                "medium",
                "Image resize on upload disabled",
                "Resizing images on upload prevents oversized images from being served.",
            ))
        # Only present on 2.4.2+, absent means the store cannot use it
        if self.scope_config.get_value(LAZY_LOADING) is not None and not self.scope_config.is_set_flag(LAZY_LOADING):
            issues.append(self._disabled(
                "medium", "Lazy loading disabled", "Lazy loading images improves initial page load performance."
            ))
        return issues
