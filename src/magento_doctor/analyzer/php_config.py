"""PHP Configuration Analyzer - PHP version, ini limits and extensions."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.php import PhpRuntime
from magento_doctor.units import parse_bytes, version_lt

MB = 1024**2


class PhpConfigurationAnalyzer:
    """Checks the PHP CLI the same way it will run cron and bin/magento."""

    CATEGORY = "PHP"

    MINIMUM_VERSION = "7.4.0"
    RECOMMENDED_VERSION = "8.1.0"
    MINIMUM_MEMORY_LIMIT = "2G"
    RECOMMENDED_MEMORY_LIMIT = "4G"

    REQUIRED_EXTENSIONS = [
        "bcmath", "ctype", "curl", "dom", "gd", "hash", "iconv", "intl", "json", "libxml",
        "mbstring", "openssl", "pcre", "pdo", "pdo_mysql", "simplexml", "soap", "sockets",
        "sodium", "spl", "tokenizer", "xmlwriter", "xsl", "zip",
    ]

    PERFORMANCE_EXTENSIONS = {
        "Zend OPcache": "OPcache significantly improves PHP performance",
        "apcu": "APCu provides user cache for improved performance",
        "redis": "Redis extension for better session/cache performance",
        "imagick": "ImageMagick provides better image processing than GD",
    }

    def __init__(self, php_runtime: PhpRuntime, issue_factory: IssueFactory) -> None:
        self.php = php_runtime
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_version(),
            *self.check_memory_limit(),
            *self.check_extensions(),
            *self.check_opcache(),
            *self.check_execution_limits(),
            *self.check_upload_limits(),
        ]

    def _issue(self, priority: str, title: str, details: str, current, recommended, extra=None) -> LegacyIssue:
        return self.issue_factory.create_issue(priority, self.CATEGORY, title, details, current, recommended, extra)

    def check_version(self) -> list[LegacyIssue]:
        version = self.php.version
        if version_lt(version, self.MINIMUM_VERSION):
            return [self._issue(
                "high",
                "PHP version too old",
                "Your PHP version is below the minimum required version for Magento 2.",
                version,
                f"{self.MINIMUM_VERSION} or higher",
            )]
        if version_lt(version, self.RECOMMENDED_VERSION):
            return [self._issue(
                "medium",
                "PHP version not optimal",
                "Newer PHP versions provide better performance and security.",
                version,
                f"{self.RECOMMENDED_VERSION} or higher",
            )]
        return []

    def check_memory_limit(self) -> list[LegacyIssue]:
        limit = str(self.php.ini_get("memory_limit", "-1"))
        if limit.strip() == "-1":
            return []
        size = parse_bytes(limit)
        if size < parse_bytes(self.MINIMUM_MEMORY_LIMIT):
            return [self._issue(
                "high",
                "Memory limit too low",
                "Low memory limit can cause out of memory errors during catalog operations.",
                limit,
                f"{self.MINIMUM_MEMORY_LIMIT} or higher",
            )]
        if size < parse_bytes(self.RECOMMENDED_MEMORY_LIMIT):
            return [self._issue(
                "medium",
                "Memory limit below recommended",
                "Higher memory limit improves performance for large catalogs and import/export operations.",
                limit,
                self.RECOMMENDED_MEMORY_LIMIT,
            )]
        return []

    def check_extensions(self) -> list[LegacyIssue]:
        issues = []
        missing = [e for e in self.REQUIRED_EXTENSIONS if not self.php.extension_loaded(e)]
        if missing:
            issues.append(self._issue(
                "high",
                "Missing required PHP extensions",
                "These extensions are required for Magento 2 to function properly.",
                ", ".join(missing),
                "All required extensions",
                {"missing_extensions": missing},
            ))

        missing_performance = {
            name: reason for name, reason in self.PERFORMANCE_EXTENSIONS.items()
            if not self.php.extension_loaded(name)
        }
        if missing_performance:
            issues.append(self._issue(
                "medium",
                "Missing performance extensions",
                "Installing these extensions can significantly improve performance.",
                ", ".join(missing_performance),
                "Performance extensions installed",
                {"missing_performance_extensions": missing_performance},
            ))
        return issues

    def check_opcache(self) -> list[LegacyIssue]:
        # A missing OPcache is already reported with the performance extensions
        if not self.php.extension_loaded("Zend OPcache"):
            return []
        if not self.php.ini_flag("opcache.enable"):
            return [self._issue(
                "high",
                "OPcache disabled",
                "OPcache is installed but not enabled. Enable it for significant performance improvement.",
                "Disabled",
                "Enabled",
            )]

        issues = []
        memory = self.php.ini_int("opcache.memory_consumption")
        if memory < 256:
            issues.append(self._issue(
                "medium",
                "OPcache memory too low",
                "Increase OPcache memory for better performance with large codebases.",
                f"{memory}MB",
                "512MB or higher",
            ))
        interned = self.php.ini_int("opcache.interned_strings_buffer")
        if interned < 16:
            issues.append(self._issue(
                "low",
                "OPcache interned strings buffer low",
                "Increase buffer size for better string caching.",
                f"{interned}MB",
                "16MB or higher",
            ))
        max_files = self.php.ini_int("opcache.max_accelerated_files")
        if max_files < 20000:
            issues.append(self._issue(
                "medium",
                "OPcache max files too low",
                "Magento 2 has many files. Increase the limit for complete caching.",
                str(max_files),
                "130000 or higher",
            ))
        if self.php.ini_flag("opcache.validate_timestamps") and self.php.ini_int("opcache.revalidate_freq") < 60:
            issues.append(self._issue(
                "low",
                "OPcache revalidation too frequent",
                "Frequent revalidation impacts performance. Increase interval or disable in production.",
                f"{self.php.ini_int('opcache.revalidate_freq')} seconds",
                "validate_timestamps=0 in production",
            ))
        return issues

    def check_execution_limits(self) -> list[LegacyIssue]:
        issues = []
        max_execution_time = self.php.ini_int("max_execution_time")
        if 0 < max_execution_time < 18000:
            issues.append(self._issue(
                "medium",
                "Max execution time too low",
                "Low execution time can cause timeouts during reindexing or import/export operations.",
                f"{max_execution_time} seconds",
                "18000 seconds",
            ))
        max_input_time = self.php.ini_int("max_input_time")
        if 0 < max_input_time < 900:
            issues.append(self._issue(
                "low",
                "Max input time too low",
                "Low input time can cause issues with large file uploads.",
                f"{max_input_time} seconds",
                "900 seconds",
            ))
        max_input_vars = self.php.ini_int("max_input_vars", 1000)
        if max_input_vars < 10000:
            issues.append(self._issue(
                "medium",
                "Max input vars too low",
                "Low input vars limit can cause issues with large forms in admin.",
                str(max_input_vars),
                "10000 or higher",
            ))
        return issues

    def check_upload_limits(self) -> list[LegacyIssue]:
        issues = []
        upload = str(self.php.ini_get("upload_max_filesize", "2M"))
        post = str(self.php.ini_get("post_max_size", "8M"))
        upload_bytes = parse_bytes(upload)
        post_bytes = parse_bytes(post)

        if upload_bytes < 64 * MB:
            issues.append(self._issue(
                "low",
                "Upload max filesize too low",
                "Low upload size limit can prevent uploading large product images or import files.",
                upload,
                "64M or higher",
            ))
        if post_bytes < 64 * MB:
            issues.append(self._issue(
                "low",
                "Post max size too low",
                "Post size should be equal or larger than upload_max_filesize.",
                post,
                "64M or higher",
            ))
        if post_bytes < upload_bytes:
            issues.append(self._issue(
                "medium",
                "Post max size less than upload max filesize",
                "post_max_size must be larger than upload_max_filesize for uploads to work properly.",
                f"post: {post}, upload: {upload}",
                "post_max_size >= upload_max_filesize",
            ))
        return issues
