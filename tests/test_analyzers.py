"""Tests for the core analyzers.

Collaborators are mocked so every check can be driven from a handful of
values, the way a real installation would present them.
"""

from unittest.mock import MagicMock

import pytest

from magento_doctor.analyzer.api import ApiAnalyzer
from magento_doctor.analyzer.codebase import CodebaseAnalyzer
from magento_doctor.analyzer.configuration import ConfigurationAnalyzer
from magento_doctor.analyzer.database import DatabaseAnalyzer
from magento_doctor.analyzer.frontend import FrontendAnalyzer
from magento_doctor.analyzer.indexer_cron import IndexerCronAnalyzer
from magento_doctor.analyzer.modules import ModuleAnalyzer
from magento_doctor.analyzer.mysql_config import MysqlConfigurationAnalyzer
from magento_doctor.analyzer.php_config import PhpConfigurationAnalyzer
from magento_doctor.analyzer.redis_config import RedisConfigurationAnalyzer
from magento_doctor.analyzer.third_party import ThirdPartyAnalyzer
from magento_doctor.scanner.deployment import AppState, CacheTypeList, DeploymentConfig
from magento_doctor.scanner.filesystem import Filesystem
from magento_doctor.scanner.indexer import IndexerRegistry, IndexerState
from magento_doctor.scanner.modules import ComponentRegistrar, ModuleList
from magento_doctor.scanner.php import PhpRuntime
from magento_doctor.scanner.product import ProductMetadata
from magento_doctor.scanner.scope_config import ScopeConfig

from conftest import mock_db

REDIS_BACKEND = "Magento\\Framework\\Cache\\Backend\\Redis"


def titles(issues):
    return [issue.issue for issue in issues]


def by_title(issues, title):
    return next(issue for issue in issues if issue.issue == title)


class TestConfigurationAnalyzer:
    def analyzer(self, issue_factory, env, mode="production", flags=None):
        config = DeploymentConfig(env)
        return ConfigurationAnalyzer(
            config,
            AppState(mode),
            CacheTypeList.from_deployment(config),
            ScopeConfig(flags or {}),
            issue_factory,
        )

    def test_default_installation(self, issue_factory):
        issues = self.analyzer(issue_factory, {"cache_types": {"config": 1, "full_page": 0}}, mode="developer").analyze()

        assert by_title(issues, "Switch from developer mode to production").priority == "high"
        assert by_title(issues, "Use Redis for cache backend").priority == "high"
        assert by_title(issues, "Use Varnish or Redis for page cache").priority == "high"
        assert by_title(issues, "Use Redis for session storage").priority == "medium"
        assert "Enable JavaScript minification" in titles(issues)
        cache_types = by_title(issues, "Enable all cache types")
        assert cache_types.extra == {"disabled_caches": ["full_page"]}

    def test_tuned_installation_is_clean(self, issue_factory):
        env = {
            "cache": {"frontend": {
                "default": {"backend": REDIS_BACKEND},
                "page_cache": {"backend": REDIS_BACKEND},
            }},
            "session": {"save": "redis"},
            "cache_types": {"config": 1},
        }
        flags = {path: "1" for path in ConfigurationAnalyzer.ASSET_FLAGS}

        assert self.analyzer(issue_factory, env, flags=flags).analyze() == []


class TestRedisConfigurationAnalyzer:
    def test_not_configured(self, issue_factory):
        issues = RedisConfigurationAnalyzer(DeploymentConfig({}), issue_factory).analyze()

        assert titles(issues) == ["Redis not configured"]
        assert issues[0].priority == "high"

    def test_shared_database_and_missing_sessions(self, issue_factory):
        options = {"server": "127.0.0.1", "database": "0", "compress_data": "1", "compression_lib": "lzf"}
        env = {"cache": {"frontend": {
            "default": {"backend": REDIS_BACKEND, "backend_options": dict(options, persistent="cache")},
            "page_cache": {"backend": REDIS_BACKEND, "backend_options": dict(options, persistent="fpc")},
        }}}

        issues = RedisConfigurationAnalyzer(DeploymentConfig(env), issue_factory).analyze()

        assert titles(issues) == [
            "Redis on localhost",
            "Sessions not using Redis",
            "Shared Redis database",
            "Non-standard database for page_cache",
        ]
        assert by_title(issues, "Shared Redis database").current_value == "DB 0: cache, page_cache"


class TestPhpConfigurationAnalyzer:
    def runtime(self, version="8.2.10", ini=None, extensions=None):
        base_ini = {
            "memory_limit": "4G",
            "opcache.enable": "1",
            "opcache.memory_consumption": "512",
            "opcache.interned_strings_buffer": "32",
            "opcache.max_accelerated_files": "130000",
            "opcache.validate_timestamps": "0",
            "max_execution_time": "0",
            "max_input_time": "-1",
            "max_input_vars": "10000",
            "upload_max_filesize": "64M",
            "post_max_size": "128M",
        }
        base_ini.update(ini or {})
        if extensions is None:
            extensions = PhpConfigurationAnalyzer.REQUIRED_EXTENSIONS + list(
                PhpConfigurationAnalyzer.PERFORMANCE_EXTENSIONS
            )
        return PhpRuntime(version, base_ini, extensions)

    def test_tuned_runtime_is_clean(self, issue_factory):
        assert PhpConfigurationAnalyzer(self.runtime(), issue_factory).analyze() == []

    @pytest.mark.parametrize("version, priority", [("7.3.33", "high"), ("8.0.30", "medium")])
    def test_version(self, issue_factory, version, priority):
        issues = PhpConfigurationAnalyzer(self.runtime(version=version), issue_factory).check_version()

        assert [issue.priority for issue in issues] == [priority]

    @pytest.mark.parametrize("limit, expected", [("1G", "high"), ("2G", "medium"), ("-1", None)])
    def test_memory_limit(self, issue_factory, limit, expected):
        issues = PhpConfigurationAnalyzer(
            self.runtime(ini={"memory_limit": limit}), issue_factory
        ).check_memory_limit()

        assert [issue.priority for issue in issues] == ([expected] if expected else [])

    def test_missing_extensions(self, issue_factory):
        runtime = self.runtime(extensions=["bcmath", "Zend OPcache"])

        issues = PhpConfigurationAnalyzer(runtime, issue_factory).check_extensions()

        required = by_title(issues, "Missing required PHP extensions")
        assert "intl" in required.extra["missing_extensions"]
        assert "bcmath" not in required.extra["missing_extensions"]
        assert "Zend OPcache" not in by_title(issues, "Missing performance extensions").extra[
            "missing_performance_extensions"
        ]

    def test_opcache_disabled(self, issue_factory):
        issues = PhpConfigurationAnalyzer(
            self.runtime(ini={"opcache.enable": "0"}), issue_factory
        ).check_opcache()

        assert titles(issues) == ["OPcache disabled"]

    def test_post_smaller_than_upload(self, issue_factory):
        issues = PhpConfigurationAnalyzer(
            self.runtime(ini={"upload_max_filesize": "256M", "post_max_size": "128M"}), issue_factory
        ).check_upload_limits()

        assert titles(issues) == ["Post max size less than upload max filesize"]


class TestModuleAnalyzer:
    def test_modules(self, issue_factory):
        modules = ModuleList({
            "Magento_Catalog": 1,
            "Magento_Logging": 1,
            "Amasty_Shopby": 1,
            "Mirasvit_LayeredNavigation": 1,
            "Acme_Legacy": 0,
        })
        registrar = MagicMock(spec=ComponentRegistrar)
        registrar.get_paths.return_value = {"Acme_Legacy": "/srv/app/code/Acme/Legacy"}

        issues = ModuleAnalyzer(modules, registrar, issue_factory).analyze()

        assert titles(issues) == [
            "Performance-impacting modules detected",
            "Disabled modules in codebase",
            "Duplicate functionality detected",
        ]
        impacting = by_title(issues, "Performance-impacting modules detected").extra["impacting_modules"]
        assert set(impacting) == {"Magento_Logging", "Amasty_Shopby", "Mirasvit_LayeredNavigation"}
        duplicates = by_title(issues, "Duplicate functionality detected").extra["duplicate_modules"]
        assert duplicates == {"layered_navigation": ["Amasty_Shopby", "Mirasvit_LayeredNavigation"]}

    def test_third_party_count(self, issue_factory):
        modules = ModuleList({f"Vendor_Module{i}": 1 for i in range(51)})
        registrar = MagicMock(spec=ComponentRegistrar)
        registrar.get_paths.return_value = {}

        issues = ModuleAnalyzer(modules, registrar, issue_factory).check_third_party_count()

        assert issues[0].priority == "high"
        assert issues[0].current_value == "51"


class TestThirdPartyAnalyzer:
    def test_extensions(self, issue_factory):
        modules = ModuleList({"Amasty_Fpc": 1, "Acme_DebugToolbar": 1, "Magento_Catalog": 1})
        product = ProductMetadata(
            version="2.4.6",
            requires={
                "acme/old-feed": {"magento/framework": "^101.0.0|^102.0.0"},
                "acme/new-feed": {"magento/framework": "^103.0.0"},
            },
        )

        issues = ThirdPartyAnalyzer(modules, product, issue_factory).analyze()

        assert titles(issues) == [
            "Problematic extension: Amasty_Fpc",
            "Potentially incompatible extensions",
            "Development extensions in production",
        ]
        assert by_title(issues, "Potentially incompatible extensions").extra == {
            "incompatible_modules": ["acme/old-feed"]
        }
        assert by_title(issues, "Development extensions in production").extra == {
            "dev_extensions": ["Acme_DebugToolbar"]
        }


class TestIndexerCronAnalyzer:
    def test_unhealthy_indexers_and_cron(self, issue_factory):
        registry = IndexerRegistry([
            IndexerState("catalog_product_price", "invalid", scheduled=True),
            IndexerState("customer_grid", "valid", scheduled=False),
        ])
        db = mock_db(
            counts={"status = 'pending'": 5000, "status = 'error'": 3},
            rows={"status = 'running'": [{"job_code": "indexer_reindex_all_invalid"}]},
        )

        issues = IndexerCronAnalyzer(registry, db, issue_factory).analyze()

        assert titles(issues) == [
            "Invalid indexers detected",
            'Indexers in "Update on Save" mode',
            "Cron not running",
            "Excessive pending cron jobs",
            "Stuck cron jobs detected",
        ]
        assert by_title(issues, "Stuck cron jobs detected").extra == {"stuck_jobs": ["indexer_reindex_all_invalid"]}

    def test_healthy(self, issue_factory):
        registry = IndexerRegistry([IndexerState("catalog_product_price", "valid", scheduled=True)])
        db = mock_db(counts={"status = 'success'": 120})

        assert IndexerCronAnalyzer(registry, db, issue_factory).analyze() == []


class TestDatabaseAnalyzer:
    def test_sizes_and_counts(self, issue_factory):
        db = mock_db(
            counts={
                "SUM(data_length + index_length)": 60 * 1024**3,
                "FROM url_rewrite": 750_000,
                "FROM report_event": 2_000_000,
            },
            rows={"AS size": [{"name": "sales_order", "size": str(2 * 1024**3)}]},
            tables=("report_event",),
        )

        issues = DatabaseAnalyzer(db, issue_factory).analyze()

        assert by_title(issues, "Database size exceeds 50GB").current_value == "60 GB"
        assert by_title(issues, "Large tables detected").current_value == "sales_order (2 GB)"
        assert by_title(issues, "Excessive URL rewrites").current_value == "750,000"
        assert len(issues) == 4


class TestFrontendAnalyzer:
    def test_merge_and_bundling_both_enabled(self, issue_factory):
        scope = ScopeConfig({
            "dev/js/minify_files": "1",
            "dev/js/merge_files": "1",
            "dev/js/enable_js_bundling": "1",
        })

        issues = FrontendAnalyzer(scope, issue_factory).check_javascript()

        assert titles(issues) == ["Both JS merge and bundling enabled"]

    def test_nothing_enabled(self, issue_factory):
        issues = FrontendAnalyzer(ScopeConfig({}), issue_factory).check_javascript()

        assert [issue.priority for issue in issues] == ["high", "medium"]


class TestApiAnalyzer:
    def test_oauth_and_rate_limiting(self, issue_factory):
        scope = ScopeConfig({
            "oauth/cleanup/cleanup_probability": "0",
            "oauth/consumer/expiration_period": "86400",
            "webapi/rate_limiting/enabled": "0",
        })
        db = mock_db(counts={"oauth_token": 20_000}, tables=("oauth_token",))

        issues = ApiAnalyzer(scope, db, issue_factory).analyze()

        assert titles(issues) == [
            "Large OAuth token table",
            "OAuth cleanup disabled",
            "Long OAuth token expiration",
            "API rate limiting disabled",
        ]

    def test_rate_limiting_not_reported_when_unsupported(self, issue_factory):
        assert ApiAnalyzer(ScopeConfig({}), mock_db(), issue_factory).check_rate_limiting() == []


class TestCodebaseAnalyzer:
    def test_disk_usage_and_code_pools(self, issue_factory):
        sizes = {"generated": 6 * 1024**3, "var": 1024**2, "/srv/shop/app/code/Acme/Feed": 80 * 1024**2}
        fs = MagicMock(spec=Filesystem)
        fs.size.side_effect = lambda path: sizes.get(path, 0)
        fs.is_dir.side_effect = lambda path: path == "vendor/.git"
        fs.large_files.return_value = [("/srv/shop/pub/media/hero.png", 12 * 1024**2)]
        registrar = MagicMock(spec=ComponentRegistrar)
        registrar.get_paths.return_value = {"Acme_Feed": "/srv/shop/app/code/Acme/Feed"}

        issues = CodebaseAnalyzer(fs, registrar, issue_factory).analyze()

        assert titles(issues) == [
            "Generated directory exceeds 5GB",
            "Large custom modules detected",
            "Vendor directory under version control",
            "Large media files detected",
        ]
        assert by_title(issues, "Large custom modules detected").current_value == "Acme_Feed (80 MB)"
        assert by_title(issues, "Large media files detected").extra == {
            "large_files": ["/srv/shop/pub/media/hero.png"]
        }


class TestMysqlConfigurationAnalyzer:
    def analyzer(self, issue_factory, version, variables, non_innodb=()):
        db = mock_db(rows={"engine != 'InnoDB'": list(non_innodb)})
        db.fetch_value.return_value = version
        db.fetch_pairs.return_value = variables
        return MysqlConfigurationAnalyzer(db, issue_factory)

    def test_untuned_server(self, issue_factory):
        variables = {
            "innodb_buffer_pool_size": str(128 * 1024**2),
            "max_connections": "100",
            "query_cache_size": "1048576",
            "innodb_flush_log_at_trx_commit": "1",
            "tmp_table_size": str(16 * 1024**2),
            "max_heap_table_size": str(16 * 1024**2),
            "slow_query_log": "OFF",
            "log_bin": "ON",
            "expire_logs_days": "30",
        }
        analyzer = self.analyzer(
            issue_factory, "5.6.51-log", variables, non_innodb=[{"name": "search_tmp", "engine": "MyISAM"}]
        )

        issues = analyzer.analyze()

        assert titles(issues) == [
            "MySQL version too old",
            "innodb_buffer_pool_size too low",
            "max_connections too low",
            "tmp_table_size too low",
            "max_heap_table_size too low",
            "query_cache_size should be disabled",
            "innodb_flush_log_at_trx_commit not optimal",
            "Non-InnoDB tables detected",
            "Slow query log disabled",
            "Binary log retention too long",
        ]
        assert by_title(issues, "innodb_buffer_pool_size too low").current_value == "128 MB"
        assert by_title(issues, "Non-InnoDB tables detected").current_value == "search_tmp (MyISAM)"

    @pytest.mark.parametrize("version, expected", [
        ("10.3.39-MariaDB", ["MariaDB version outdated"]),
        ("10.6.16-MariaDB-1:10.6.16+maria~ubu2004", []),
        ("5.7.44", ["Consider upgrading to MySQL 8.0"]),
        ("8.0.36", []),
    ])
    def test_version(self, issue_factory, version, expected):
        assert titles(self.analyzer(issue_factory, version, {}).check_version()) == expected
