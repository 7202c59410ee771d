"""Third-party Analyzer - Problematic, outdated and development extensions."""

import re

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.modules import ModuleList
from magento_doctor.scanner.product import ProductMetadata
from magento_doctor.units import abbreviate, version_lt

# magento/framework major version shipped with each 2.x minor release
FRAMEWORK_MAJOR = {"2.2": 101, "2.3": 102, "2.4": 103}


class ThirdPartyAnalyzer:
    CATEGORY = "Third-party"

    PROBLEMATIC_EXTENSIONS = {
        "GT_Gtspeed": "Known to cause performance issues with page loading",
        "Amasty_Fpc": "Conflicts with built-in Full Page Cache",
        "Xtento_OrderExport": "Can cause memory issues with large exports",
        "Wyomind_SimpleGoogleShopping": "Resource intensive feed generation",
        "Mirasvit_Seo": "Can slow down category pages with large catalogs",
        "Mageplaza_LayeredNavigation": "Performance impact on category pages",
        "Mageworx_OptionFeatures": "Heavy JavaScript on product pages",
        "Webkul_Marketplace": "Database intensive operations",
        "Magento_SampleData": "Should be removed from production",
        "MSP_DevTools": "Development tool should not be in production",
    }

    DEV_PATTERNS = ("debug", "dev", "test", "demo", "sample", "example", "profiler", "toolbar")

    def __init__(
        self,
        module_list: ModuleList,
        product_metadata: ProductMetadata,
        issue_factory: IssueFactory,
    ) -> None:
        self.module_list = module_list
        self.product_metadata = product_metadata
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_problematic_extensions(),
            *self.check_compatibility(),
            *self.check_development_extensions(),
        ]

    def check_problematic_extensions(self) -> list[LegacyIssue]:
        return [
            self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                f"Problematic extension: {name}",
                self.PROBLEMATIC_EXTENSIONS[name],
                "Enabled",
                "Review necessity",
            )
            for name in self.module_list.get_names()
            if name in self.PROBLEMATIC_EXTENSIONS
        ]

    def check_compatibility(self) -> list[LegacyIssue]:
        """Extensions whose framework constraint only allows older releases."""
        version = self.product_metadata.get_version()
        if not version or version_lt(version, "2.3"):
            return []
        current_major = FRAMEWORK_MAJOR["2.4"] if not version_lt(version, "2.4") else FRAMEWORK_MAJOR["2.3"]

        incompatible = []
        for package in self.product_metadata.extension_packages():
            constraint = self.product_metadata.requires[package].get("magento/framework", "")
            majors = {int(m) for m in re.findall(r"\b(1\d\d)\.", constraint)}
            if majors and max(majors) < current_major:
                incompatible.append(package)

        if not incompatible:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            "Potentially incompatible extensions",
            "Extensions may not be compatible with current Magento version.",
            abbreviate(incompatible),
            "Updated extensions",
            {"incompatible_modules": incompatible},
        )]

    def check_development_extensions(self) -> list[LegacyIssue]:
        found = [
            name for name in self.module_list.get_third_party_names()
            if any(pattern in name.lower() for pattern in self.DEV_PATTERNS)
        ]
        if not found:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            "Development extensions in production",
            "Development/debugging extensions should not be enabled in production.",
            abbreviate(found),
            "Disabled in production",
            {"dev_extensions": found},
        )]
