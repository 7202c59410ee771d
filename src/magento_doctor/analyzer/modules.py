"""Module Analyzer - Installed modules and their impact."""

from fnmatch import fnmatchcase

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.modules import ComponentRegistrar, ModuleList
from magento_doctor.units import abbreviate


class ModuleAnalyzer:
    CATEGORY = "Modules"

    THIRD_PARTY_WARNING = 30
    THIRD_PARTY_CRITICAL = 50

    # module name or glob -> reason
    PERFORMANCE_IMPACTING_MODULES = {
        "Magento_Logging": "Extensive database logging can impact performance",
        "Magento_AdminGws": "Admin permissions checking adds overhead",
        "Magento_Staging": "Content staging adds database complexity",
        "Magento_CatalogStaging": "Catalog staging increases database size",
        "Magento_CatalogPermissions": "Category/product permissions add query complexity",
        "Magento_CustomerSegment": "Customer segmentation adds processing overhead",
        "Magento_TargetRule": "Related product rules add query complexity",
        "Temando_Shipping": "Known to cause performance issues",
        "Vertex_Tax": "External API calls can slow checkout",
        "Dotdigitalgroup_Email": "Synchronization can impact performance",
        "Dotdigitalgroup_Chat": "Real-time features add overhead",
        "Klarna_Core": "Payment processing overhead",
        "Klarna_Ordermanagement": "Order synchronization overhead",
        "Amazon_Payment": "External API dependencies",
        "Amazon_Login": "External authentication overhead",
        "MSP_TwoFactorAuth": "Additional authentication checks",
        "Amasty_*": "Some Amasty modules impact performance",
        "Mirasvit_*": "Some Mirasvit modules impact performance",
        "Aheadworks_*": "Some Aheadworks modules impact performance",
    }

    DUPLICATE_FUNCTIONALITY_GROUPS = {
        "search": [
            "Amasty_ElasticSearch",
            "Amasty_Xsearch",
            "Mirasvit_Search",
            "Mirasvit_SearchElastic",
            "Smile_ElasticsuiteCore",
        ],
        "layered_navigation": [
            "Amasty_Shopby",
            "Mirasvit_LayeredNavigation",
            "Aheadworks_Layerednav",
            "Emthemes_FilterProducts",
        ],
        "seo": ["Amasty_SeoToolKit", "Mirasvit_Seo", "Aheadworks_Seo", "Mageplaza_Seo"],
        "cache": ["Amasty_Fpc", "Mirasvit_Cache", "Lesti_Fpc"],
    }

    def __init__(
        self,
        module_list: ModuleList,
        component_registrar: ComponentRegistrar,
        issue_factory: IssueFactory,
    ) -> None:
        self.module_list = module_list
        self.component_registrar = component_registrar
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_third_party_count(),
            *self.check_performance_impacting(),
            *self.check_disabled_in_codebase(),
            *self.check_duplicate_functionality(),
        ]

    def check_third_party_count(self) -> list[LegacyIssue]:
        third_party = self.module_list.get_third_party_names()
        count = len(third_party)
        if count > self.THIRD_PARTY_CRITICAL:
            priority, title = "high", "Excessive number of third-party modules"
            details = ("Too many third-party modules can significantly impact performance, "
                       "increase complexity, and cause conflicts.")
        elif count > self.THIRD_PARTY_WARNING:
            priority, title = "medium", "High number of third-party modules"
            details = "Many third-party modules can impact performance. Review and remove unused modules."
        else:
            return []
        return [self.issue_factory.create_issue(
            priority, self.CATEGORY, title, details, str(count), "Under 30", {"module_list": third_party}
        )]

    def check_performance_impacting(self) -> list[LegacyIssue]:
        impacting: dict[str, str] = {}
        for name in self.module_list.get_names():
            for pattern, reason in self.PERFORMANCE_IMPACTING_MODULES.items():
                if fnmatchcase(name, pattern):
                    impacting.setdefault(name, reason)
        if not impacting:
            return []
        return [self.issue_factory.create_issue(
            "medium",
            self.CATEGORY,
            "Performance-impacting modules detected",
            f"{len(impacting)} module(s) are known to impact performance. Review if they are necessary.",
            abbreviate(list(impacting)),
            "Only necessary modules enabled",
            {"impacting_modules": impacting},
        )]

    def check_disabled_in_codebase(self) -> list[LegacyIssue]:
        disabled = [
            name
            for name in self.component_registrar.get_paths()
            if not self.module_list.has(name) and not ModuleList.is_core_module(name)
        ]
        if not disabled:
            return []
        return [self.issue_factory.create_issue(
            "low",
            self.CATEGORY,
            "Disabled modules in codebase",
            "Disabled modules still consume resources during compilation. Consider removing them completely.",
            str(len(disabled)),
            "0",
            {"disabled_modules": disabled},
        )]

    def check_duplicate_functionality(self) -> list[LegacyIssue]:
        enabled = self.module_list.get_names()
        duplicates = {}
        for functionality, group in self.DUPLICATE_FUNCTIONALITY_GROUPS.items():
            found = [name for name in enabled if any(fnmatchcase(name, p) for p in group)]
            if len(found) > 1:
                duplicates[functionality] = found
        if not duplicates:
            return []
        return [self.issue_factory.create_issue(
            "medium",
            self.CATEGORY,
            "Duplicate functionality detected",
            "Multiple modules providing similar functionality can cause conflicts and performance issues.",
            f"{len(duplicates)} group(s) with duplicates",
            "Single module per functionality",
            {"duplicate_modules": duplicates},
        )]
