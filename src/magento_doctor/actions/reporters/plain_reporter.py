"""Plain Text Reporter Implementation."""

from magento_doctor.actions.reporters.base import BaseReporter, count_by_priority, group_issues
from magento_doctor.model.issue import Issue, Priority


class PlainReporter(BaseReporter):
    """Generates clean, text-only output.

    Also used for ``--output-file``, so nothing here may depend on markup.
    """

    def report_issues(self, issues: list[Issue]) -> int:
        self.console.print()
        self.console.print("REVIEW RESULTS", style="bold")
        if not issues:
            self.console.print("PASS: No issues found.")
            return 0

        counts = count_by_priority(issues)
        self.console.print(
            f"Summary: {counts[Priority.HIGH]} high, {counts[Priority.MEDIUM]} medium, "
            f"{counts[Priority.LOW]} low"
        )
        self.console.print()

        for category, group in group_issues(issues):
            self.console.print(f"== {category} ({len(group)}) ==", markup=False)
            for issue in group:
                self._print_issue(issue)

        return self.exit_code(issues)

    def _print_issue(self, issue: Issue) -> None:
        self.console.print(f"[{issue.priority.value.upper()}] {issue.issue}", markup=False)
        if self.show_details:
            if issue.details:
                self.console.print(f"   Details: {issue.details}", markup=False)
            if issue.current_value is not None:
                self.console.print(f"   Current: {issue.current_value}", markup=False)
            if issue.recommended_value is not None:
                for i, line in enumerate(str(issue.recommended_value).split("\n")):
                    prefix = "   Recommended: " if i == 0 else "      "
                    self.console.print(f"{prefix}{line}", markup=False)
        self.console.print()

    def report_analyzers(self, rows: list[dict[str, str]]) -> None:
        if not rows:
            self.console.print("No analyzers available.")
            return
        for row in rows:
            line = f"{row['id']}: {row['name']} [{row['category']}]"
            if row.get("description"):
                line += f" - {row['description']}"
            self.console.print(line, markup=False)
