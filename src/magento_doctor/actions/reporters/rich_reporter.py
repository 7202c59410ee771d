"""Rich Reporter Implementation."""

from typing import Any

from rich.panel import Panel
from rich.table import Table

from magento_doctor.actions.reporters.base import BaseReporter, count_by_priority, group_issues
from magento_doctor.model.issue import Issue, Priority

PRIORITY_STYLE = {
    Priority.HIGH: ("red", "x"),
    Priority.MEDIUM: ("yellow", "!"),
    Priority.LOW: ("blue", "i"),
}


class RichReporter(BaseReporter):
    """Generates high-fidelity terminal output using Rich."""

    def report_issues(self, issues: list[Issue]) -> int:
        self.console.print()
        if not issues:
            self.console.print("   [green][bold]PASS:[/] No issues found.[/]")
            return 0

        self.console.print("Review Results", style="bold underline")
        self.console.print()

        for category, group in group_issues(issues):
            self.console.print(Panel.fit(f"{category} ({len(group)})", style="bold cyan"))
            for issue in group:
                self._print_issue(issue)

        self._print_summary(issues)
        return self.exit_code(issues)

    def _print_issue(self, issue: Issue) -> None:
        color, icon = PRIORITY_STYLE[issue.priority]
        self.console.print(f"[{color}][{issue.priority.value}] {icon} {issue.issue}[/]")

        if self.show_details:
            if issue.details:
                self.console.print(f"   [dim]Details:[/] {issue.details}")
            if issue.current_value is not None:
                self.console.print(f"   [dim]Current:[/] {_display(issue.current_value)}")
            if issue.recommended_value is not None:
                recommended = _display(issue.recommended_value)
                if "\n" in recommended:
                    self.console.print(
                        Panel(
                            f"[green]{recommended}[/]",
                            title="[bold white]Recommended[/]",
                            title_align="left",
                            border_style="green",
                            padding=(1, 2),
                        )
                    )
                else:
                    self.console.print(f"   [dim]Recommended:[/] [green]{recommended}[/]")
        self.console.print()

    def _print_summary(self, issues: list[Issue]) -> None:
        counts = count_by_priority(issues)
        grid = Table.grid(expand=True)
        grid.add_column()
        grid.add_column(justify="right")
        for priority in Priority:
            color, _ = PRIORITY_STYLE[priority]
            grid.add_row(priority.value.capitalize(), f"[{color}]{counts[priority]}[/]")

        border = "red" if counts[Priority.HIGH] else "yellow" if counts[Priority.MEDIUM] else "green"
        self.console.print(Panel(grid, title=f"Summary: {len(issues)} issues", border_style=border))

    def report_analyzers(self, rows: list[dict[str, str]]) -> None:
        if not rows:
            self.console.print("[yellow]No analyzers available.[/]")
            return

        table = Table(show_header=True, header_style="bold white")
        table.add_column("ID")
        table.add_column("Name")
        table.add_column("Category")
        table.add_column("Description")
        for row in rows:
            table.add_row(row["id"], row["name"], row["category"], row.get("description", ""))
        self.console.print(table)


def _display(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return ", ".join(f"{key}={item}" for key, item in value.items())
    return str(value)
