"""JSON Reporter Implementation."""

import json

from magento_doctor.actions.reporters.base import BaseReporter, count_by_priority
from magento_doctor.model.issue import Issue


class JsonReporter(BaseReporter):
    """Generates machine-readable JSON output."""

    def report_issues(self, issues: list[Issue]) -> int:
        counts = count_by_priority(issues)
        data = {
            "issues": [issue.to_dict() for issue in issues],
            "summary": {
                "total": len(issues),
                **{priority.value: count for priority, count in counts.items()},
            },
        }
        self.console.print_json(json.dumps(data, default=str))
        return self.exit_code(issues)

    def report_analyzers(self, rows: list[dict[str, str]]) -> None:
        self.console.print_json(json.dumps(rows))
