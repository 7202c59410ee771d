"""Tests for report rendering."""

import io
import json

import pytest
from rich.console import Console

from magento_doctor.actions.report import ReportAction
from magento_doctor.actions.reporters.base import group_issues
from magento_doctor.model.issue import Issue, Priority


def make(priority, category, title, **kwargs):
    return Issue(priority=Priority(priority), category=category, issue=title, **kwargs)


ISSUES = [
    make("low", "Redis", "Using gzip compression"),
    make("medium", "Config", "Enable CSS merging"),
    make("low", "System", 'Analyzer "Broken" failed'),
    make("high", "Config", "Switch from developer mode to production",
         details="Developer mode significantly impacts performance.",
         current_value="developer", recommended_value="production"),
    make("high", "Database", "Excessive URL rewrites"),
]


def render(format_mode, issues=ISSUES, details=False):
    console = Console(record=True, file=io.StringIO(), width=200, no_color=True)
    code = ReportAction(console, format_mode=format_mode, show_details=details).report_issues(issues)
    return code, console.export_text()


def test_group_issues_orders_categories_then_priorities():
    grouped = group_issues(ISSUES)

    assert [category for category, _ in grouped] == ["Config", "Database", "Redis", "System"]
    assert [issue.priority for issue in grouped[0][1]] == [Priority.HIGH, Priority.MEDIUM]


def test_sort_is_stable_within_priority():
    issues = [make("low", "PHP", "first"), make("low", "PHP", "second")]

    assert [issue.issue for issue in group_issues(issues)[0][1]] == ["first", "second"]


def test_plain_report_groups_and_summarizes():
    code, text = render("plain")

    assert code == 1
    assert "Summary: 2 high, 1 medium, 2 low" in text
    assert text.index("== Config (2) ==") < text.index("== Database (1) ==") < text.index("== Redis (1) ==")
    assert '[LOW] Analyzer "Broken" failed' in text
    assert "Current:" not in text


def test_plain_report_details():
    _, text = render("plain", details=True)

    assert "Details: Developer mode significantly impacts performance." in text
    assert "Current: developer" in text
    assert "Recommended: production" in text


def test_rich_report_without_issues_passes():
    code, text = render("rich", issues=[])

    assert code == 0
    assert "No issues found" in text


def test_rich_report_contains_titles_and_summary():
    code, text = render("rich", details=True)

    assert code == 1
    assert "Switch from developer mode to production" in text
    assert "Summary: 5 issues" in text


def test_json_report():
    console = Console(record=True, file=io.StringIO(), width=200)
    code = ReportAction(console, format_mode="json").report_issues(ISSUES[:2])
    data = json.loads(console.export_text())

    assert code == 0
    assert data["summary"] == {"total": 2, "high": 0, "medium": 1, "low": 1}
    assert data["issues"][0] == ISSUES[0].to_dict()


@pytest.mark.parametrize("format_mode", ["rich", "plain"])
def test_analyzer_listing(format_mode):
    console = Console(record=True, file=io.StringIO(), width=200)
    rows = [{"id": "redis", "name": "Redis Configuration", "category": "redis", "description": "Redis usage"}]

    ReportAction(console, format_mode=format_mode).report_analyzers(rows)

    text = console.export_text()
    assert "redis" in text
    assert "Redis Configuration" in text


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError, match="html"):
        ReportAction(Console(), format_mode="html")
