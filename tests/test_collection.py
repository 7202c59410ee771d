"""Tests for the issue collection and its builder."""

import pytest

from magento_doctor.model.collection import IssueBuildError, IssueCollection
from magento_doctor.model.issue import Issue, Priority


def test_unfinalized_builder_adds_nothing(collection):
    collection.create_issue().set_priority("high").set_category("Config").set_issue("Not yet")

    assert len(collection) == 0
    assert not collection.has_issues()


def test_finalize_appends_exactly_one_issue_with_all_fields(collection):
    issue = (
        collection.create_issue()
        .set_priority("high")
        .set_category("Database")
        .set_issue("Large table")
        .set_details("sales_order is huge")
        .set_current_value("12 GB")
        .set_recommended_value("Archive old orders")
        .set_data("tables", ["sales_order"])
        .finalize()
    )

    assert collection.issues == (issue,)
    assert issue.priority == Priority.HIGH
    assert issue.category == "Database"
    assert issue.issue == "Large table"
    assert issue.details == "sales_order is huge"
    assert issue.current_value == "12 GB"
    assert issue.recommended_value == "Archive old orders"
    assert issue.extra_data == {"tables": ["sales_order"]}


def test_builder_is_single_use(collection):
    builder = collection.create_issue().set_priority("low").set_category("PHP").set_issue("Once")
    builder.finalize()

    with pytest.raises(IssueBuildError):
        builder.finalize()
    with pytest.raises(IssueBuildError):
        builder.set_details("too late")
    assert len(collection) == 1


@pytest.mark.parametrize("missing", ["priority", "category", "issue"])
def test_finalize_requires_mandatory_fields(collection, missing):
    builder = collection.create_issue()
    if missing != "priority":
        builder.set_priority("low")
    if missing != "category":
        builder.set_category("PHP")
    if missing != "issue":
        builder.set_issue("Something")

    with pytest.raises(IssueBuildError, match=missing):
        builder.finalize()
    assert len(collection) == 0


def test_unknown_priority_is_rejected(collection):
    with pytest.raises(IssueBuildError, match="critical"):
        collection.create_issue().set_priority("critical")


def test_issues_keep_finalize_order_and_count_by_priority(collection):
    for priority, title in [("low", "a"), ("high", "b"), ("high", "c")]:
        collection.create_issue().set_priority(priority).set_category("X").set_issue(title).finalize()

    assert [issue.issue for issue in collection] == ["a", "b", "c"]
    assert collection.count() == 3
    assert collection.count("high") == 2
    assert collection.count(Priority.LOW) == 1


def test_extend_appends_other_collection_in_order(collection):
    other = IssueCollection()
    other.create_issue().set_priority("low").set_category("X").set_issue("staged").finalize()
    collection.create_issue().set_priority("low").set_category("X").set_issue("first").finalize()

    collection.extend(other)

    assert [issue.issue for issue in collection] == ["first", "staged"]


def test_add_issue_rejects_other_types(collection):
    with pytest.raises(TypeError):
        collection.add_issue({"issue": "dict"})


def test_issue_to_dict_uses_plain_values():
    issue = Issue(priority=Priority.MEDIUM, category="Redis", issue="Shared database", extra_data={"db": 0})

    assert issue.to_dict() == {
        "priority": "medium",
        "category": "Redis",
        "issue": "Shared database",
        "details": "",
        "current_value": None,
        "recommended_value": None,
        "extra_data": {"db": 0},
    }


def test_extra_data_of_finalized_issue_is_read_only(collection):
    issue = (
        collection.create_issue()
        .set_priority("low")
        .set_category("Database")
        .set_issue("Large table")
        .set_data("table", "sales_order")
        .finalize()
    )

    with pytest.raises(TypeError):
        issue.extra_data["table"] = "quote"

    assert issue.extra_data == {"table": "sales_order"}


def test_issue_copies_extra_data_on_creation():
    extra = {"db": 0}
    issue = Issue(priority=Priority.LOW, category="Redis", issue="Shared database", extra_data=extra)

    extra["db"] = 1

    assert issue.extra_data["db"] == 0
