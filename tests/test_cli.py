"""Tests for the command line interface."""

import json
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from magento_doctor.cli import main
from magento_doctor.model.issue import Issue, Priority
from magento_doctor.pipeline import ReviewResult
from magento_doctor.scanner.environment import MagentoNotFoundError


def result_with(*priorities):
    return ReviewResult(issues=[
        Issue(priority=Priority(p), category="Config", issue=f"{p} issue", details="why",
              current_value="now", recommended_value="later")
        for p in priorities
    ])


def invoke(args, result=None, build_side_effect=None):
    runner = CliRunner()
    review_runner = MagicMock()
    review_runner.run.return_value = result or result_with()
    with patch("magento_doctor.cli.build_runner", return_value=review_runner,
               side_effect=build_side_effect) as build, \
         patch("magento_doctor.cli.LocalConnector") as local, \
         patch("magento_doctor.cli.SSHConnector") as ssh:
        for connector_class in (local, ssh):
            connector_class.return_value.__enter__.return_value = connector_class.return_value
        outcome = runner.invoke(main, args)
    return outcome, build, review_runner, local, ssh


def test_version():
    outcome = CliRunner().invoke(main, ["--version"])

    assert outcome.exit_code == 0
    assert "magento-doctor" in outcome.output


def test_review_passes_filters_and_exits_zero_without_high_issues():
    outcome, build, review_runner, local, _ = invoke(
        ["review", "/srv/shop", "--format", "plain", "-c", "redis", "-s", "mysql", "-s", "php", "--timeout", "5"],
        result=result_with("medium", "low"),
    )

    assert outcome.exit_code == 0, outcome.output
    review_runner.run.assert_called_once_with(category="redis", skip_ids=("mysql", "php"))
    args, kwargs = build.call_args
    assert args == (local.return_value, "/srv/shop")
    assert kwargs["timeout"] == 5
    assert "medium issue" in outcome.output
    assert "Review completed in" in outcome.output


def test_review_exits_one_on_high_issue():
    outcome, *_ = invoke(["review", "/srv/shop", "--format", "plain"], result=result_with("high"))

    assert outcome.exit_code == 1
    assert "[HIGH] high issue" in outcome.output


def test_details_flag_shows_values():
    outcome, *_ = invoke(["review", "/srv/shop", "--format", "plain", "-d"], result=result_with("low"))

    assert "Current: now" in outcome.output
    assert "Recommended: later" in outcome.output


def test_json_output_is_parseable():
    outcome, *_ = invoke(["review", "/srv/shop", "--format", "json"], result=result_with("low"))

    # Timing goes to stderr, which older click versions mix into stdout
    data, _ = json.JSONDecoder().raw_decode(outcome.stdout.lstrip())
    assert data["summary"]["low"] == 1


def test_missing_installation_exits_one():
    outcome, *_ = invoke(
        ["review", "/tmp/empty", "--format", "plain"],
        build_side_effect=MagentoNotFoundError("No Magento installation found at /tmp/empty"),
    )

    assert outcome.exit_code == 1
    assert "No Magento installation found" in outcome.output


def test_ssh_options_select_ssh_connector():
    outcome, build, _, local, ssh = invoke(
        ["review", "/var/www/magento", "--format", "plain", "--host", "shop.example.com", "--user", "deploy",
         "--port", "2222", "--key", "~/.ssh/id_ed25519"],
    )

    assert outcome.exit_code == 0, outcome.output
    local.assert_not_called()
    (ssh_config,), _ = ssh.call_args
    assert (ssh_config.host, ssh_config.user, ssh_config.port) == ("shop.example.com", "deploy", 2222)
    assert ssh_config.key_path == "~/.ssh/id_ed25519"
    assert build.call_args[0][1] == "/var/www/magento"


def test_connection_error_exits_one():
    outcome, *_ = invoke(
        ["review", "/srv/shop", "--format", "plain", "--host", "unreachable"],
        build_side_effect=ConnectionError("SSH error: timed out"),
    )

    assert outcome.exit_code == 1
    assert "SSH error" in outcome.output


def test_output_file_gets_plain_report(tmp_path):
    report = tmp_path / "report.txt"

    outcome, *_ = invoke(["review", "/srv/shop", "--format", "json", "-o", str(report)], result=result_with("high"))

    assert outcome.exit_code == 1
    text = report.read_text()
    assert "[HIGH] high issue" in text
    assert "\x1b[" not in text


def test_unwritable_output_file_exits_one(tmp_path):
    outcome, *_ = invoke(
        ["review", "/srv/shop", "--format", "plain", "-o", str(tmp_path / "missing" / "report.txt")],
    )

    assert outcome.exit_code == 1
    assert "Could not write report" in outcome.output


def test_analyzers_command_lists_core_analyzers():
    with patch("magento_doctor.cli.LocalConnector") as local, \
         patch("magento_doctor.cli.ConfigLoader") as loader:
        local.return_value.__enter__.return_value = local.return_value
        loader.return_value.load.return_value = {"analyzers": {"core": {"api": {"enabled": False}}}}
        outcome = CliRunner().invoke(main, ["analyzers", "/srv/shop", "--format", "plain"])

    assert outcome.exit_code == 0, outcome.output
    assert "redis: Redis Configuration [redis]" in outcome.output
    assert "api:" not in outcome.output


def test_list_analyzers_flag_skips_the_review():
    with patch("magento_doctor.cli.LocalConnector") as local, \
         patch("magento_doctor.cli.ConfigLoader") as loader, \
         patch("magento_doctor.cli.build_runner") as build:
        local.return_value.__enter__.return_value = local.return_value
        loader.return_value.load.return_value = {}
        outcome = CliRunner().invoke(main, ["review", "/srv/shop", "-l", "--format", "plain"])

    assert outcome.exit_code == 0, outcome.output
    build.assert_not_called()
    assert "thirdparty: Third-party Analysis" in outcome.output
