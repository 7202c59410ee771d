"""Tests for layered YAML configuration."""

import logging

from magento_doctor.config import ENV_VAR, ConfigLoader, merge_config, parse_config, review_timeout

from conftest import ok


def test_merge_config_recurses_concatenates_and_replaces():
    base = {"analyzers": {"core": {"mysql": {"enabled": True}}, "custom": [{"id": "a"}]}, "review": {"timeout": 10}}
    override = {"analyzers": {"core": {"mysql": {"enabled": False}}, "custom": [{"id": "b"}]}, "review": {"timeout": 0}}

    merged = merge_config(base, override)

    assert merged["analyzers"]["core"]["mysql"]["enabled"] is False
    assert merged["analyzers"]["custom"] == [{"id": "a"}, {"id": "b"}]
    assert merged["review"]["timeout"] == 0
    assert base["analyzers"]["custom"] == [{"id": "a"}]


def test_parse_config_tolerates_bad_documents(caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_config("analyzers: [unclosed", "broken.yaml") == {}
        assert parse_config("- just\n- a list\n", "list.yaml") == {}
    assert parse_config("", "empty.yaml") == {}
    assert "broken.yaml" in caplog.text


def test_layers_are_merged_in_order(tmp_path, mock_connector, monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    system = tmp_path / "system.yaml"
    user = tmp_path / "user.yaml"
    explicit = tmp_path / "explicit.yaml"
    system.write_text("review:\n  timeout: 10\nanalyzers:\n  custom:\n    - id: sys\n")
    user.write_text("review:\n  timeout: 20\n")
    explicit.write_text("analyzers:\n  custom:\n    - id: cli\n")
    mock_connector.file_exists.return_value = True
    mock_connector.read_file.return_value = "analyzers:\n  custom:\n    - id: project\n"

    config = ConfigLoader(system, user).load(mock_connector, "/var/www/magento/", explicit)

    mock_connector.read_file.assert_called_once_with("/var/www/magento/app/etc/magento-doctor.yaml")
    assert config["review"]["timeout"] == 20
    assert [entry["id"] for entry in config["analyzers"]["custom"]] == ["sys", "project", "cli"]


def test_environment_variable_names_extra_file(tmp_path, monkeypatch):
    extra = tmp_path / "extra.yaml"
    extra.write_text("review:\n  timeout: 5\n")
    monkeypatch.setenv(ENV_VAR, str(extra))

    config = ConfigLoader(tmp_path / "none.yaml", tmp_path / "none2.yaml").load()

    assert config == {"review": {"timeout": 5}}


def test_missing_files_give_empty_config(tmp_path, mock_connector, monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    mock_connector.file_exists.return_value = False

    config = ConfigLoader(tmp_path / "a.yaml", tmp_path / "b.yaml").load(mock_connector, "/srv/shop")

    assert config == {}
    mock_connector.read_file.assert_not_called()


def test_review_timeout():
    assert review_timeout({}) is None
    assert review_timeout({"review": {"timeout": 0}}) is None
    assert review_timeout({"review": {"timeout": "abc"}}) is None
    assert review_timeout({"review": {"timeout": "2.5"}}) == 2.5
