"""Tests for the dependency bag."""

from unittest.mock import MagicMock

import pytest

from magento_doctor.model.dependencies import Dependencies


def test_bag_behaves_like_mapping_of_present_collaborators():
    scope_config = MagicMock()
    deps = Dependencies(scope_config=scope_config)

    assert "scope_config" in deps
    assert "resource_connection" not in deps
    assert deps["scope_config"] is scope_config
    assert deps.get("resource_connection") is None
    assert list(deps) == ["scope_config"]
    assert len(deps) == 1


def test_missing_collaborator_raises_key_error():
    with pytest.raises(KeyError):
        Dependencies()["issue_factory"]


def test_bag_is_read_only():
    with pytest.raises(AttributeError):
        Dependencies().scope_config = MagicMock()
