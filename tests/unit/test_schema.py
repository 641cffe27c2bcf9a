import copy

import pytest

from polygon_workspace.common.errors import ConfigError
from polygon_workspace.common.schema import validate_workspace_config

BASE_CONFIG = {
    "store": {"path": "./data/generations.sqlite3", "echo": False},
    "logging": {"level": "INFO", "log_dir": "./data/logs"},
    "export": {"filename_prefix": "lands-commission"},
}


def test_validate_workspace_config_accepts_valid_shape():
    validated = validate_workspace_config(copy.deepcopy(BASE_CONFIG))
    assert validated["store"]["path"] == "./data/generations.sqlite3"


def test_validate_workspace_config_rejects_missing_section():
    bad = copy.deepcopy(BASE_CONFIG)
    del bad["export"]
    with pytest.raises(ConfigError):
        validate_workspace_config(bad)


def test_validate_workspace_config_rejects_unknown_key_by_default():
    bad = copy.deepcopy(BASE_CONFIG)
    bad["store"]["pool_size"] = 5
    with pytest.raises(ConfigError):
        validate_workspace_config(bad)


def test_validate_workspace_config_allows_unknown_when_enabled():
    okay = copy.deepcopy(BASE_CONFIG)
    okay["extra"] = 1
    validate_workspace_config(okay, allow_unknown=True)


def test_validate_workspace_config_rejects_bad_log_level():
    bad = copy.deepcopy(BASE_CONFIG)
    bad["logging"]["level"] = "CHATTY"
    with pytest.raises(ConfigError):
        validate_workspace_config(bad)


def test_validate_workspace_config_rejects_non_mapping_section():
    bad = copy.deepcopy(BASE_CONFIG)
    bad["store"] = "./data/generations.sqlite3"
    with pytest.raises(ConfigError):
        validate_workspace_config(bad)
