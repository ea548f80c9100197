import json

import pytest

from rosterx.adapters.config_loader import load_config


def test_yaml_keys_are_upper_cased(tmp_path):
    path = tmp_path / "rosterx.yaml"
    path.write_text("roster_backend: remote\nroster_api_url: https://roster.test/api\nweek_start: 7\n")

    config = load_config(path)

    assert config == {
        "ROSTER_BACKEND": "remote",
        "ROSTER_API_URL": "https://roster.test/api",
        "WEEK_START": 7,
    }


def test_json_config(tmp_path):
    path = tmp_path / "rosterx.json"
    path.write_text(json.dumps({"log_level": "debug"}))
    assert load_config(path) == {"LOG_LEVEL": "debug"}


def test_empty_yaml_is_empty_mapping(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(path) == {}


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
