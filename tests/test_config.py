"""Unit tests for configuration loading and the runtime config."""

import json

import pytest
from pydantic import ValidationError

from monitorpanel.config.loader import (
    camel_to_snake,
    convert_keys,
    convert_to_camel,
    load_config,
    save_config,
    snake_to_camel,
)
from monitorpanel.config.schema import GLOBAL_STATE_NAME, Config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MONITORPANEL_* variables from the developer's shell out of the tests."""
    import os

    for name in list(os.environ):
        if name.startswith("MONITORPANEL_"):
            monkeypatch.delenv(name)


class TestLoadConfig:
    """Test reading config.json."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.json")

        assert config.view.theme == "light"
        assert config.view.show_time_as == "UTC"
        assert config.state.global_state_name == GLOBAL_STATE_NAME
        assert config.backend.base_url == "http://localhost:7072/a/p/i"

    def test_camel_case_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "view": {"theme": "dark", "showTimeAs": "Local", "staticsFolder": str(tmp_path)},
            "backend": {"baseUrl": "http://127.0.0.1:9000", "timeoutS": 5},
        }), encoding="utf-8")

        config = load_config(path)

        assert config.view.theme == "dark"
        assert config.view.show_time_as == "Local"
        assert config.statics_path == tmp_path
        assert config.backend.base_url == "http://127.0.0.1:9000"
        assert config.backend.timeout_s == 5.0

    def test_invalid_json_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_config(path).view.theme == "light"

    def test_invalid_value_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"view": {"showTimeAs": "Mars"}}), encoding="utf-8")

        assert load_config(path).view.show_time_as == "UTC"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MONITORPANEL_VIEW__THEME", "dark")

        assert Config().view.theme == "dark"

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = Config.model_validate({"view": {"theme": "dark", "view_mode": 1}})

        save_config(config, path)

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["view"]["viewMode"] == 1
        assert raw["state"]["globalStateName"] == GLOBAL_STATE_NAME
        assert load_config(path).view.view_mode == 1


class TestKeyConversion:
    def test_camel_to_snake(self):
        assert camel_to_snake("showTimeAs") == "show_time_as"
        assert camel_to_snake("timeoutS") == "timeout_s"
        assert camel_to_snake("theme") == "theme"

    def test_snake_to_camel(self):
        assert snake_to_camel("statics_folder") == "staticsFolder"

    def test_nested_conversion(self):
        data = {"view": {"showTimeAs": "UTC"}, "items": [{"baseUrl": "x"}]}

        assert convert_keys(data) == {"view": {"show_time_as": "UTC"}, "items": [{"base_url": "x"}]}
        assert convert_to_camel(convert_keys(data)) == data


class TestRuntimeConfig:
    def test_derived_from_view_config(self):
        config = Config.model_validate({"view": {"theme": "dark", "show_time_as": "Local", "view_mode": 2}})

        runtime = config.runtime_config(function_graph_available=True)

        assert runtime.theme == "dark"
        assert runtime.show_time_as == "Local"
        assert runtime.view_mode == 2
        assert runtime.function_graph_available is True

    def test_runtime_config_is_frozen(self):
        runtime = Config().runtime_config()

        with pytest.raises(ValidationError):
            runtime.theme = "dark"
