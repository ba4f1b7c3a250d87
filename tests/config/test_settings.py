"""Tests for warehouse_config: defaults, YAML layering and environment overrides."""

import dataclasses

import pytest
import yaml

from warehouse_config import DEFAULTS_PATH, WarehouseSettings, get_settings
from warehouse_config.loader import (
    KNOWN_KEYS,
    env_overrides,
    load_yaml_file,
    parse_settings,
)


class TestDefaults:
    def test_packaged_defaults_match_schema_defaults(self):
        assert get_settings(environ={}) == WarehouseSettings()

    def test_defaults_file_lists_every_known_key(self):
        assert set(load_yaml_file(DEFAULTS_PATH)) == KNOWN_KEYS

    def test_default_values(self):
        settings = WarehouseSettings()
        assert settings.database_path == "warehouse.db"
        assert settings.worker_count == 5
        assert settings.low_stock_threshold == 10
        assert settings.delayed_shipment_days == 7
        assert settings.log_file is None

    def test_settings_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            WarehouseSettings().worker_count = 9


class TestLayering:
    def test_user_file_overrides_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump({"worker_count": 2, "database_path": "x.db"}))

        settings = get_settings(path, environ={})

        assert settings.worker_count == 2
        assert settings.database_path == "x.db"
        assert settings.low_stock_threshold == 10

    def test_environment_overrides_user_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("worker_count: 2\n")

        settings = get_settings(path, environ={"WAREHOUSE_WORKER_COUNT": "8"})

        assert settings.worker_count == 8

    def test_env_log_level_is_normalised(self):
        settings = get_settings(environ={"WAREHOUSE_LOG_LEVEL": "debug"})
        assert settings.log_level == "DEBUG"

    def test_blank_log_file_means_none(self):
        settings = get_settings(environ={"WAREHOUSE_LOG_FILE": "  "})
        assert settings.log_file is None

    def test_unrelated_environment_ignored(self):
        assert env_overrides({"HOME": "/root", "WAREHOUSE_NOPE": "1"}) == {}

    def test_missing_user_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_settings(tmp_path / "absent.yaml", environ={})


class TestRejection:
    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown setting"):
            parse_settings({"colour": "blue"})

    def test_non_integer(self):
        with pytest.raises(ValueError, match="worker_count must be an integer"):
            parse_settings({"worker_count": "many"})

    def test_boolean_is_not_an_integer(self):
        with pytest.raises(ValueError):
            parse_settings({"recent_limit": True})

    @pytest.mark.parametrize("field", ["worker_count", "recent_limit"])
    def test_pool_and_limit_must_be_positive(self, field):
        with pytest.raises(ValueError, match=field):
            WarehouseSettings(**{field: 0})

    def test_negative_threshold(self):
        with pytest.raises(ValueError, match="low_stock_threshold"):
            WarehouseSettings(low_stock_threshold=-1)

    def test_unknown_log_level(self):
        with pytest.raises(ValueError, match="log_level"):
            WarehouseSettings(log_level="LOUD")

    def test_empty_database_path(self):
        with pytest.raises(ValueError, match="database_path"):
            WarehouseSettings(database_path=" ")

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_yaml_file(path)
