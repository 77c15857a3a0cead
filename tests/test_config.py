#!/usr/bin/env python3
"""
Tests for configuration management module.
"""

import json
import pytest
from unittest.mock import patch

from msh.config import DEFAULTS, Config, ConfigManager


# ============================================================================
# Config Model Tests
# ============================================================================

class TestConfig:
    """Tests for Config model."""

    def test_create_empty_config(self):
        """Test creating config with all defaults."""
        cfg = Config()
        assert cfg.preload_dirs is None
        assert cfg.registry_file is None
        assert cfg.workers is None
        assert cfg.history_file is None
        assert cfg.simple is None
        assert cfg.log_level is None

    def test_create_config_with_values(self):
        cfg = Config(preload_dirs=["/a", "/b"], workers=4, simple=True)
        assert cfg.preload_dirs == ["/a", "/b"]
        assert cfg.workers == 4
        assert cfg.simple is True

    def test_get_falls_back_to_defaults(self):
        cfg = Config()
        assert cfg.get("preload_dirs") == DEFAULTS["preload_dirs"]
        assert cfg.get("simple") is False

    def test_get_with_value(self):
        cfg = Config(workers=2)
        assert cfg.get("workers") == 2

    def test_get_unknown_key(self):
        cfg = Config()
        assert cfg.get("unknown_key") is None
        assert cfg.get("unknown_key", "default") == "default"

    def test_ignores_unknown_fields(self):
        cfg = Config.model_validate({"_comment": "x", "workers": 3})
        assert cfg.workers == 3

    def test_workers_must_be_positive(self):
        with pytest.raises(ValueError):
            Config(workers=0)


# ============================================================================
# ConfigManager Tests
# ============================================================================

class TestConfigManager:
    """Tests for ConfigManager."""

    @pytest.fixture
    def manager(self, tmp_path):
        """ConfigManager writing into a temporary directory."""
        config_dir = tmp_path / ".msh"
        config_file = config_dir / "config.json"
        with patch.object(ConfigManager, "CONFIG_DIR", config_dir):
            with patch.object(ConfigManager, "CONFIG_FILE", config_file):
                yield ConfigManager()

    def test_load_nonexistent_config(self, manager):
        cfg = manager.load(create_if_missing=False)
        assert cfg.workers is None
        assert not manager.CONFIG_FILE.exists()

    def test_load_creates_default_config(self, manager):
        cfg = manager.load(create_if_missing=True)
        assert cfg.workers is None
        data = json.loads(manager.CONFIG_FILE.read_text())
        assert "preload_dirs" in data
        assert data["_comment"] == "msh configuration file"

    def test_save_and_load(self, manager):
        manager.save(Config(preload_dirs=["/srv/a"], workers=2))

        loaded = ConfigManager().load()
        assert loaded.preload_dirs == ["/srv/a"]
        assert loaded.workers == 2

    def test_save_only_non_none_values(self, manager):
        manager.save(Config(workers=8))
        data = json.loads(manager.CONFIG_FILE.read_text())
        assert data == {"workers": 8}

    def test_save_preserves_existing_keys(self, manager):
        manager.CONFIG_DIR.mkdir(parents=True)
        manager.CONFIG_FILE.write_text(json.dumps({"_comment": "mine", "simple": True}))
        manager.save(Config(workers=2))
        data = json.loads(manager.CONFIG_FILE.read_text())
        assert data == {"_comment": "mine", "simple": True, "workers": 2}

    def test_set_value(self, manager):
        manager.set("workers", 4)
        data = json.loads(manager.CONFIG_FILE.read_text())
        assert data["workers"] == 4

    def test_set_unknown_key(self, manager):
        with pytest.raises(ValueError, match="Unknown config key"):
            manager.set("nope", 1)

    def test_set_invalid_value(self, manager):
        with pytest.raises(ValueError):
            manager.set("workers", 0)

    def test_unset_value(self, manager):
        manager.set("workers", 4)
        manager.unset("workers")
        data = json.loads(manager.CONFIG_FILE.read_text())
        assert data["workers"] is None
        assert manager.config.workers is None

    def test_unset_unknown_key(self, manager):
        with pytest.raises(ValueError):
            manager.unset("nope")

    def test_invalid_json_uses_defaults(self, manager):
        manager.CONFIG_DIR.mkdir(parents=True)
        manager.CONFIG_FILE.write_text("{not json")
        cfg = manager.load()
        assert cfg.workers is None

    def test_list_settings(self, manager):
        manager.save(Config(workers=3, simple=False))
        mgr = ConfigManager()
        assert mgr.list_settings() == {"workers": 3}

    def test_reset(self, manager):
        manager.set("workers", 4)
        manager.reset()
        assert not manager.CONFIG_FILE.exists()
        assert manager.config.workers is None
