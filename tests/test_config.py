"""
Tests for configuration loading, resolution and typed settings.
"""

from pathlib import Path

import pytest

from filerelease.config.loader import Config, _merge_dict, load_config
from filerelease.config.settings import ReleaseSettings, ScheduleSettings
from filerelease.core.categories import Category
from filerelease.exceptions import ConfigurationError


class TestConfig:
    """Tests for Config class."""

    def test_basic_access(self):
        cfg = Config({"service": {"port": 8080}})
        assert cfg.get("service.port") == 8080
        assert cfg.data["service"]["port"] == 8080

    def test_dot_notation_missing_returns_default(self):
        cfg = Config({"a": 1})
        assert cfg.get("a.b.c", "fallback") == "fallback"

    def test_contains(self):
        cfg = Config({"a": {"b": 1}})
        assert "a" in cfg
        assert "a.b" in cfg
        assert "a.c" not in cfg

    def test_getitem(self):
        cfg = Config({"name": "x", "nested": {"key": "val"}})
        assert cfg["name"] == "x"
        nested = cfg["nested"]
        assert isinstance(nested, Config)
        assert nested["key"] == "val"
        assert cfg["nested.key"] == "val"

    def test_getitem_missing_raises(self):
        with pytest.raises(KeyError):
            _ = Config({})["missing"]

    def test_section(self):
        cfg = Config({"filesystem": {"staging_dir": "s"}})
        assert cfg.section("filesystem") == {"staging_dir": "s"}
        assert cfg.section("absent") == {}

    def test_section_not_mapping(self):
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            Config({"filesystem": "nope"}).section("filesystem")

    def test_merge_dict(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        _merge_dict(base, {"a": {"c": 20}, "e": 5})
        assert base == {"a": {"b": 1, "c": 20}, "d": 3, "e": 5}


class TestLoadConfig:
    """Tests for load_config."""

    def test_load(self, project_dir):
        cfg = load_config(project_dir)
        assert cfg.get("filesystem.staging_dir") == "staging"
        assert cfg.project_dir == project_dir

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            load_config(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text("filesystem:\n  staging_dir: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Error parsing config.yaml"):
            load_config(tmp_path)

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(tmp_path)

    def test_empty_file(self, tmp_path):
        (tmp_path / "config.yaml").write_text("")
        assert load_config(tmp_path).data == {}

    def test_env_overlay(self, project_dir):
        (project_dir / "config.prod.yaml").write_text("service:\n  port: 443\n")
        cfg = load_config(project_dir, env="prod")
        assert cfg.get("service.port") == 443
        assert cfg.get("service.host") == "0.0.0.0"

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FR_STAGING", "/data/staging")
        (tmp_path / "config.yaml").write_text(
            "filesystem:\n  staging_dir: ${FR_STAGING}\n  publish_dir: /data/{env}/publish\n"
        )
        cfg = load_config(tmp_path, env="staging")
        assert cfg.get("filesystem.staging_dir") == "/data/staging"
        assert cfg.get("filesystem.publish_dir") == "/data/staging/publish"

    def test_unset_env_var_left_as_is(self, tmp_path, monkeypatch):
        monkeypatch.delenv("FR_UNSET_VAR", raising=False)
        (tmp_path / "config.yaml").write_text("value: ${FR_UNSET_VAR}\n")
        assert load_config(tmp_path).get("value") == "${FR_UNSET_VAR}"

    def test_default_env_is_dev(self, tmp_path):
        (tmp_path / "config.yaml").write_text("value: out/{env}\n")
        assert load_config(tmp_path).get("value") == "out/dev"


class TestReleaseSettings:
    """Tests for ReleaseSettings.from_config."""

    def test_from_project(self, project_dir):
        settings = ReleaseSettings.from_config(load_config(project_dir))

        assert settings.staging_dir == project_dir / "staging"
        assert settings.publish_dir == project_dir / "publish"
        assert settings.host == "0.0.0.0"
        assert settings.port == 9090

    def test_schedules(self, project_dir):
        schedules = ReleaseSettings.from_config(load_config(project_dir)).schedules

        assert schedules[Category.REDEMPTION] == ScheduleSettings(Category.REDEMPTION, "*/6 * * * * *", "UTC", True)
        assert schedules[Category.OUTPAY].cron == "0 0 6 * * *"
        own = schedules[Category.OWN_AND_BEN]
        assert own.timezone == "Europe/Amsterdam"
        assert own.enabled is False

    def test_absolute_paths_kept(self, tmp_path):
        cfg = Config(
            {"filesystem": {"staging_dir": str(tmp_path / "in"), "publish_dir": str(tmp_path / "out")}},
            project_dir=Path("/elsewhere"),
        )
        settings = ReleaseSettings.from_config(cfg)
        assert settings.staging_dir == tmp_path / "in"
        assert settings.publish_dir == tmp_path / "out"

    def test_defaults(self):
        settings = ReleaseSettings.from_config(Config({"filesystem": {"staging_dir": "/a", "publish_dir": "/b"}}))
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080
        assert settings.schedules == {}

    @pytest.mark.parametrize("missing", ["staging_dir", "publish_dir"])
    def test_missing_directory(self, missing):
        fs = {"staging_dir": "/a", "publish_dir": "/b"}
        del fs[missing]
        with pytest.raises(ConfigurationError, match=f"filesystem.{missing}"):
            ReleaseSettings.from_config(Config({"filesystem": fs}))

    def test_bad_port(self):
        cfg = Config({"filesystem": {"staging_dir": "/a", "publish_dir": "/b"}, "service": {"port": "http"}})
        with pytest.raises(ConfigurationError, match="service.port"):
            ReleaseSettings.from_config(cfg)

    def test_unknown_category(self):
        cfg = Config({"filesystem": {"staging_dir": "/a", "publish_dir": "/b"}, "scheduling": {"payroll": "* * * * *"}})
        with pytest.raises(ConfigurationError, match="payroll"):
            ReleaseSettings.from_config(cfg)

    def test_invalid_cron(self):
        cfg = Config(
            {"filesystem": {"staging_dir": "/a", "publish_dir": "/b"}, "scheduling": {"outpay": "not a cron"}}
        )
        with pytest.raises(ConfigurationError, match="Invalid cron for scheduling.outpay"):
            ReleaseSettings.from_config(cfg)

    def test_invalid_timezone(self):
        cfg = Config(
            {
                "filesystem": {"staging_dir": "/a", "publish_dir": "/b"},
                "scheduling": {"outpay": {"cron": "* * * * *", "timezone": "Nowhere/Land"}},
            }
        )
        with pytest.raises(ConfigurationError):
            ReleaseSettings.from_config(cfg)

    def test_schedule_without_cron(self):
        cfg = Config(
            {"filesystem": {"staging_dir": "/a", "publish_dir": "/b"}, "scheduling": {"outpay": {"enabled": True}}}
        )
        with pytest.raises(ConfigurationError, match="cron"):
            ReleaseSettings.from_config(cfg)

    def test_schedule_as_dict(self):
        sched = ScheduleSettings(Category.OUTPAY, "0 * * * *", "UTC", False)
        assert sched.as_dict() == {"cron": "0 * * * *", "timezone": "UTC", "enabled": False}

    def test_enabled_from_env_var_string(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FR_OUTPAY_ENABLED", "false")
        (tmp_path / "config.yaml").write_text(
            "filesystem:\n  staging_dir: s\n  publish_dir: p\n"
            "scheduling:\n  outpay:\n    cron: '0 * * * *'\n    enabled: ${FR_OUTPAY_ENABLED}\n"
        )
        schedules = ReleaseSettings.from_config(load_config(tmp_path)).schedules
        assert schedules[Category.OUTPAY].enabled is False

    @pytest.mark.parametrize("raw,expected", [(True, True), (False, False), ("TRUE", True), ("off", False), (1, True)])
    def test_enabled_values(self, raw, expected):
        cfg = Config(
            {
                "filesystem": {"staging_dir": "/a", "publish_dir": "/b"},
                "scheduling": {"outpay": {"cron": "* * * * *", "enabled": raw}},
            }
        )
        assert ReleaseSettings.from_config(cfg).schedules[Category.OUTPAY].enabled is expected

    def test_enabled_not_boolean(self):
        cfg = Config(
            {
                "filesystem": {"staging_dir": "/a", "publish_dir": "/b"},
                "scheduling": {"outpay": {"cron": "* * * * *", "enabled": "sometimes"}},
            }
        )
        with pytest.raises(ConfigurationError, match="scheduling.outpay.enabled"):
            ReleaseSettings.from_config(cfg)
