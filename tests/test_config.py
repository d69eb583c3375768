"""Tests for configuration loading and validation."""

import os

import pytest

from strata.config import (
    AdmissionThresholds,
    EstimateWeights,
    NamingConventions,
    StrataConfig,
    load_config,
)
from strata.exceptions import InvalidConfigError, StrataError


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files and STRATA_* env vars out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("STRATA_"):
            monkeypatch.delenv(key)


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        config = load_config()
        assert config == StrataConfig()
        assert config.workers is None
        assert config.timeout_seconds == 10.0
        assert config.admission.type_limit == 10
        assert config.estimate.core_hours == 1.5
        assert "OutputDev" in config.naming.interface_suffixes

    def test_max_file_size_bytes(self):
        assert StrataConfig(max_file_size_mb=1).max_file_size_bytes == 1024 * 1024


class TestValidation:
    """Test __post_init__ validation."""

    def test_workers_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            StrataConfig(workers=0)

    def test_timeout_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            StrataConfig(timeout_seconds=0)

    def test_tiers_need_three_values(self):
        with pytest.raises(InvalidConfigError):
            EstimateWeights(loop_minutes=(1.0, 2.0))

    def test_negative_threshold(self):
        with pytest.raises(InvalidConfigError):
            AdmissionThresholds(type_limit=-1)

    def test_lists_become_tuples(self):
        naming = NamingConventions(extra_utility_patterns=["Registry$"])
        assert naming.extra_utility_patterns == ("Registry$",)


class TestLoading:
    """Test TOML files, env vars and overrides."""

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            "workers = 3\n"
            "[admission]\n"
            "type_limit = 20\n"
            "[naming]\n"
            'extra_utility_patterns = ["Registry$"]\n'
        )
        config = load_config(config_file=path)
        assert config.workers == 3
        assert config.admission.type_limit == 20
        assert config.admission.pragma_limit == 2
        assert config.naming.extra_utility_patterns == ("Registry$",)

    def test_project_file_discovered(self, tmp_path):
        (tmp_path / "strata.toml").write_text("timeout_seconds = 2.5\n")
        assert load_config().timeout_seconds == 2.5

    def test_nested_tables_merge_across_files(self, tmp_path):
        (tmp_path / "strata.toml").write_text("[estimate]\ncore_hours = 2.0\n")
        explicit = tmp_path / "extra.toml"
        explicit.write_text("[estimate]\nutility_hours = 0.75\n")
        config = load_config(config_file=explicit)
        assert config.estimate.core_hours == 2.0
        assert config.estimate.utility_hours == 0.75

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("STRATA_WORKERS", "5")
        monkeypatch.setenv("STRATA_FOLLOW_SYMLINKS", "yes")
        config = load_config()
        assert config.workers == 5
        assert config.follow_symlinks is True

    def test_bad_env_var(self, monkeypatch):
        monkeypatch.setenv("STRATA_MAX_FILES", "many")
        with pytest.raises(StrataError):
            load_config()

    def test_overrides_win_and_none_ignored(self, tmp_path):
        (tmp_path / "strata.toml").write_text("workers = 3\n")
        assert load_config(workers=7).workers == 7
        assert load_config(workers=None).workers == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(StrataError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("workers = = 3\n")
        with pytest.raises(StrataError):
            load_config(config_file=path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "unknown.toml"
        path.write_text("colour = 'blue'\n")
        with pytest.raises(StrataError):
            load_config(config_file=path)

    def test_unknown_nested_key(self, tmp_path):
        path = tmp_path / "unknown.toml"
        path.write_text("[estimate]\nmystery = 1\n")
        with pytest.raises(StrataError):
            load_config(config_file=path)
