"""Tests for ghcopy_core.config: models and YAML loader."""

import os
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from ghcopy_core.config.loader import (
    DEFAULT_CONFIG_TEMPLATE,
    _expand_env_vars,
    config_candidates,
    load_config,
    locate_config,
)
from ghcopy_core.config.models import GhCopyConfig, HttpSettings, MirrorSettings


# ── GhCopyConfig defaults ───────────────────────────────────────────


class TestGhCopyConfigDefaults:
    def test_default_log_settings(self, sample_config):
        assert sample_config.log_level == "info"
        assert sample_config.log_format == "text"

    def test_default_hosts(self, sample_config):
        assert sample_config.hosts.web == "github.com"
        assert sample_config.hosts.raw == "raw.githubusercontent.com"
        assert sample_config.hosts.api == "api.github.com"

    def test_default_http(self, sample_config):
        assert sample_config.http.timeout == 30
        assert sample_config.http.max_retries == 3
        assert sample_config.http.retry_delay == 1.0
        assert sample_config.http.max_redirects == 5

    def test_default_mirror(self, sample_config):
        assert sample_config.mirror.force is False
        assert sample_config.mirror.strict is False
        assert sample_config.mirror.concurrency == 4

    def test_default_token_env(self, sample_config):
        assert sample_config.auth.token_env == "GITHUB_TOKEN"


class TestValidation:
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            HttpSettings(timeout=0)

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            HttpSettings(max_retries=-1)

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValidationError):
            MirrorSettings(concurrency=0)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            GhCopyConfig(log_level="verbose")

    def test_template_parses_to_defaults(self):
        assert GhCopyConfig(**yaml.safe_load(DEFAULT_CONFIG_TEMPLATE)) == GhCopyConfig()


# ── _expand_env_vars ────────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_nested_values(self):
        with patch.dict(os.environ, {"GH_HOST": "git.example.com"}):
            result = _expand_env_vars({"hosts": {"web": "${GH_HOST}"}, "list": ["${GH_HOST}"]})
        assert result == {"hosts": {"web": "git.example.com"}, "list": ["git.example.com"]}

    def test_missing_var_becomes_empty(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("x${NOPE}y") == "xy"

    def test_non_strings_untouched(self):
        assert _expand_env_vars(5) == 5


# ── load_config ─────────────────────────────────────────────────────


class TestLoadConfig:
    def test_returns_defaults_when_no_file_exists(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert load_config() == GhCopyConfig()

    def test_loads_project_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ghcopy.yaml").write_text("mirror:\n  concurrency: 8\nlog_level: debug\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        config = load_config()
        assert config.mirror.concurrency == 8
        assert config.log_level == "debug"

    def test_empty_file_falls_through(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ghcopy.yaml").write_text("")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert load_config() == GhCopyConfig()

    def test_raises_on_invalid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ghcopy.yaml").write_text("  bad:\nyaml: [unterminated")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_invalid_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ghcopy.yaml").write_text("http:\n  timeout: -1\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_raises_on_non_mapping(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ghcopy.yaml").write_text("- just\n- a list\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config()

    def test_cli_path_takes_priority(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "ghcopy.yaml").write_text("mirror:\n  concurrency: 2\n")
        cli_file = tmp_path / "custom.yaml"
        cli_file.write_text("mirror:\n  concurrency: 9\n")
        assert load_config(cli_path=str(cli_file)).mirror.concurrency == 9

    def test_missing_cli_path(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            load_config(cli_path=str(tmp_path / "nope.yaml"))

    def test_user_global_config_used_as_fallback(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        fake_home = tmp_path / "fakehome"
        (fake_home / ".ghcopy").mkdir(parents=True)
        (fake_home / ".ghcopy" / "config.yaml").write_text("log_format: json\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)
        assert load_config().log_format == "json"


class TestLocateConfig:
    def test_candidates_in_lookup_order(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        fake_home = tmp_path / "fakehome"
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)
        cli_file = tmp_path / "custom.yaml"
        cli_file.write_text("log_level: warn\n")
        assert list(config_candidates(str(cli_file))) == [
            cli_file,
            tmp_path / "ghcopy.yaml",
            fake_home / ".ghcopy" / "config.yaml",
        ]

    def test_reports_winning_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        fake_home = tmp_path / "fakehome"
        (fake_home / ".ghcopy").mkdir(parents=True)
        (fake_home / ".ghcopy" / "config.yaml").write_text("log_format: json\n")
        (tmp_path / "ghcopy.yaml").write_text("# only a comment\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)
        path, raw = locate_config()
        assert path == fake_home / ".ghcopy" / "config.yaml"
        assert raw == {"log_format": "json"}

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert locate_config() == (None, {})

    def test_env_expansion_reaches_model(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        monkeypatch.setenv("GHE_API", "ghe.example.com")
        (tmp_path / "ghcopy.yaml").write_text("hosts:\n  api: ${GHE_API}\n")
        assert load_config().hosts.api == "ghe.example.com"
