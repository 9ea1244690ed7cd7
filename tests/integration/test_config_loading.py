"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from kodikarr.infrastructure.config.load import load_config
from kodikarr.infrastructure.kodik.extractors import PLAYER_DOMAINS
from kodikarr.infrastructure.user_agents import DEFAULT_USER_AGENTS

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "kodikarr-test",
        "environment": "test",
        "http": {
            "timeout_seconds": 15.0,
            "user_agents": ["TestAgent/1.0", "TestAgent/2.0"],
        },
        "logging": {"level": "DEBUG", "format": "console"},
        "api": {"port": 8100},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI: pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "kodikarr"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 30.0
        assert config.http_follow_redirects is True
        assert config.http_user_agents == list(DEFAULT_USER_AGENTS)
        assert config.log_level == "INFO"
        assert config.log_format == "console"  # dev → console
        assert config.api_port == 7980
        assert config.kodik_domains == list(PLAYER_DOMAINS)

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "kodikarr-test"
        assert config.environment == "test"
        assert config.http_timeout_seconds == 15.0
        assert config.http_user_agents == ["TestAgent/1.0", "TestAgent/2.0"]
        assert config.log_level == "DEBUG"
        assert config.api_port == 8100

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)

    def test_yaml_partial_override_preserves_defaults(self, tmp_path: Path) -> None:
        """YAML that only sets http.timeout_seconds keeps other defaults."""
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.dump({"http": {"timeout_seconds": 99.0}}), "utf-8")

        config = load_config(config_path=path)
        assert config.http_timeout_seconds == 99.0
        assert config.http_follow_redirects is True  # default preserved
        assert config.app_name == "kodikarr"  # default preserved

    def test_kodik_domains_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "mirrors.yaml"
        path.write_text(
            yaml.dump({"kodik": {"domains": ["Mirror.Example", " kodik.info "]}}),
            "utf-8",
        )

        config = load_config(config_path=path)
        assert config.kodik_domains == ["mirror.example", "kodik.info"]

    def test_empty_kodik_domains_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text(yaml.dump({"kodik": {"domains": []}}), "utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)

    def test_invalid_timeout_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"http": {"timeout_seconds": 0}}), "utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("KODIKARR_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("KODIKARR_HTTP_TIMEOUT_SECONDS", "60.0")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.http_timeout_seconds == 60.0
        # YAML values not overridden by ENV stay
        assert config.app_name == "kodikarr-test"

    def test_env_user_agents_json_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KODIKARR_HTTP_USER_AGENTS", '["EnvAgent/1.0"]')
        config = load_config()
        assert config.http_user_agents == ["EnvAgent/1.0"]

    def test_env_kodik_domains_json_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KODIKARR_KODIK_DOMAINS", '["mirror.example"]')
        config = load_config()
        assert config.kodik_domains == ["mirror.example"]

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KODIKARR_ENVIRONMENT", "prod")

        config = load_config()
        assert config.environment == "prod"
        assert config.log_format == "json"  # prod → json

    def test_dotenv_file(self, tmp_path: Path) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text("KODIKARR_API_PORT=8200\n", encoding="utf-8")

        try:
            config = load_config(dotenv_path=dotenv)
        finally:
            os.environ.pop("KODIKARR_API_PORT", None)
        assert config.api_port == 8200


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("KODIKARR_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR"},
        )
        assert config.log_level == "ERROR"

    def test_cli_overrides_with_sectioned_format(self, yaml_config: Path) -> None:
        config = load_config(
            config_path=yaml_config,
            cli_overrides={"http": {"timeout_seconds": 5.0}},
        )
        assert config.http_timeout_seconds == 5.0

    def test_round_trips_sectioned_dict(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        again = load_config(cli_overrides=config.to_sectioned_dict())
        assert again == config
