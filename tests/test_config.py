"""Tests for prmoji.config (YAML + env loading, secret resolution)."""

from pathlib import Path

import pytest

from prmoji.config import AppConfig, load_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    """A missing config file yields defaults."""
    config = load_config(tmp_path / "missing.yaml")
    assert isinstance(config, AppConfig)
    assert config.server.port == 5000
    assert config.server.github_path == "/event/github"
    assert config.notifications.ignored_commenters == ["sonarcloud", "github-actions"]
    assert config.validation.delay_seconds == 60
    assert config.slack.notifications_channel_id is None


def test_yaml_sections_loaded(tmp_path: Path) -> None:
    """Values from YAML land in their sections."""
    path = tmp_path / "config.yaml"
    path.write_text(
        """
slack:
  notifications_channel_id: C_NOTIFY
  app_name: prbot
server:
  port: 8080
notifications:
  watched_labels: [release]
  message_reactions:
    - pattern: hotfix
      emoji: fire
validation:
  delay_seconds: 300
logging:
  level: DEBUG
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.slack.notifications_channel_id == "C_NOTIFY"
    assert config.slack.app_name == "prbot"
    assert config.server.port == 8080
    assert config.notifications.watched_labels == ["release"]
    assert config.notifications.message_reactions[0].emoji == "fire"
    assert config.validation.delay_seconds == 300
    assert config.logging.level == "DEBUG"


def test_env_substitution_and_secrets(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """${VAR} in YAML is replaced from the environment; tokens resolve from env."""
    monkeypatch.setenv("MY_CHANNEL", "C42")
    monkeypatch.setenv("SLACK_TOKEN", "xoxb-env")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp-env")
    path = tmp_path / "config.yaml"
    path.write_text(
        "slack:\n  token: ${SLACK_TOKEN}\n  notifications_channel_id: ${MY_CHANNEL}\ngithub:\n  token: ${UNSET_VAR}\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.slack.notifications_channel_id == "C42"
    assert config.slack_token_resolved == "xoxb-env"
    assert config.github_token_resolved == "ghp-env"


def test_secret_from_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """*_FILE env vars point at Docker secret files."""
    secret = tmp_path / "key"
    secret.write_text("s3cret\n", encoding="utf-8")
    monkeypatch.delenv("INTERNAL_REST_API_KEY", raising=False)
    monkeypatch.setenv("INTERNAL_REST_API_KEY_FILE", str(secret))
    config = load_config(tmp_path / "missing.yaml")
    assert config.internal_api_key_resolved == "s3cret"


def test_explicit_key_wins(tmp_path: Path) -> None:
    """A literal value in config is used as is."""
    path = tmp_path / "config.yaml"
    path.write_text("server:\n  internal_api_key: literal\n", encoding="utf-8")
    assert load_config(path).internal_api_key_resolved == "literal"


def test_example_config_loads() -> None:
    """The shipped config.example.yaml is valid."""
    example = Path(__file__).resolve().parent.parent / "config.example.yaml"
    config = load_config(example)
    assert config.notifications.message_reactions
    assert config.validation.enabled is True
