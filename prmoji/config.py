"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

from pathlib import Path
from typing import Any, List

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so secret resolution can read env/file
_current_env: dict[str, str] = {}


def _is_placeholder(value: str | None) -> bool:
    return not value or value.startswith("${")


class SlackConfig(BaseSettings):
    """Slack bot identity and channels."""

    model_config = SettingsConfigDict(env_prefix="SLACK_", extra="ignore")

    token: str | None = Field(default=None, description="Bot token (xoxb-...); use env or secret file")
    notifications_channel_id: str | None = Field(
        default=None, description="Channel for merge broadcasts; unset disables broadcasts"
    )
    app_name: str = Field(default="prmoji", description="Slash command name used in help texts")
    app_display_name: str = Field(default="Prmoji", description="Bot display name used in help texts")


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    timeout: int = Field(default=30, ge=1, description="Request timeout in seconds")


class StorageConfig(BaseSettings):
    """Relational store settings."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", extra="ignore")

    path: str = Field(default=".prmoji/prmoji.db", description="SQLite database file")


class ServerConfig(BaseSettings):
    """Inbound HTTP server settings."""

    model_config = SettingsConfigDict(env_prefix="SERVER_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=5000, ge=1, le=65535, description="Bind port")
    github_path: str = Field(default="/event/github", description="GitHub webhook path")
    slack_event_path: str = Field(default="/event/slack", description="Slack Events API path")
    slack_command_path: str = Field(default="/event/slack/command", description="Slash command path")
    internal_api_key: str | None = Field(
        default=None, description="If set, /validate-prs requires this value in X-Api-Key"
    )


class MessageReaction(BaseModel):
    """React with emoji to any Slack message whose text matches pattern (regex search)."""

    pattern: str
    emoji: str


class NotificationsConfig(BaseSettings):
    """Ignore-lists and watch-lists for reactions and broadcasts."""

    model_config = SettingsConfigDict(env_prefix="NOTIFICATIONS_", extra="ignore")

    ignored_commenters: List[str] = Field(
        default_factory=lambda: ["sonarcloud", "github-actions"],
        description="Logins whose comments never get a reaction",
    )
    watched_repositories: List[str] = Field(
        default_factory=list, description="owner/repo allow-list for broadcasts; empty = all"
    )
    watched_labels: List[str] = Field(default_factory=list, description="Label allow-list for broadcasts; empty = all")
    message_reactions: List[MessageReaction] = Field(default_factory=list)


class ValidationConfig(BaseSettings):
    """Deferred release checklist validation."""

    model_config = SettingsConfigDict(env_prefix="VALIDATION_", extra="ignore")

    enabled: bool = Field(default=True, description="Run the scheduler thread")
    delay_seconds: int = Field(default=60, ge=1, description="Fixed delay between checks of one PR")
    poll_interval_seconds: int = Field(default=5, ge=1, description="How often the queue is polled")
    queue_dir: str = Field(default=".prmoji/queue", description="Durable queue directory")
    cleanup_days: int = Field(default=7, ge=0, description="Default age for POST /cleanup")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    slack: SlackConfig = Field(default_factory=SlackConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def slack_token_resolved(self) -> str | None:
        """Resolve Slack token from config, env or Docker secret file."""
        t = self.slack.token
        if not _is_placeholder(t):
            return t
        return _read_secret("SLACK_TOKEN", "SLACK_TOKEN_FILE")

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if not _is_placeholder(t):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE") or _read_secret(
            "GITHUB_ACCESS_TOKEN", "GITHUB_ACCESS_TOKEN_FILE"
        )

    @property
    def internal_api_key_resolved(self) -> str | None:
        k = self.server.internal_api_key
        if not _is_placeholder(k):
            return k
        return _read_secret("INTERNAL_REST_API_KEY", "INTERNAL_REST_API_KEY_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: SLACK_TOKEN or SLACK_TOKEN_FILE, GITHUB_TOKEN or GITHUB_TOKEN_FILE.
    A missing file yields defaults (env overrides still apply per section).
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    return AppConfig(
        slack=SlackConfig(**(raw.get("slack") or {})),
        github=GitHubConfig(**(raw.get("github") or {})),
        storage=StorageConfig(**(raw.get("storage") or {})),
        server=ServerConfig(**(raw.get("server") or {})),
        notifications=NotificationsConfig(**(raw.get("notifications") or {})),
        validation=ValidationConfig(**(raw.get("validation") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
