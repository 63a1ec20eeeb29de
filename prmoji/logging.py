"""Logging from config, env and CLI.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: failed Slack/GitHub/store calls and ERROR
- INFO: received events, reactions, messages, WARNING, and ERROR
- DEBUG: discarded events, payload details and all levels above

Configure via config.yaml (logging.level, logging.format), env
(LOGGING_LEVEL, LOGGING_FORMAT) or `prmoji --log-level`.
"""

import logging

from prmoji.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class PrmojiLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig, level_override: str | None = None) -> None:
        """Store logging config; level_override (from CLI) wins over config.level."""
        self._level = _resolve_level(level_override or config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        # urllib3 and slack_sdk are chatty at DEBUG
        if self._level <= logging.DEBUG:
            logging.getLogger("urllib3").setLevel(logging.INFO)
            logging.getLogger("slack_sdk").setLevel(logging.INFO)
