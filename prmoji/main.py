"""Prmoji entry point.

Subcommands: serve (default; HTTP server plus validation scheduler),
intro USER_ID, cleanup [--days N], validate.
Usage: prmoji [-c config.yaml] [serve | intro U123 | cleanup --days 7 | validate]
"""

import argparse
import logging
import sys
from pathlib import Path

from prmoji.config import AppConfig, load_config
from prmoji.logging import PrmojiLogging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (serve when omitted)."""
    argv = argv if argv is not None else sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="prmoji",
        description="Prmoji - mirror GitHub PR activity onto Slack messages",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override logging.level (DEBUG, INFO, WARNING, ERROR)",
    )
    sub = parser.add_subparsers(dest="subcommand")
    sub.add_parser("serve", help="Run the HTTP server and validation scheduler")
    intro = sub.add_parser("intro", help="Send the help text to a Slack user")
    intro.add_argument("user_id", help="Slack user ID")
    cleanup = sub.add_parser("cleanup", help="Delete stored PR messages")
    cleanup.add_argument(
        "--days",
        type=int,
        default=None,
        help="Only delete entries at least this many days old (default: all)",
    )
    sub.add_parser("validate", help="Check release checklists of stored PRs once")

    parsed = parser.parse_args(argv)
    if parsed.subcommand is None:
        parsed.subcommand = "serve"
    return parsed


def _resolve_config_path(config_path: Path) -> Path:
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("prmoji").warning("config.yaml not found, using config.example.yaml")
            return Path("config.example.yaml")
    return config_path


def serve(config: AppConfig) -> None:
    """Run the validation scheduler thread and the HTTP server."""
    from prmoji.app import create_app
    from prmoji.webhook.server import run_server

    log = logging.getLogger("prmoji.main")
    app = create_app(config)
    if config.validation.enabled:
        app.scheduler.start()
    else:
        log.warning("Release checklist validation disabled in config")
    log.info(
        "Prmoji started | notifications_channel=%s | validation=%s",
        config.slack.notifications_channel_id or "-",
        config.validation.enabled,
    )
    try:
        run_server(config, app)
    finally:
        app.scheduler.stop()


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to serve, intro, cleanup or validate."""
    args = parse_args(argv)
    config = load_config(_resolve_config_path(args.config))
    PrmojiLogging(config.logging, level_override=args.log_level).setup()
    log = logging.getLogger("prmoji.main")

    if args.check:
        print("Config OK:", config.server.host, config.server.port, config.storage.path)
        return 0

    if args.subcommand == "serve":
        try:
            serve(config)
        except KeyboardInterrupt:
            return 0
        except Exception as e:
            log.exception("Fatal error: %s", e)
            return 1
        return 0

    from prmoji.app import create_app

    try:
        app = create_app(config)
        if args.subcommand == "intro":
            return 0 if app.intro_to_user(args.user_id) else 1
        if args.subcommand == "cleanup":
            if args.days:
                app.cleanup_old(args.days)
            else:
                app.cleanup()
            return 0
        app.validate_stored_prs()
    except Exception as e:
        log.exception("%s failed: %s", args.subcommand, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
