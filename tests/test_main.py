"""Tests for the prmoji CLI entry point."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from prmoji.main import main, parse_args


def test_parse_args_defaults_to_serve() -> None:
    """No subcommand means serve with config.yaml."""
    args = parse_args([])
    assert args.subcommand == "serve"
    assert args.config == Path("config.yaml")
    assert args.check is False
    assert args.log_level is None


def test_parse_args_subcommands() -> None:
    """intro, cleanup and validate parse their arguments."""
    assert parse_args(["intro", "U123"]).user_id == "U123"
    args = parse_args(["-c", "other.yaml", "--log-level", "DEBUG", "cleanup", "--days", "3"])
    assert args.subcommand == "cleanup"
    assert args.days == 3
    assert args.config == Path("other.yaml")
    assert args.log_level == "DEBUG"
    assert parse_args(["validate"]).subcommand == "validate"


def test_check_only_loads_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """--check validates config and exits 0 without building the app."""
    with patch("prmoji.app.create_app") as create_app:
        assert main(["-c", str(tmp_path / "missing.yaml"), "--check"]) == 0
    create_app.assert_not_called()
    assert "Config OK" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv,method,call_args",
    [
        (["cleanup"], "cleanup", ()),
        (["cleanup", "--days", "5"], "cleanup_old", (5,)),
        (["cleanup", "--days", "0"], "cleanup", ()),
        (["validate"], "validate_stored_prs", ()),
        (["intro", "U1"], "intro_to_user", ("U1",)),
    ],
)
def test_one_shot_subcommands(tmp_path: Path, argv: list, method: str, call_args: tuple) -> None:
    """One-shot subcommands call the matching app method."""
    app = MagicMock()
    app.intro_to_user.return_value = True
    with patch("prmoji.app.create_app", return_value=app):
        assert main(["-c", str(tmp_path / "missing.yaml"), *argv]) == 0
    getattr(app, method).assert_called_once_with(*call_args)


def test_one_shot_failure_returns_1(tmp_path: Path) -> None:
    """Errors in one-shot subcommands are logged and exit 1."""
    app = MagicMock()
    app.validate_stored_prs.side_effect = RuntimeError("boom")
    with patch("prmoji.app.create_app", return_value=app):
        assert main(["-c", str(tmp_path / "missing.yaml"), "validate"]) == 1
