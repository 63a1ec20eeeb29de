"""Prmoji: mirror GitHub pull request activity into Slack with emoji and DMs."""

__version__ = "0.3.0"
