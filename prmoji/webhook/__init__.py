"""Inbound HTTP: GitHub webhooks, Slack events and slash commands."""

from prmoji.webhook.server import WebhookHandler, make_server, run_server

__all__ = ["WebhookHandler", "make_server", "run_server"]
