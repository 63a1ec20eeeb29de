"""HTTP server for GitHub webhooks, Slack events and slash commands.

GitHub and Slack events are answered with 200 right away and processed in a
background thread; slash commands are answered with the reply text.
"""

import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable

from prmoji.app import PrmojiApp
from prmoji.config import AppConfig
from prmoji.webhook.parsers import parse_json_body, slack_challenge, slack_command, slack_message

LOG = logging.getLogger("prmoji.webhook")

CLEANUP_PATH = "/cleanup"
VALIDATE_PATH = "/validate-prs"


class WebhookHandler(BaseHTTPRequestHandler):
    """Route GET /health and the POST endpoints to the PrmojiApp."""

    config: AppConfig
    app: PrmojiApp
    background: bool = True

    def do_GET(self) -> None:
        if self.path == "/health" or self.path == "/":
            self._send_json(200, {"status": "ok", "service": "prmoji"})
            return
        self._send_empty(404)

    def do_POST(self) -> None:
        server = self.config.server
        routes = {
            server.github_path: self._handle_github_event,
            server.slack_event_path: self._handle_slack_event,
            server.slack_command_path: self._handle_slack_command,
            CLEANUP_PATH: self._handle_cleanup,
            VALIDATE_PATH: self._handle_validate,
        }
        route = routes.get(self.path.split("?", 1)[0])
        if route is None:
            self._send_empty(404)
            return
        route()

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length", 0) or 0)
        return self.rfile.read(length) if length else b""

    def _send_json(self, status: int, data: Any) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def _send_text(self, status: int, text: str) -> None:
        raw = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(raw)))
        self.end_headers()
        self.wfile.write(raw)

    def _send_empty(self, status: int) -> None:
        self.send_response(status)
        self.end_headers()

    def _dispatch(self, name: str, target: Callable[..., Any], *args: Any) -> None:
        """Run target after the response; errors are logged, never raised."""

        def run() -> None:
            try:
                target(*args)
            except Exception as e:
                LOG.exception("Error handling %s: %s", name, e)

        if self.background:
            threading.Thread(target=run, name=f"prmoji-{name}", daemon=True).start()
        else:
            run()

    def _handle_github_event(self) -> None:
        body = self._read_body()
        event_type = self.headers.get("X-GitHub-Event", "")
        try:
            payload = parse_json_body(body, self.headers.get("Content-Type", ""))
        except json.JSONDecodeError:
            LOG.warning("Invalid GitHub webhook JSON (%s bytes)", len(body))
            self._send_json(200, {"received": True})
            return
        LOG.debug("GitHub event: %s (payload keys: %s)", event_type, list(payload.keys()))
        self._send_json(200, {"received": True})
        self._dispatch("github-event", self.app.handle_pr_event, event_type, payload)

    def _handle_slack_event(self) -> None:
        body = self._read_body()
        try:
            payload = parse_json_body(body, self.headers.get("Content-Type", ""))
        except json.JSONDecodeError:
            LOG.warning("Invalid Slack event JSON (%s bytes)", len(body))
            self._send_empty(200)
            return

        challenge = slack_challenge(payload)
        if challenge is not None:
            LOG.info("Answering Slack URL verification challenge")
            self._send_text(200, challenge)
            return

        self._send_empty(200)
        message = slack_message(payload)
        if message is None:
            LOG.debug("Ignoring Slack event %s", payload.get("type"))
            return
        self._dispatch("slack-event", self.app.handle_chat_message, *message)

    def _handle_slack_command(self) -> None:
        command = slack_command(self._read_body())
        try:
            reply = self.app.handle_command(command.user_id, command.text)
        except Exception as e:
            LOG.exception("Slack command failed: %s", e)
            reply = "Something went wrong :crycat:"
        self._send_text(200, reply)

    def _authorized(self) -> bool:
        expected = self.config.internal_api_key_resolved
        if not expected:
            return True
        return self.headers.get("X-Api-Key") == expected

    def _handle_cleanup(self) -> None:
        self._read_body()
        self._send_empty(200)
        self._dispatch("cleanup", self.app.cleanup_old, self.config.validation.cleanup_days)

    def _handle_validate(self) -> None:
        self._read_body()
        if not self._authorized():
            LOG.warning("Rejected /validate-prs request without a valid API key")
            self._send_empty(401)
            return
        self._send_empty(200)
        self._dispatch("validate-prs", self.app.validate_stored_prs)

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def make_server(config: AppConfig, app: PrmojiApp, background: bool = True) -> ThreadingHTTPServer:
    """Bind a server on config.server host/port with its own handler class."""
    handler = type(
        "BoundWebhookHandler",
        (WebhookHandler,),
        {"config": config, "app": app, "background": background},
    )
    return ThreadingHTTPServer((config.server.host, config.server.port), handler)


def run_server(config: AppConfig, app: PrmojiApp) -> None:
    """Serve until interrupted."""
    server = make_server(config, app)
    LOG.info("Listening on %s:%s", config.server.host, config.server.port)
    try:
        server.serve_forever()
    finally:
        server.server_close()
