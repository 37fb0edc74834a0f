"""
console/interpreter.py -- The admin command language.

Grammar: a line starting with "/" followed by a command word and
space-separated arguments.

  /rank <0-5> <username>   set a user's rank (username may contain spaces)
  /publish_update          acknowledge an update broadcast
  /code                    rank-5 developer access
  /help                    list commands

Every executed line is appended to the transcript as "> <line>", followed by
its result lines:
  "✓ <message>"           backend success
  "✗ Error: <error>"      backend failure or exception while calling it
  "Error: <text>"         rejected locally (syntax, unknown command);
                           nothing was sent to the backend

execute() never raises. The transcript is append-only.
"""

from __future__ import annotations

from typing import Optional

from client.base import BackendClient
from console.sink import EventSink, LoggingEventSink
from contract.transport import ContractResponse
from core.ranks import MAX_RANK, MIN_RANK

SUCCESS_GLYPH = "✓"
FAILURE_GLYPH = "✗"

RANK_USAGE = "Error: Invalid syntax. Usage: /rank <0-5> <username>"

HELP_LINES = (
    "/rank <0-5> <username> - Set a user's rank (Rank 5 only)",
    "/publish_update - Publish updates to all users",
    "/code - View source code access (Rank 5 only)",
    "/help - Show this list",
)


class AdminConsole:
    """Interprets operator commands on behalf of operator_username.

    Usage:
        console = AdminConsole(client, "Mark 2.0")
        console.execute("/rank 3 alice")
        console.transcript[-1]   # "✓ Mark 2.0 changed alice from ..."
    """

    def __init__(self, client: BackendClient, operator_username: str, sink: Optional[EventSink] = None) -> None:
        self.client = client
        self.operator_username = operator_username
        self.sink = sink if sink is not None else LoggingEventSink()
        self._transcript: list[str] = []
        self._commands = {
            "/rank": self._rank,
            "/publish_update": self._publish_update,
            "/code": self._code,
            "/help": self._help,
        }

    @property
    def transcript(self) -> tuple[str, ...]:
        return tuple(self._transcript)

    def execute(self, line: str) -> list[str]:
        """Run one command line and return the lines it appended (echo included)."""
        command = line.strip()
        if not command:
            return []
        start = len(self._transcript)
        self._append("system", f"> {command}")

        word, _, args = command.partition(" ")
        handler = self._commands.get(word.lower())
        if handler is None:
            self._append("error", f'Error: Unknown command "{word.lower()}"')
            return self._transcript[start:]

        try:
            handler(args.strip())
        except Exception as exc:
            self._append("error", f"{FAILURE_GLYPH} Error: {exc}")
        return self._transcript[start:]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _rank(self, args: str) -> None:
        rank_token, _, username = args.partition(" ")
        username = username.strip()
        try:
            rank = int(rank_token)
        except ValueError:
            rank = None
        if rank is None or not username:
            self._append("error", RANK_USAGE)
            return
        if not MIN_RANK <= rank <= MAX_RANK:
            self._append("error", f"Error: Rank must be between {MIN_RANK}-{MAX_RANK}")
            return
        self._report(self.client.set_rank(self.operator_username, username, rank))

    def _publish_update(self, args: str) -> None:
        self._report(self.client.publish_update(self.operator_username))

    def _code(self, args: str) -> None:
        resp = self.client.code(self.operator_username)
        if resp.success:
            self._append("info", f"{SUCCESS_GLYPH} Access granted. Source code:")
            self._append("info", str(resp.body.get("sourceCode", "")))
        else:
            self._append("error", f"{FAILURE_GLYPH} Error: {resp.error}")

    def _help(self, args: str) -> None:
        for line in HELP_LINES:
            self._append("info", line)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _report(self, resp: ContractResponse) -> None:
        if resp.success:
            self._append("info", f"{SUCCESS_GLYPH} {resp.body.get('message', '')}")
        else:
            self._append("error", f"{FAILURE_GLYPH} Error: {resp.error}")

    def _append(self, level: str, line: str) -> None:
        self._transcript.append(line)
        self.sink.push(level, line)
