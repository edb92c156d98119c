"""Terminal rendering of a streamed conversation."""

import sys
from typing import TextIO

from src.models.schemas import ChatSnapshot, Message, Role


class TerminalRenderer:
    """Snapshot listener that writes assistant text as it streams in.

    Only the new tail of the in-progress message is written on each
    snapshot. A message whose text was replaced (failure or cancellation)
    is written again on a fresh line. User messages are not echoed.
    """

    def __init__(self, out: TextIO | None = None, prefix: str = "assistant> ") -> None:
        self._out = out or sys.stdout
        self._prefix = prefix
        self._rendered = 0
        self._written = ""
        self._started = False

    def __call__(self, snapshot: ChatSnapshot) -> None:
        messages = snapshot.messages
        while self._rendered < len(messages):
            message = messages[self._rendered]
            if message.role is Role.ASSISTANT:
                self._render_assistant(message)
                if message.in_progress:
                    break
            self._rendered += 1
        self._out.flush()

    def _render_assistant(self, message: Message) -> None:
        if not self._started:
            self._out.write(self._prefix)
            self._started = True
        if message.text.startswith(self._written):
            self._out.write(message.text[len(self._written):])
        else:
            self._out.write(f"\n{message.text}")
        self._written = message.text
        if not message.in_progress:
            self._out.write("\n")
            self._started = False
            self._written = ""
