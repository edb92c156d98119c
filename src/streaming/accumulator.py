"""Conversation log with a single streaming assistant message.

The log is a tuple of frozen messages plus the index of the message being
streamed into. Every change replaces the tuple and is handed to the
`on_change` listener, so observers only ever see complete snapshots.
"""

from collections.abc import Callable

from src.models.schemas import Message, Role
from src.streaming.errors import LogStateError

LogListener = Callable[[tuple[Message, ...]], None]


class ConversationLog:
    """Append-only message log that accumulates streamed text deltas."""

    def __init__(
        self,
        on_change: LogListener | None = None,
        greeting: str | None = None,
    ) -> None:
        """Initialize the log.

        Args:
            on_change: Called with the new message tuple after every change.
            greeting: Optional assistant message to open the conversation with.
        """
        self._on_change = on_change
        self._messages: tuple[Message, ...] = ()
        self._streaming_index: int | None = None
        self._accumulated = ""
        if greeting:
            self._messages = (Message(role=Role.ASSISTANT, text=greeting),)

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    @property
    def streaming_index(self) -> int | None:
        """Index of the in-progress assistant message, if any."""
        return self._streaming_index

    @property
    def accumulated_text(self) -> str:
        return self._accumulated

    def append_user(self, text: str) -> None:
        """Append a finished user message.

        Raises:
            LogStateError: If an assistant message is still streaming.
        """
        if self._streaming_index is not None:
            raise LogStateError("Cannot append a user message while streaming")
        self._publish(self._messages + (Message(role=Role.USER, text=text),))

    def begin_assistant_message(self) -> None:
        """Append an empty in-progress assistant message.

        Raises:
            LogStateError: If an assistant message is already streaming.
        """
        if self._streaming_index is not None:
            raise LogStateError("An assistant message is already in progress")
        self._accumulated = ""
        self._streaming_index = len(self._messages)
        self._publish(
            self._messages + (Message(role=Role.ASSISTANT, in_progress=True),)
        )

    def apply_delta(self, text: str) -> None:
        """Append a text delta to the in-progress assistant message."""
        self._require_streaming()
        self._accumulated += text
        self._replace_trailing(text=self._accumulated, in_progress=True)

    def finish(self) -> None:
        """Mark the in-progress assistant message as complete."""
        self._require_streaming()
        self._replace_trailing(text=self._accumulated, in_progress=False)

    def fail(self, user_facing_message: str) -> None:
        """Replace the in-progress message with a failure notice.

        Any text accumulated so far is discarded.

        Args:
            user_facing_message: Text shown to the user instead of the response.
        """
        self._require_streaming()
        self._replace_trailing(text=user_facing_message, in_progress=False)

    def _require_streaming(self) -> None:
        if self._streaming_index is None:
            raise LogStateError("No assistant message is in progress")

    def _replace_trailing(self, text: str, in_progress: bool) -> None:
        index = self._streaming_index
        updated = self._messages[index].model_copy(
            update={"text": text, "in_progress": in_progress}
        )
        if not in_progress:
            self._streaming_index = None
            self._accumulated = ""
        self._publish(self._messages[:index] + (updated,))

    def _publish(self, messages: tuple[Message, ...]) -> None:
        self._messages = messages
        if self._on_change is not None:
            self._on_change(messages)
