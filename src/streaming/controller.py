"""Stream session controller for one chat conversation.

Owns the conversation log and drives one request/stream lifecycle at a time:

    idle -> requesting -> streaming -> completed | failed -> idle

Runs on a single asyncio event loop. Shared state is only touched between
suspension points (awaiting response headers and each body chunk), so no
locking is needed. UI layers bind through `subscribe()` and drive the
conversation with `start()` and `cancel()`.
"""

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from contextlib import aclosing, nullcontext

import httpx

from src.models.schemas import (
    ChatSnapshot,
    ChatStreamRequest,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    Message,
    StreamState,
)
from src.streaming.accumulator import ConversationLog
from src.streaming.config import ClientConfig, get_client_config
from src.streaming.decoder import FrameDecoder, decode_frames
from src.streaming.errors import (
    ChatStreamError,
    TransportError,
    UpstreamError,
    UserInputError,
)
from src.streaming.interpreter import interpret
from src.streaming.session import new_session_token

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[ChatSnapshot], None]
ErrorListener = Callable[[ChatStreamError], None]


def validate_question(text: str) -> str:
    """Return the trimmed question.

    Raises:
        UserInputError: If nothing is left after trimming.
    """
    question = text.strip() if text else ""
    if not question:
        raise UserInputError("Question is empty")
    return question


def _to_event(payload: str) -> ContentEvent | DoneEvent | None:
    event = interpret(payload)
    if isinstance(event, ErrorEvent):
        raise UpstreamError(event.message)
    return event


async def _read_events(
    chunks: AsyncIterable[bytes],
    decoder: FrameDecoder,
) -> AsyncIterator[ContentEvent | DoneEvent]:
    async with aclosing(decode_frames(chunks, decoder)) as payloads:
        async for payload in payloads:
            event = _to_event(payload)
            if event is not None:
                yield event


class ChatStreamController:
    """Streams assistant responses into an observable conversation log.

    One controller is one chat session: it generates the session token once
    and sends it with every question. At most one response streams at a time.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
        on_error: ErrorListener | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Client configuration. Loads from environment if not provided.
            client: Shared HTTP client. A short-lived client is opened per
                    turn if not provided.
            on_error: Receives the underlying cause of every failed turn.
        """
        self._config = config or get_client_config()
        self._client = client
        self._on_error = on_error
        self._session_id = new_session_token()
        self._subscribers: list[SnapshotListener] = []
        self._state = StreamState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._decoder: FrameDecoder | None = None
        self._turn = 0
        self.last_outcome: StreamState | None = None
        self.last_error: ChatStreamError | None = None
        self._log = ConversationLog(
            on_change=self._on_log_change,
            greeting=self._config.greeting or None,
        )

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def busy(self) -> bool:
        """Whether a request is in flight."""
        return self._state in (StreamState.REQUESTING, StreamState.STREAMING)

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._log.messages

    @property
    def snapshot(self) -> ChatSnapshot:
        return ChatSnapshot(messages=self._log.messages, busy=self.busy, state=self._state)

    def subscribe(self, callback: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener.

        The callback receives the current snapshot immediately and a new one
        after every change.

        Args:
            callback: Called with each published ChatSnapshot.

        Returns:
            A function that removes the listener.
        """
        self._subscribers.append(callback)
        callback(self.snapshot)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self, text: str) -> asyncio.Task[None] | None:
        """Send a question and start streaming the answer.

        The user message and an empty in-progress assistant message are added
        before the request goes out. Must be called from a running event loop.

        Args:
            text: The user's question.

        Returns:
            The task streaming the response, or None if the input was empty
            or a response is already in flight.
        """
        try:
            question = validate_question(text)
        except UserInputError:
            logger.debug("Ignoring empty chat submission")
            return None
        if self.busy:
            logger.debug("Ignoring chat submission while a response is in flight")
            return None

        loop = asyncio.get_running_loop()
        self._turn += 1
        turn = self._turn
        self._state = StreamState.REQUESTING
        self.last_error = None
        try:
            self._log.append_user(question)
            if self._is_current(turn):
                self._log.begin_assistant_message()
        except Exception:
            logger.exception(f"Failed to start chat turn {turn}")
            if self._is_current(turn):
                self._abandon_start()
            raise
        if not self._is_current(turn):
            logger.debug(f"Chat turn {turn} cancelled before its request was sent")
            return None
        self._task = loop.create_task(self._run_turn(turn, question))
        return self._task

    async def send(self, text: str) -> ChatSnapshot:
        """Send a question and wait until the answer settles.

        Args:
            text: The user's question.

        Returns:
            The snapshot after the turn completed, failed or was cancelled.
        """
        task = self.start(text)
        if task is None:
            return self.snapshot
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            self.cancel()
            raise
        if not task.cancelled():
            task.result()
        return self.snapshot

    def cancel(self) -> bool:
        """Abort the response in flight.

        The in-progress message is replaced with the cancelled message right
        away; chunks arriving afterwards are dropped.

        Returns:
            True if a response was cancelled, False if nothing was in flight.
        """
        if not self.busy:
            return False
        task = self._task
        logger.info(f"Cancelling chat turn {self._turn}")
        self._abort()
        if task is not None and not task.done():
            task.cancel()
        return True

    async def _run_turn(self, turn: int, question: str) -> None:
        logger.info(f"Starting chat turn {turn} for session {self._session_id[:8]}")
        try:
            await self._stream_response(turn, question)
        except asyncio.CancelledError:
            if self._is_current(turn):
                self._abort()
            else:
                logger.debug(f"Chat turn {turn} stopped after cancellation")
            raise
        except ChatStreamError as e:
            if self._is_current(turn):
                self._fail(e)
        except Exception:
            logger.exception(f"Unexpected failure in chat turn {turn}")
            if self._is_current(turn) and self._log.streaming_index is not None:
                self.last_outcome = StreamState.FAILED
                self._log.fail(self._config.error_message)
            raise
        finally:
            if self._is_current(turn):
                self._reset_to_idle()

    async def _stream_response(self, turn: int, question: str) -> None:
        request = ChatStreamRequest(question=question, session_id=self._session_id)
        try:
            async with (
                self._open_client() as client,
                client.stream(
                    "POST",
                    self._config.stream_url,
                    json=request.model_dump(),
                    headers={"Accept": "text/event-stream"},
                ) as response,
            ):
                if not response.is_success:
                    raise TransportError(
                        f"HTTP {response.status_code}", status_code=response.status_code
                    )
                if response.status_code == httpx.codes.NO_CONTENT:
                    raise TransportError("Response has no body", status_code=204)

                self._set_state(StreamState.STREAMING)
                self._decoder = FrameDecoder()
                events = _read_events(response.aiter_bytes(), self._decoder)
                async with aclosing(events):
                    async for event in events:
                        if not self._is_current(turn):
                            return
                        if isinstance(event, DoneEvent):
                            break
                        self._log.apply_delta(event.text)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if self._is_current(turn):
            self._complete()

    def _open_client(self) -> httpx.AsyncClient | nullcontext[httpx.AsyncClient]:
        if self._client is not None:
            return nullcontext(self._client)
        return httpx.AsyncClient(timeout=httpx.Timeout(self._config.timeout))

    def _is_current(self, turn: int) -> bool:
        return turn == self._turn

    def _complete(self) -> None:
        logger.info(f"Chat turn {self._turn} completed")
        self.last_outcome = StreamState.COMPLETED
        self._state = StreamState.COMPLETED
        self._log.finish()

    def _fail(self, error: ChatStreamError) -> None:
        logger.warning(f"Chat turn {self._turn} failed: {type(error).__name__}: {error}")
        self.last_outcome = StreamState.FAILED
        self.last_error = error
        self._state = StreamState.FAILED
        self._log.fail(self._config.error_message)
        if self._on_error is not None:
            self._on_error(error)

    def _abort(self) -> None:
        self._turn += 1
        if self._decoder is not None:
            self._decoder.reset()
        self.last_outcome = StreamState.FAILED
        if self._log.streaming_index is not None:
            self._log.fail(self._config.cancelled_message)
        self._reset_to_idle()

    def _abandon_start(self) -> None:
        self.last_outcome = StreamState.FAILED
        self._state = StreamState.IDLE
        if self._log.streaming_index is not None:
            self._log.fail(self._config.error_message)
        else:
            self._publish()

    def _reset_to_idle(self) -> None:
        self._task = None
        self._decoder = None
        self._set_state(StreamState.IDLE)

    def _set_state(self, state: StreamState) -> None:
        self._state = state
        self._publish()

    def _on_log_change(self, messages: tuple[Message, ...]) -> None:
        self._publish()

    def _publish(self) -> None:
        snapshot = self.snapshot
        for callback in list(self._subscribers):
            callback(snapshot)
