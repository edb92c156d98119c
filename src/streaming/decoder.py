"""Incremental decoder for `data: <json>` framed response bodies.

Turns arbitrarily split byte chunks into complete frame payloads. Handles:
    - UTF-8 characters split across chunks (held until complete)
    - Frame delimiters split across chunks
    - Non-data frames such as comments and heartbeats (dropped)

Payloads are returned as raw strings; parsing is left to the interpreter.
"""

import codecs
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterator

from src.streaming.errors import ProtocolError

logger = logging.getLogger(__name__)

FRAME_DELIMITER = "\n\n"
DATA_MARKER = "data: "


class FrameDecoder:
    """Reassembles frame payloads from a chunked byte stream.

    One decoder serves exactly one response body. Its buffers hold the
    undecoded tail of a split UTF-8 character and the decoded text not yet
    terminated by a frame delimiter.
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._pending = ""

    @property
    def pending_text(self) -> str:
        """Decoded text waiting for a frame delimiter."""
        return self._pending

    def feed(self, chunk: bytes) -> Iterator[str]:
        """Consume a byte chunk and return the payloads it completes.

        Args:
            chunk: Next bytes read from the response body.

        Returns:
            Iterator over payloads of every `data: ` frame completed by this chunk.

        Raises:
            ProtocolError: If the bytes are not valid UTF-8.
        """
        self._pending += self._decode(chunk, final=False)
        *frames, self._pending = self._pending.split(FRAME_DELIMITER)
        return self._payloads(frames)

    def close(self) -> Iterator[str]:
        """Flush the decoder at end of stream.

        A trailing `data: ` frame that was never terminated is still returned,
        since the transport closing the body ends it as well.

        Returns:
            Iterator over the payload of the unterminated final frame, if any.

        Raises:
            ProtocolError: If the stream ended inside a multi-byte character.
        """
        tail = self._pending + self._decode(b"", final=True)
        self._pending = ""
        frames = [tail] if tail.strip() else []
        return self._payloads(frames)

    def reset(self) -> None:
        """Discard everything buffered so far."""
        self._utf8.reset()
        self._pending = ""

    def _decode(self, chunk: bytes, final: bool) -> str:
        try:
            return self._utf8.decode(chunk, final=final)
        except UnicodeDecodeError as e:
            self.reset()
            raise ProtocolError(f"Invalid UTF-8 in response body: {e.reason}") from e

    @staticmethod
    def _payloads(frames: list[str]) -> Iterator[str]:
        for frame in frames:
            if frame.startswith(DATA_MARKER):
                yield frame[len(DATA_MARKER):]
            elif frame:
                logger.debug(f"Ignoring non-data frame: {frame[:40]!r}")


async def decode_frames(
    byte_stream: AsyncIterable[bytes],
    decoder: FrameDecoder | None = None,
) -> AsyncIterator[str]:
    """Decode frame payloads from an async byte stream.

    Args:
        byte_stream: Response body chunks, e.g. `response.aiter_bytes()`.
        decoder: Decoder to buffer into, so the caller can reset it while
                 the stream is open. A fresh one is used if not provided.

    Yields:
        Raw payload strings in arrival order.

    Raises:
        ProtocolError: If the body is not valid UTF-8.
    """
    decoder = decoder or FrameDecoder()
    async for chunk in byte_stream:
        for payload in decoder.feed(chunk):
            yield payload
    for payload in decoder.close():
        yield payload
