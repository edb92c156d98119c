"""Streamed chat consumer for `data: <json>` framed HTTP responses.

Turns a chunked response from the generation service into an observable,
append-only conversation log.

Responsibilities:
    - Session token generation
    - Incremental UTF-8 and frame reassembly from byte chunks
    - Interpretation of content, done and error frames
    - Delta accumulation into the in-progress assistant message
    - Request lifecycle with cancellation and failure normalization

Has no knowledge of any UI toolkit. Presentation layers subscribe to snapshots.
"""

from src.streaming.accumulator import ConversationLog
from src.streaming.config import ClientConfig, get_client_config
from src.streaming.controller import ChatStreamController
from src.streaming.decoder import FrameDecoder, decode_frames
from src.streaming.errors import (
    ChatStreamError,
    LogStateError,
    MalformedFrameError,
    ProtocolError,
    TransportError,
    UpstreamError,
    UserInputError,
)
from src.streaming.interpreter import interpret
from src.streaming.session import new_session_token

__all__ = [
    "ChatStreamController",
    "ChatStreamError",
    "ClientConfig",
    "ConversationLog",
    "FrameDecoder",
    "LogStateError",
    "MalformedFrameError",
    "ProtocolError",
    "TransportError",
    "UpstreamError",
    "UserInputError",
    "decode_frames",
    "get_client_config",
    "interpret",
    "new_session_token",
]
