"""Pydantic models for the chat stream client.

Provides type safety and validation for wire payloads and UI-facing state.

Models:
    - Message: Individual entry in the conversation log
    - ChatStreamRequest: Outgoing request payload
    - StreamFrame: Incoming frame payload
    - ContentEvent / DoneEvent / ErrorEvent: Interpreted stream events
    - ChatSnapshot: Immutable log view published to subscribers
"""

from src.models.schemas import (
    ChatSnapshot,
    ChatStreamRequest,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    Message,
    Role,
    StreamEvent,
    StreamFrame,
    StreamState,
)

__all__ = [
    "ChatSnapshot",
    "ChatStreamRequest",
    "ContentEvent",
    "DoneEvent",
    "ErrorEvent",
    "Message",
    "Role",
    "StreamEvent",
    "StreamFrame",
    "StreamState",
]
