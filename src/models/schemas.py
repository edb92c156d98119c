from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    """Speaker of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class StreamState(str, Enum):
    """Lifecycle states of a streamed chat turn."""

    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


class Message(BaseModel):
    """A single entry in the conversation log.

    Attributes:
        role: Who produced the message.
        text: The message text as currently known.
        in_progress: Whether the assistant is still streaming into it.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str = ""
    in_progress: bool = False


class ChatStreamRequest(BaseModel):
    """Request payload for the streaming chat endpoint.

    Attributes:
        question: User's question, stripped of surrounding whitespace.
        session_id: Conversation token shared by every request of a session.
    """

    question: str = Field(..., min_length=1)
    session_id: str = Field(..., min_length=1)

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v: str) -> str:
        """Strip whitespace from question before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class StreamFrame(BaseModel):
    """Payload of one `data: ` frame in the response stream.

    All keys are optional; a frame carrying none of them is a heartbeat.

    Attributes:
        content: Text delta to append to the assistant message.
        done: Terminal marker for the response.
        error: Failure reported by the generation service.
    """

    model_config = ConfigDict(extra="ignore")

    content: str | None = None
    done: bool | None = None
    error: str | None = None


class ContentEvent(BaseModel):
    """A text delta for the in-progress assistant message."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["content"] = "content"
    text: str


class DoneEvent(BaseModel):
    """The generation service finished the response."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    """The generation service reported a failure."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    message: str


StreamEvent = ContentEvent | DoneEvent | ErrorEvent


class ChatSnapshot(BaseModel):
    """Immutable view of the conversation handed to subscribers.

    Attributes:
        messages: The conversation log in order.
        busy: Whether a request is in flight.
        state: Current state of the stream session.
    """

    model_config = ConfigDict(frozen=True)

    messages: tuple[Message, ...] = ()
    busy: bool = False
    state: StreamState = StreamState.IDLE
