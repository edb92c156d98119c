"""Maps raw frame payloads to stream events."""

from pydantic import ValidationError

from src.models.schemas import ContentEvent, DoneEvent, ErrorEvent, StreamEvent, StreamFrame
from src.streaming.errors import MalformedFrameError


def interpret(payload: str) -> StreamEvent | None:
    """Interpret one frame payload.

    Precedence: `error` wins over everything, then a truthy `done`, then
    non-empty `content`. A frame with none of them is a heartbeat.

    Args:
        payload: JSON text following the `data: ` marker.

    Returns:
        The event carried by the frame, or None for a heartbeat.

    Raises:
        MalformedFrameError: If the payload is not a valid frame object.
    """
    try:
        frame = StreamFrame.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedFrameError(
            f"Malformed frame payload ({e.error_count()} errors)", payload
        ) from e

    if frame.error is not None:
        return ErrorEvent(message=frame.error)
    if frame.done:
        return DoneEvent()
    if frame.content:
        return ContentEvent(text=frame.content)
    return None
