"""Error taxonomy for the streamed chat client.

Transport, protocol and upstream failures are normalized by the controller
into a single user-facing message. The exception keeps the real cause for
logging.
"""


class ChatStreamError(Exception):
    """Base class for failures of a streamed chat turn."""

    pass


class TransportError(ChatStreamError):
    """Raised on connection failures, timeouts and non-success responses."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(ChatStreamError):
    """Raised when the response body does not follow the frame protocol."""

    pass


class MalformedFrameError(ProtocolError):
    """Raised when a frame payload is not a valid stream record."""

    def __init__(self, message: str, payload: str) -> None:
        super().__init__(message)
        self.payload = payload


class UpstreamError(ChatStreamError):
    """Raised when the generation service reports an error frame."""

    pass


class UserInputError(ChatStreamError):
    """Raised for empty or whitespace-only submissions."""

    pass


class LogStateError(RuntimeError):
    """Raised when the conversation log is driven out of order."""

    pass
