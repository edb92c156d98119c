"""Client configuration with environment variable loading.

Pydantic-based configuration for the streamed chat client.
Points at any generation service that speaks the `data: <json>` frame protocol.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_GREETING = (
    "Hello! I'm an AI assistant. I can answer questions about experience, "
    "skills and projects. What would you like to know?"
)


def _timeout_from_env() -> float | None:
    value = os.getenv("CHAT_TIMEOUT_SECONDS", "").strip()
    return float(value) if value else None


class ClientConfig(BaseModel):
    """Configuration for the chat stream client.

    Attributes:
        base_url: Base URL of the generation service.
        stream_path: Path of the streaming chat endpoint.
        timeout: Transport timeout in seconds (None disables it).
        greeting: Assistant message shown before the first turn (empty disables it).
        error_message: Text that replaces a failed assistant message.
        cancelled_message: Text that replaces a cancelled assistant message.
    """

    model_config = ConfigDict(validate_default=True)

    base_url: str = Field(
        default_factory=lambda: os.getenv("CHAT_API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the generation service",
    )
    stream_path: str = Field(
        default_factory=lambda: os.getenv("CHAT_STREAM_PATH", "/api/chat/stream/"),
        description="Path of the streaming chat endpoint",
    )
    timeout: float | None = Field(
        default_factory=_timeout_from_env,
        gt=0,
        description="Transport timeout in seconds, None for no timeout",
    )
    greeting: str = Field(
        default_factory=lambda: os.getenv("CHAT_GREETING", DEFAULT_GREETING),
        description="Initial assistant message",
    )
    error_message: str = Field(
        default="Sorry, I encountered an error. Please try again.",
        min_length=1,
        description="User-facing text for failed responses",
    )
    cancelled_message: str = Field(
        default="Response cancelled.",
        min_length=1,
        description="User-facing text for cancelled responses",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that the base URL is an http(s) URL without trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "Base URL must start with http:// or https://. Set CHAT_API_BASE_URL in .env"
            )
        return v.rstrip("/")

    @field_validator("stream_path")
    @classmethod
    def validate_stream_path(cls, v: str) -> str:
        """Ensure the stream path is absolute."""
        v = v.strip()
        return v if v.startswith("/") else f"/{v}"

    @property
    def stream_url(self) -> str:
        """Full URL of the streaming chat endpoint."""
        return f"{self.base_url}{self.stream_path}"


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If an environment value is invalid.
    """
    return ClientConfig()
