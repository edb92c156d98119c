"""Shared helpers for streaming tests.

Helpers:
    - frame: Encode one `data: <json>` frame
    - FakeGenerationService: Scriptable generation service served over ASGI
    - chunked_transport: MockTransport replaying a body in exact chunks
    - wait_until: Poll a condition on the running event loop
    - assert_single_in_progress: In-progress invariant check for snapshots
"""

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from src.models.schemas import ChatSnapshot, Role

TEST_BASE_URL = "http://test"
STREAM_PATH = "/api/chat/stream/"


def frame(**fields: Any) -> bytes:
    """Encode one frame the way the generation service does."""
    return f"data: {json.dumps(fields, ensure_ascii=False)}\n\n".encode()


class FakeGenerationService:
    """In-process stand-in for the generation service.

    Replays `chunks` as the streamed body of every request and records the
    JSON body of each request it receives.
    """

    def __init__(self) -> None:
        self.chunks: list[bytes] = []
        self.status_code = 200
        self.requests: list[dict[str, Any]] = []
        self.app = FastAPI()
        self.app.add_api_route(
            STREAM_PATH, self._stream, methods=["POST"], response_model=None
        )

    async def _stream(self, request: Request) -> StreamingResponse | JSONResponse:
        self.requests.append(await request.json())
        if self.status_code != 200:
            return JSONResponse({"detail": "unavailable"}, status_code=self.status_code)

        async def body() -> AsyncIterator[bytes]:
            for chunk in self.chunks:
                yield chunk

        return StreamingResponse(body(), media_type="text/event-stream")


def chunked_transport(
    chunks: list[bytes],
    gate: asyncio.Event | None = None,
    gate_after: int = 0,
    status_code: int = 200,
) -> httpx.MockTransport:
    """Build a transport that streams `chunks` exactly as given.

    Args:
        chunks: Body chunks, delivered with their boundaries preserved.
        gate: If set, delivery pauses before chunk `gate_after` until the
              event is set.
        gate_after: Index of the first chunk held back by `gate`.
        status_code: Response status code.
    """

    async def body() -> AsyncIterator[bytes]:
        for index, chunk in enumerate(chunks):
            if gate is not None and index == gate_after:
                await gate.wait()
            yield chunk

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers={"Content-Type": "text/event-stream"},
            content=body(),
        )

    return httpx.MockTransport(handler)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until `predicate` holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.001)


def assert_single_in_progress(snapshot: ChatSnapshot) -> None:
    """Check the in-progress invariant on one snapshot."""
    flagged = [i for i, m in enumerate(snapshot.messages) if m.in_progress]
    assert len(flagged) <= 1
    if flagged:
        assert flagged[0] == len(snapshot.messages) - 1
        assert snapshot.messages[-1].role is Role.ASSISTANT


