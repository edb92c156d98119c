"""Integration tests for components working together as a system.

No mocks for core functionality - the real decoder, interpreter and log run
under the controller.

Coverage:
    - Full streamed turns against a FastAPI generation service over ASGI
    - Upstream, protocol and transport failures
    - Cancellation timing with httpx MockTransport

No external services required.
"""
