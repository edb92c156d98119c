"""Test package for the chat stream client.

Provides test coverage for all components with unit tests for isolated
logic and integration tests for complete streamed turns.

Structure:
    - unit/: Individual function and class tests
    - integration/: Controller against an in-process generation service
    - helpers.py: Frame builders, fake service and transports

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
