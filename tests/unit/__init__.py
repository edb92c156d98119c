"""Unit tests for individual components in isolation.

Ensures fast execution with no network and no event loop where possible.

Coverage:
    - streaming/: Decoder, interpreter, log, session tokens, configuration
    - ui/: Terminal rendering of snapshots

Follows single responsibility per test function. Leverages pytest-check for
multiple assertions per test.
"""
