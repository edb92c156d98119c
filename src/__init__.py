"""Chat Stream Client - incremental consumer for streamed chat responses.

Combines HTTPX for chunked HTTP streaming, Pydantic for data validation,
and NiceGUI for visualization.

Components:
    - streaming: Frame decoding, event interpretation, accumulation and session control
    - models: Wire payloads, events and conversation snapshots
    - ui: Web page and terminal bindings
"""

__version__ = "0.1.0"
