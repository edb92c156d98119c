"""Presentation bindings for the chat stream controller.

Thin layers that subscribe to conversation snapshots and forward user input.

Responsibilities:
    - NiceGUI chat page with send and stop controls
    - Terminal renderer for the interactive CLI

Contains no streaming logic. Everything goes through ChatStreamController.
"""
