"""Main application entry point.

Runs the NiceGUI chat page (default) or an interactive terminal chat.
Environment variables are loaded from .env file.
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit"}


def run_ui() -> None:
    """Serve the chat page with NiceGUI."""
    from nicegui import ui

    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Chat UI available at http://localhost:{port}/")

    ui.run(
        title="Chat",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        reload=False,
    )


async def run_cli() -> None:
    """Chat in the terminal until EOF, Ctrl+C or an exit command.

    Ctrl+C cancels the response in flight before exiting.
    """
    from src.streaming.controller import ChatStreamController
    from src.ui.terminal import TerminalRenderer

    controller = ChatStreamController()
    controller.subscribe(TerminalRenderer())
    logger.info(f"Session {controller.session_id}")

    while True:
        try:
            text = await asyncio.to_thread(input, "you> ")
        except (EOFError, KeyboardInterrupt):
            break
        if text.strip().lower() in EXIT_COMMANDS:
            break
        task = controller.start(text)
        if task is None:
            continue
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            controller.cancel()
            raise


def main() -> None:
    """Application entry point.

    Set RUN_MODE=cli to chat in the terminal instead of the browser.
    Default is the NiceGUI page.
    """
    mode = os.getenv("RUN_MODE", "ui").lower()

    logger.info(f"Starting chat client in {mode} mode")

    if mode == "cli":
        try:
            asyncio.run(run_cli())
        except KeyboardInterrupt:
            logger.info("Shutting down...")
    else:
        run_ui()


if __name__ == "__main__":
    main()
