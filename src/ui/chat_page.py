"""NiceGUI chat interface bound to a streaming controller."""

import logging

from nicegui import ui

from src.models.schemas import ChatSnapshot, Message, Role
from src.streaming.controller import ChatStreamController

logger = logging.getLogger(__name__)

STREAMING_CURSOR = "▌"


def display_text(message: Message) -> str:
    """Text to show for a message, with a cursor while it is streaming."""
    if message.in_progress:
        return f"{message.text}{STREAMING_CURSOR}"
    return message.text


def is_live_update(previous: tuple[Message, ...], current: tuple[Message, ...]) -> bool:
    """Whether `current` only changes the text of the streaming message in `previous`."""
    return (
        bool(current)
        and len(current) == len(previous)
        and current[-1].in_progress
        and previous[-1].in_progress
        and current[:-1] == previous[:-1]
    )


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    controller = ChatStreamController()

    messages_container: ui.column
    response_label: ui.label | None = None
    rendered: tuple[Message, ...] = ()
    input_field: ui.input
    send_btn: ui.button
    stop_btn: ui.button

    def render_message(message: Message) -> ui.label:
        is_user = message.role is Role.USER
        with ui.chat_message(
            name="You" if is_user else "Assistant",
            sent=is_user,
        ).classes("w-full"):
            return ui.label(display_text(message))

    def refresh_messages(messages: tuple[Message, ...]) -> None:
        nonlocal response_label
        messages_container.clear()
        response_label = None
        with messages_container:
            for message in messages:
                label = render_message(message)
                if message.in_progress:
                    response_label = label

    def on_snapshot(snapshot: ChatSnapshot) -> None:
        nonlocal rendered
        if response_label is not None and is_live_update(rendered, snapshot.messages):
            response_label.set_text(display_text(snapshot.messages[-1]))
        else:
            refresh_messages(snapshot.messages)
        rendered = snapshot.messages
        send_btn.set_enabled(not snapshot.busy)
        stop_btn.set_visibility(snapshot.busy)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or controller.busy:
            return
        input_field.value = ""
        await controller.send(text)

    def stop_message() -> None:
        if controller.cancel():
            ui.notify("Response cancelled", type="warning")

    # === UI Layout ===
    with ui.column().classes("w-full max-w-3xl mx-auto p-4 gap-4"):
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("Chat").classes("text-lg font-semibold")
            ui.label(controller.session_id[:8].upper()).classes("text-xs font-mono")

        messages_container = ui.column().classes("w-full gap-2")

        with ui.row().classes("w-full items-center gap-2"):
            input_field = (
                ui.input(placeholder="Ask about skills, experience, projects...")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message)
            stop_btn = ui.button(icon="stop", on_click=stop_message)

    controller.subscribe(on_snapshot)
    ui.context.client.on_disconnect(controller.cancel)
    logger.debug(f"Chat page ready for session {controller.session_id[:8]}")

