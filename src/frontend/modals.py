"""Modal dialogs and the prompt adapter for the feed viewer."""

from __future__ import annotations

from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class PromptScreen(ModalScreen[Optional[str]]):
    """Ask the user for one line of text."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self._message, classes="modal-title", markup=False),
            Input(placeholder="keyword or regex", id="prompt-input"),
            Horizontal(
                Button("OK", id="prompt-ok", variant="success"),
                Button("Cancel", id="prompt-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "prompt-ok":
            self.dismiss(self.query_one("#prompt-input", Input).value)
        else:
            self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no confirmation."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self._message, classes="modal-title", markup=False),
            Horizontal(
                Button("OK", id="confirm-ok", variant="error"),
                Button("Cancel", id="confirm-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-ok")


class ModalPrompts:
    """PromptPort backed by modal screens and notifications.

    prompt() and confirm() wait for the screen to be dismissed, so they must
    run inside a worker.
    """

    def __init__(self, app: App) -> None:
        self._app = app

    async def prompt(self, message: str) -> Optional[str]:
        return await self._app.push_screen_wait(PromptScreen(message))

    async def confirm(self, message: str) -> bool:
        return bool(await self._app.push_screen_wait(ConfirmScreen(message)))

    def alert(self, message: str) -> None:
        self._app.notify(message, title="listblock", severity="error", markup=False)
