import asyncio
import logging
import signal
from typing import Awaitable, Callable, List, Optional

import pyperclip
import questionary
from prompt_toolkit.clipboard import Clipboard
from prompt_toolkit.key_binding import KeyBindings, merge_key_bindings
from rich.console import Console

from .. import display
from .render import THEME, RemediationMarkdown, extract_code_blocks
from .state import DialogState, DialogStateMachine
from ...core.editor_store import EditorStore
from ...models.response import RemediationResponse
from ...services.ai_service import RemediationService

logger = logging.getLogger(__name__)

CLOSE_CHOICE = "Close"

Chooser = Callable[[List[str]], Awaitable[Optional[str]]]


async def ask_action(choices: List[str]) -> Optional[str]:
    """Menu shown under the suggestion. Escape and Ctrl-C both answer None."""
    question = questionary.select(
        "What next?",
        choices=choices,
        default=CLOSE_CHOICE,
        use_indicator=True,
        style=questionary.Style([
            ('pointer', 'bold fg:cyan'),
            ('highlighted', 'fg:green bold'),
        ])
    )
    escape = KeyBindings()

    @escape.add("escape", eager=True)
    def _(event):
        event.app.exit(result=None)

    question.application.key_bindings = merge_key_bindings([question.application.key_bindings, escape])
    return await question.ask_async()


def default_clipboard() -> Clipboard:
    from prompt_toolkit.clipboard.pyperclip import PyperclipClipboard
    return PyperclipClipboard()


class RemediationDialog:
    """
    Terminal dialog that asks for a fix and shows it.

    OPENING snapshots the editor store and starts exactly one service call.
    LOADING shows a spinner until the call settles; Ctrl-C closes the dialog and
    cancels the call. DISPLAYED renders the markdown and offers a copy action per
    code block. A failed call closes the dialog with a notification. Results that
    arrive once the dialog is closing or closed are dropped.
    """

    def __init__(self, store: EditorStore, service: RemediationService, console: Optional[Console] = None,
                 clipboard: Optional[Clipboard] = None, chooser: Chooser = ask_action,
                 transition_delay: float = 0.3, interactive: bool = True):
        self.store = store
        self.service = service
        self.console = console or Console(theme=THEME)
        self._clipboard = clipboard
        self.chooser = chooser
        self.transition_delay = transition_delay
        self.interactive = interactive
        self.machine = DialogStateMachine()
        self.response: Optional[RemediationResponse] = None
        self.code_blocks: List[str] = []
        self._task: Optional[asyncio.Task] = None
        self._closing: Optional[asyncio.Future] = None

    @property
    def state(self) -> DialogState:
        return self.machine.state

    @property
    def clipboard(self) -> Clipboard:
        if self._clipboard is None:
            self._clipboard = default_clipboard()
        return self._clipboard

    def start(self) -> asyncio.Task:
        """OPENING -> LOADING: snapshot the editor and fire the one service call."""
        snapshot = self.store.snapshot()
        display.show_dialog_header(self.console, snapshot.language, snapshot.error)
        self._task = asyncio.create_task(self.service.remediate(snapshot.to_request()))
        self.machine.transition(DialogState.LOADING)
        return self._task

    async def wait_for_result(self) -> Optional[RemediationResponse]:
        """Waits for the call while showing a spinner. Leaves LOADING on every outcome."""
        try:
            with self.console.status(display.LOADING_MESSAGE, spinner="point", spinner_style="cyan"):
                response = await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self.machine.is_dismissed:
                raise
            logger.debug("Dialog closed while loading; pending result abandoned.")
            return None
        except Exception as e:
            await self.fail(e)
            return None
        return self.deliver(response)

    def deliver(self, response: RemediationResponse) -> Optional[RemediationResponse]:
        """LOADING -> DISPLAYED. A stale result (dialog already dismissed) is discarded."""
        if self.state is not DialogState.LOADING:
            logger.debug(f"Discarding remediation result that arrived in state {self.state.name}.")
            return None
        self.machine.transition(DialogState.DISPLAYED)
        self.response = response
        self.code_blocks = extract_code_blocks(response.content)
        with self.console.use_theme(THEME):
            display.show_suggestion(self.console, RemediationMarkdown(response.display_text))
        return response

    async def fail(self, error: Exception):
        if self.machine.is_dismissed:
            logger.debug(f"Ignoring failure after dialog was dismissed: {error}")
            return
        logger.error(f"AI fix error: {error}")
        display.notify_error(self.console, display.FAILURE_MESSAGE)
        await self.close()

    async def close(self):
        """Any state -> CLOSING -> CLOSED. Safe to call repeatedly; every caller waits for CLOSED."""
        if self._closing is None:
            self._closing = asyncio.ensure_future(self._close())
        await self._closing

    async def _close(self):
        if not self.machine.request_close():
            return
        if self._task and not self._task.done():
            self._task.cancel()
        await asyncio.sleep(self.transition_delay)
        self.machine.transition(DialogState.CLOSED)
        display.show_closed(self.console)

    def copy_code_block(self, index: int) -> Optional[str]:
        """Copies the 1-based code block to the clipboard. Returns None if the clipboard is unavailable."""
        if not 1 <= index <= len(self.code_blocks):
            raise ValueError(f"No code block {index}; the suggestion has {len(self.code_blocks)}.")
        text = self.code_blocks[index - 1]
        try:
            self.clipboard.set_text(text)
        except pyperclip.PyperclipException as e:
            logger.warning(f"Clipboard copy failed: {e}")
            display.notify_error(self.console, display.CLIPBOARD_ERROR_MESSAGE)
            return None
        display.notify_success(self.console, display.COPIED_MESSAGE)
        return text

    def _choices(self) -> List[str]:
        return [f"Copy code block {i}" for i in range(1, len(self.code_blocks) + 1)] + [CLOSE_CHOICE]

    async def interact(self):
        """DISPLAYED menu loop until the user closes the dialog."""
        while self.state is DialogState.DISPLAYED:
            choices = self._choices()
            choice = await self.chooser(choices)
            if choice is None or choice == CLOSE_CHOICE:
                await self.close()
            else:
                self.copy_code_block(choices.index(choice) + 1)

    def _on_interrupt(self):
        if self._closing is None:
            self._closing = asyncio.ensure_future(self._close())

    async def run(self) -> Optional[RemediationResponse]:
        """Opens the dialog and returns the shown response, or None if it never got that far."""
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self._on_interrupt)
            handler_installed = True
        except (NotImplementedError, RuntimeError):
            handler_installed = False

        try:
            self.start()
            response = await self.wait_for_result()
            if handler_installed:
                loop.remove_signal_handler(signal.SIGINT)
                handler_installed = False
            if response is not None and self.interactive:
                await self.interact()
            return response
        finally:
            if handler_installed:
                loop.remove_signal_handler(signal.SIGINT)
            await self.close()
