"""
RemediationDialog tests.

Verifies:
✔ OPENING -> LOADING -> DISPLAYED -> CLOSING -> CLOSED on success
✔ Exactly one service call with the editor snapshot
✔ Empty result shows "No suggestion available."
✔ Failures close the dialog with a notification, never stuck in LOADING
✔ Closing while loading cancels the call; late results are discarded
✔ Code blocks are copied to the clipboard
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pyperclip
import pytest
from prompt_toolkit.clipboard import InMemoryClipboard
from rich.console import Console

from code_remedy.cli.dialog import DialogState, RemediationDialog
from code_remedy.cli.dialog.render import THEME
from code_remedy.core.editor_store import EditorStore
from code_remedy.core.exceptions import NoErrorToFix, RemediationFailure
from code_remedy.models.request import RemediationRequest
from code_remedy.models.response import RemediationResponse

SUGGESTION = "## Fix\nuse parentheses\n\n```python\nprint('hi')\n```\n"


# ─────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────


def make_store(error="SyntaxError: unexpected EOF"):
    return EditorStore(code="print('hi'", language="python", error=error)


class UnavailableClipboard(InMemoryClipboard):
    def set_text(self, text):
        raise pyperclip.PyperclipException("no backend")


def make_service(result=None, error=None):
    service = MagicMock()
    if error is not None:
        service.remediate = AsyncMock(side_effect=error)
    else:
        service.remediate = AsyncMock(return_value=result)
    return service


def make_dialog(service, store=None, choices=("Close",), interactive=True, clipboard=None):
    console = Console(record=True, width=100, theme=THEME, color_system=None)
    dialog = RemediationDialog(
        store or make_store(),
        service,
        console=console,
        clipboard=clipboard or InMemoryClipboard(),
        chooser=AsyncMock(side_effect=list(choices)),
        transition_delay=0,
        interactive=interactive,
    )
    return dialog


def output(dialog):
    return dialog.console.export_text()


# ─────────────────────────────────────────────────────
# Successful flow
# ─────────────────────────────────────────────────────


class TestDisplayed:
    @pytest.mark.asyncio
    async def test_full_life_cycle(self):
        dialog = make_dialog(make_service(RemediationResponse(SUGGESTION)))
        response = await dialog.run()

        assert response.content == SUGGESTION
        assert dialog.state is DialogState.CLOSED
        assert dialog.machine.history == list(DialogState)
        assert "use parentheses" in output(dialog)

    @pytest.mark.asyncio
    async def test_single_call_with_snapshot(self):
        service = make_service(RemediationResponse(SUGGESTION))
        await make_dialog(service).run()
        service.remediate.assert_awaited_once_with(
            RemediationRequest(code="print('hi'", error="SyntaxError: unexpected EOF", language="python")
        )

    @pytest.mark.asyncio
    async def test_empty_result_shows_sentinel(self):
        dialog = make_dialog(make_service(RemediationResponse("")))
        await dialog.run()
        assert "No suggestion available." in output(dialog)
        assert DialogState.DISPLAYED in dialog.machine.history

    @pytest.mark.asyncio
    async def test_copy_code_block(self):
        dialog = make_dialog(make_service(RemediationResponse(SUGGESTION)), choices=("Copy code block 1", "Close"))
        await dialog.run()

        assert dialog.clipboard.get_data().text == "print('hi')"
        assert "Code copied!" in output(dialog)
        assert dialog.chooser.await_args_list[0].args[0] == ["Copy code block 1", "Close"]
        assert dialog.chooser.await_count == 2

    @pytest.mark.asyncio
    async def test_escape_closes(self):
        dialog = make_dialog(make_service(RemediationResponse(SUGGESTION)), choices=(None,))
        await dialog.run()
        assert dialog.state is DialogState.CLOSED

    @pytest.mark.asyncio
    async def test_non_interactive_skips_menu(self):
        dialog = make_dialog(make_service(RemediationResponse(SUGGESTION)), interactive=False)
        await dialog.run()
        dialog.chooser.assert_not_awaited()
        assert dialog.state is DialogState.CLOSED

    @pytest.mark.asyncio
    async def test_clipboard_unavailable_keeps_dialog_open(self):
        dialog = make_dialog(
            make_service(RemediationResponse(SUGGESTION)),
            choices=("Copy code block 1", "Close"),
            clipboard=UnavailableClipboard(),
        )
        response = await dialog.run()

        assert response.content == SUGGESTION
        assert "Could not access the clipboard." in output(dialog)
        assert "Code copied!" not in output(dialog)
        assert dialog.chooser.await_count == 2
        assert dialog.state is DialogState.CLOSED

    def test_copy_out_of_range(self):
        dialog = make_dialog(make_service())
        with pytest.raises(ValueError):
            dialog.copy_code_block(1)


# ─────────────────────────────────────────────────────
# Failures and teardown
# ─────────────────────────────────────────────────────


class TestFailure:
    @pytest.mark.asyncio
    async def test_failure_closes_with_notification(self):
        dialog = make_dialog(make_service(error=RemediationFailure("401 invalid api key")))
        response = await dialog.run()

        assert response is None
        assert dialog.state is DialogState.CLOSED
        assert DialogState.DISPLAYED not in dialog.machine.history
        assert "AI failed to fix the code." in output(dialog)
        dialog.chooser.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_error_also_closes(self):
        dialog = make_dialog(make_service(error=KeyError("choices")))
        await dialog.run()
        assert dialog.state is DialogState.CLOSED
        assert "AI failed to fix the code." in output(dialog)

    @pytest.mark.asyncio
    async def test_no_error_in_store(self):
        service = make_service(RemediationResponse(SUGGESTION))
        dialog = make_dialog(service, store=make_store(error=None))
        with pytest.raises(NoErrorToFix):
            await dialog.run()
        service.remediate.assert_not_called()
        assert dialog.state is DialogState.CLOSED


class TestClosingWhileLoading:
    @pytest.mark.asyncio
    async def test_close_cancels_pending_call(self):
        never = asyncio.Event()

        async def slow(request):
            await never.wait()
            return RemediationResponse(SUGGESTION)

        service = MagicMock()
        service.remediate = slow
        dialog = make_dialog(service)

        task = dialog.start()
        waiter = asyncio.create_task(dialog.wait_for_result())
        await asyncio.sleep(0)
        await dialog.close()

        assert await waiter is None
        assert task.cancelled()
        assert dialog.state is DialogState.CLOSED
        assert "use parentheses" not in output(dialog)

    @pytest.mark.asyncio
    async def test_late_result_is_discarded(self):
        dialog = make_dialog(make_service())
        await dialog.close()

        assert dialog.deliver(RemediationResponse("late suggestion")) is None
        assert dialog.state is DialogState.CLOSED
        assert dialog.response is None
        assert "late suggestion" not in output(dialog)

    @pytest.mark.asyncio
    async def test_late_failure_is_silent(self):
        dialog = make_dialog(make_service())
        await dialog.close()
        await dialog.fail(RemediationFailure("too late"))
        assert "AI failed to fix the code." not in output(dialog)

    @pytest.mark.asyncio
    async def test_close_twice(self):
        dialog = make_dialog(make_service())
        await asyncio.gather(dialog.close(), dialog.close())
        assert dialog.machine.history == [DialogState.OPENING, DialogState.CLOSING, DialogState.CLOSED]

    @pytest.mark.asyncio
    async def test_interrupt_while_loading_closes(self):
        never = asyncio.Event()

        async def slow(request):
            await never.wait()

        service = MagicMock()
        service.remediate = slow
        dialog = make_dialog(service)

        task = dialog.start()
        waiter = asyncio.create_task(dialog.wait_for_result())
        await asyncio.sleep(0)
        dialog._on_interrupt()

        assert await waiter is None
        await dialog.close()
        assert task.cancelled()
        assert dialog.state is DialogState.CLOSED
        assert dialog.machine.history.count(DialogState.CLOSING) == 1

    def test_loading_message_mentions_how_to_close(self):
        from code_remedy.cli import display
        assert "Ctrl-C" in display.LOADING_MESSAGE
