from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from ..models.response import FAILURE_MESSAGE

DIALOG_TITLE = "AI Fix Suggestion"
LOADING_MESSAGE = "[cyan]Analyzing code and generating solution...[/cyan] [dim](Ctrl-C to close)[/dim]"
COPIED_MESSAGE = "Code copied!"
CLIPBOARD_ERROR_MESSAGE = "Could not access the clipboard."

def show_dialog_header(console: Console, language: str, error: str):
    first_line = error.strip().splitlines()[0] if error.strip() else ""
    body = Text.assemble(
        ("Language: ", "dim"), (language, "bold cyan"), "\n",
        ("Error: ", "dim"), (first_line, "red"),
    )
    console.print(Panel(body, title=f"[bold blue]⚡ {DIALOG_TITLE}[/bold blue]", title_align="left", border_style="blue"))

def show_suggestion(console: Console, renderable):
    console.print(Panel(renderable, title=f"[bold blue]{DIALOG_TITLE}[/bold blue]", title_align="left",
                        border_style="#313244", padding=(1, 2)))

def notify_success(console: Console, message: str):
    console.print(f"[bold green]✓ {message}[/bold green]")

def notify_error(console: Console, message: str):
    console.print(f"[bold red]✗ {message}[/bold red]")

def show_closed(console: Console):
    console.print("[dim]Dialog closed.[/dim]")

def show_prompt(console: Console, prompt: str):
    console.print(Panel(Syntax(prompt.strip(), "markdown", theme="github-dark", word_wrap=True),
                        title="Prompt", border_style="yellow"))
