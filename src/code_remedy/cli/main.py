import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from ..core.config import Config
from ..core.editor_store import EditorStore
from ..core.exceptions import ConfigurationError, FileServiceError
from ..core.logger import setup_logging
from ..services.ai_service import RemediationService
from ..services.file_service import FileService
from ..utils.prompt_utils import PromptBuilder
from . import display
from .dialog import RemediationDialog
from .dialog.render import THEME

console = Console(theme=THEME)


async def _load_store(cfg: Config, file: str, error: Optional[str], error_file: Optional[str],
                      language: Optional[str]) -> EditorStore:
    """Reads the source (and error) files into a fresh editor store."""
    file_service = FileService(cfg)
    content = await file_service.read_file(Path(file))
    if error is None and error_file:
        error = await file_service.read_file(Path(error_file))
    if error is None and not sys.stdin.isatty():
        error = click.get_text_stream('stdin').read()
    return EditorStore.from_file(Path(file), content, language=language, error=error)


async def _run_dialog(cfg: Config, store: EditorStore):
    async with RemediationService(cfg) as service:
        dialog = RemediationDialog(store, service, console=console, transition_delay=cfg.transition_delay,
                                   interactive=sys.stdin.isatty())
        await dialog.run()


def _load_or_exit(cfg: Config, file: str, error: Optional[str], error_file: Optional[str],
                  language: Optional[str]) -> EditorStore:
    try:
        store = asyncio.run(_load_store(cfg, file, error, error_file, language))
    except FileServiceError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    if not store.has_error:
        console.print("[red]No error message to fix. Pass --error, --error-file, or pipe the error on stdin.[/red]")
        sys.exit(1)
    return store


@click.group(invoke_without_command=True)
@click.option('--config', '-c', type=click.Path(exists=True), help='Config file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """
    Remedy - ask an AI model to explain and fix a failing piece of code.

    Run `remedy fix script.py --error "..."` to open the fix dialog, or
    `remedy serve` to expose the same operation over HTTP.
    """
    setup_logging(verbose)
    try:
        ctx.obj = Config(config_path=Path(config) if config else None)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error: {e}[/red]")
        sys.exit(1)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--error', '-e', 'error', help='Error message produced by the code')
@click.option('--error-file', type=click.Path(exists=True, dir_okay=False), help='Read the error message from a file')
@click.option('--language', '-l', help='Language of the code (default: inferred from the file extension)')
@click.pass_obj
def fix(cfg: Config, file: str, error: Optional[str], error_file: Optional[str], language: Optional[str]):
    """Open the AI fix dialog for FILE and the error it produced."""
    store = _load_or_exit(cfg, file, error, error_file, language)
    try:
        asyncio.run(_run_dialog(cfg, store))
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--error', '-e', 'error', help='Error message produced by the code')
@click.option('--error-file', type=click.Path(exists=True, dir_okay=False), help='Read the error message from a file')
@click.option('--language', '-l', help='Language of the code (default: inferred from the file extension)')
@click.pass_obj
def prompt(cfg: Config, file: str, error: Optional[str], error_file: Optional[str], language: Optional[str]):
    """Print the prompt that `fix` would send, without calling the model."""
    store = _load_or_exit(cfg, file, error, error_file, language)
    request = store.snapshot().to_request()
    display.show_prompt(console, PromptBuilder(cfg.max_code_chars, cfg.max_error_chars).build(request))


@cli.command()
@click.option('--host', help='Interface to bind (default from config)')
@click.option('--port', type=int, help='Port to listen on (default from config)')
@click.pass_obj
def serve(cfg: Config, host: Optional[str], port: Optional[int]):
    """Serve POST /fix over HTTP."""
    from ..api.server import run_server
    try:
        run_server(cfg, host=host, port=port)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error: {e}[/red]")
        sys.exit(1)


def main():
    cli()

if __name__ == '__main__':
    main()
