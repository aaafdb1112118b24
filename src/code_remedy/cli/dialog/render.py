"""
Markdown rendering for remediation suggestions.

Headings, bold text, lists and inline code get a fixed look through THEME.
Horizontal rules are dropped. Every fenced code block is numbered in a titled
panel so the user can pick it from the dialog menu and copy it.
"""
from typing import List

from markdown_it import MarkdownIt
from rich.console import Console, ConsoleOptions, RenderResult
from rich.markdown import CodeBlock, HorizontalRule, Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.theme import Theme

CODE_THEME = "vim"

THEME = Theme({
    "markdown.h1": "bold bright_magenta",
    "markdown.h2": "bold bright_magenta",
    "markdown.h3": "bold magenta",
    "markdown.h4": "bold bright_blue",
    "markdown.strong": "bold bright_blue",
    "markdown.code": "bold white on #232334",
    "markdown.item.bullet": "bright_blue",
    "markdown.paragraph": "grey82",
    "markdown.item": "grey89",
})


class HiddenRule(HorizontalRule):
    """Horizontal rules are noise between the suggestion's sections."""

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield from ()


class CopyableCodeBlock(CodeBlock):
    """A fenced block shown in a numbered panel that matches a copy action."""

    @classmethod
    def create(cls, markdown: "RemediationMarkdown", token) -> "CopyableCodeBlock":
        block = super().create(markdown, token)
        markdown.block_count += 1
        block.index = markdown.block_count
        return block

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        code = str(self.text).rstrip()
        syntax = Syntax(code, self.lexer_name, theme=self.theme, word_wrap=True, background_color="default")
        yield Panel(
            syntax,
            title=f"[bold cyan]Code block {self.index}[/bold cyan]",
            subtitle="[dim]copy from the menu below[/dim]",
            title_align="left",
            subtitle_align="right",
            border_style="#313244",
        )


class RemediationMarkdown(Markdown):
    elements = {
        **Markdown.elements,
        "fence": CopyableCodeBlock,
        "code_block": CopyableCodeBlock,
        "hr": HiddenRule,
    }

    def __init__(self, markup: str, **kwargs):
        kwargs.setdefault("code_theme", CODE_THEME)
        super().__init__(markup, **kwargs)
        self.block_count = 0

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        self.block_count = 0
        yield from super().__rich_console__(console, options)


def extract_code_blocks(text: str) -> List[str]:
    """Code of every fenced or indented block, in the order they are rendered."""
    parser = MarkdownIt().enable("strikethrough").enable("table")
    return [
        token.content.rstrip("\n")
        for token in parser.parse(text)
        if token.type in ("fence", "code_block")
    ]
