from typing import Any

import click

from lsp_echohint import user_messages
from lsp_echohint.domain import Fragment, Highlight
from lsp_echohint.interfaces import idisplay

# <highlight group: click.style kwargs>
DEFAULT_STYLES: dict[str, dict[str, Any]] = {
    Highlight.CURSOR: {"reverse": True},
    Highlight.NORMAL: {},
    Highlight.IDENTIFIER: {"fg": "cyan"},
    Highlight.DELIMITER: {"fg": "bright_black"},
    Highlight.TYPE: {"fg": "green"},
    Highlight.ERROR: {"fg": "red", "bold": True},
}


class TerminalEchoArea(idisplay.IDisplaySurface):
    def __init__(
        self, styles: dict[str, dict[str, Any]] | None = None, color: bool | None = None
    ) -> None:
        self.styles = styles if styles is not None else DEFAULT_STYLES
        self.color = color
        self.last_fragments: list[Fragment] = []

    def format(self, fragments: list[Fragment]) -> str:
        return "".join(
            click.style(text, **self.styles.get(highlight, {})) for text, highlight in fragments
        )

    def echo(self, fragments: list[Fragment]) -> None:
        self.last_fragments = list(fragments)
        click.echo(self.format(fragments), color=self.color)

    def show_user_message(self, message: str, message_type: user_messages.UserMessageType) -> None:
        highlight = (
            Highlight.ERROR
            if message_type == user_messages.UserMessageType.ERROR
            else Highlight.NORMAL
        )
        click.echo(self.format([(message, highlight)]), err=True, color=self.color)


__all__ = ["DEFAULT_STYLES", "TerminalEchoArea"]
