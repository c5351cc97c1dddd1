from __future__ import annotations

import re
from typing import Callable

from loguru import logger

from lsp_echohint.domain import BufferId, EchoHint, Fragment, Highlight
from lsp_echohint.interfaces import ieditor, irenderer, isyntaxtree

VALUE_MAX_LENGTH = 20
VALUE_TRUNCATED_LENGTH = 17
ELLIPSIS = "..."

_NEWLINE_INDENT_RE = re.compile(r"\n *")

DisplayFunction = Callable[[int, list[EchoHint]], "list[Fragment] | None"]


def trim_label(label: str) -> str:
    # Some language servers (e.g. Rust Analyzer) return hints with colons to
    # represent type annotations (leading colon) or parameter names (trailing
    # colon). They are not needed outside of the buffer.
    if label.startswith(":"):
        label = label[1:]
    if label.endswith(":"):
        label = label[:-1]
    return label.strip()


def shorten_value(text: str) -> str:
    if len(text) > VALUE_MAX_LENGTH or "\n" in text:
        return _NEWLINE_INDENT_RE.sub(" ", text)[:VALUE_TRUNCATED_LENGTH] + ELLIPSIS
    return text


def value_hint(
    syntax_tree: isyntaxtree.ISyntaxTree | None,
    buffer_id: BufferId | None,
    line: int,
    character: int,
) -> str | None:
    """Find the expression a `value: type` hint is for.

    Looks up the syntax node just before the hint position. Long or multiline
    values are shortened to keep the echo line readable.
    """
    if syntax_tree is None or buffer_id is None:
        return None

    row, column = line - 1, character - 1
    if row < 0 or column < 0:
        return None

    text = syntax_tree.node_text(buffer_id, row, column)
    if text is None:
        return None
    return shorten_value(text)


class EchoRenderer(irenderer.IHintRenderer):
    """Default display of inlay hints.

    - cleans up hints of punctuation (leading and trailing colons)
    - shows the name of the value a type hint is for, if syntax tree is available
    - highlights (roughly) where the cursor is by highlighting the nearest
      delimiter
    """

    def __init__(
        self,
        editor: ieditor.IEditor,
        syntax_tree: isyntaxtree.ISyntaxTree | None = None,
    ) -> None:
        self.editor = editor
        self.syntax_tree = syntax_tree

    def render(self, line: int, hints: list[EchoHint]) -> list[Fragment]:
        _, col = self.editor.get_cursor()
        buffer_id = self.editor.current_buffer()

        last = 0
        prefix = "["
        fragments: list[Fragment] = []

        for hint in hints:
            at_cursor = last <= col < hint.character
            fragments.append((prefix, Highlight.CURSOR if at_cursor else Highlight.NORMAL))
            fragments.append((" ", Highlight.NORMAL))

            label = trim_label(hint.label)
            if hint.is_type:
                value = value_hint(self.syntax_tree, buffer_id, line, hint.character)
                if value is not None:
                    fragments.append((value, Highlight.IDENTIFIER))
                    fragments.append((": ", Highlight.DELIMITER))
                fragments.append((label, Highlight.TYPE))
            else:
                fragments.append((label, Highlight.IDENTIFIER))

            fragments.append((" ", Highlight.NORMAL))
            last = hint.character
            prefix = "|"

        fragments.append(("]", Highlight.CURSOR if last <= col else Highlight.NORMAL))
        return fragments


class FunctionRenderer(irenderer.IHintRenderer):
    # adapts user-provided display function to renderer interface
    def __init__(self, display: DisplayFunction) -> None:
        self.display = display

    def render(self, line: int, hints: list[EchoHint]) -> list[Fragment] | None:
        fragments = self.display(line, hints)
        if fragments is None:
            logger.trace(f"Display function returned nothing for line {line}")
            return None
        return [(text, highlight) for text, highlight in fragments]


__all__ = [
    "DisplayFunction",
    "EchoRenderer",
    "FunctionRenderer",
    "shorten_value",
    "trim_label",
    "value_hint",
]
