from __future__ import annotations

from typing import Protocol

from lsp_echohint.domain import EchoHint, Fragment


class IHintRenderer(Protocol):
    def render(self, line: int, hints: list[EchoHint]) -> list[Fragment] | None:
        # None means the display should be cleared
        ...
