from __future__ import annotations

from typing import Protocol

from lsp_echohint.domain import Fragment


class IDisplaySurface(Protocol):
    def echo(self, fragments: list[Fragment]) -> None:
        # replaces currently shown line, empty list clears it
        ...
