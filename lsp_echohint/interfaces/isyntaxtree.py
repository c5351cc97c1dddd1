from __future__ import annotations

from typing import Protocol

from lsp_echohint.domain import BufferId


class ISyntaxTree(Protocol):
    def node_text(self, buffer_id: BufferId, row: int, column: int) -> str | None:
        # source text of the smallest named node covering 0-based (row, column)
        ...
