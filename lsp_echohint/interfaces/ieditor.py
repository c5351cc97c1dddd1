from __future__ import annotations

from typing import Protocol

from lsp_echohint.domain import BufferId


class IEditor(Protocol):
    def current_buffer(self) -> BufferId | None: ...

    def get_cursor(self) -> tuple[int, int]:
        # (line, column): line is 1-based, column is 0-based
        ...

    def is_buffer_valid(self, buffer_id: BufferId) -> bool: ...
