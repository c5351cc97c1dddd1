from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from loguru import logger

from lsp_echohint.domain import BufferId
from lsp_echohint.interfaces import ieditor


@dataclass
class Buffer:
    buffer_id: int
    uri: str
    text: str
    language_id: str
    version: int = 0

    @property
    def line_count(self) -> int:
        return len(self.text.splitlines())


class InMemoryEditor(ieditor.IEditor):
    def __init__(self) -> None:
        self.buffers: dict[int, Buffer] = {}
        self._current_buffer: int | None = None
        # line is 1-based, column 0-based
        self._cursor: tuple[int, int] = (1, 0)
        self._buffer_ids = itertools.count(1)
        self._buffer_closed_callbacks: list[Callable[[BufferId], None]] = []

    def open_buffer(self, file_path: Path, text: str, language_id: str) -> Buffer:
        buffer = Buffer(
            buffer_id=next(self._buffer_ids),
            uri=file_path.absolute().as_uri(),
            text=text,
            language_id=language_id,
        )
        self.buffers[buffer.buffer_id] = buffer
        self._current_buffer = buffer.buffer_id
        self._cursor = (1, 0)
        logger.trace(f"Opened buffer {buffer.buffer_id}: {buffer.uri}")
        return buffer

    def close_buffer(self, buffer_id: int) -> None:
        self.buffers.pop(buffer_id, None)
        if self._current_buffer == buffer_id:
            self._current_buffer = None
        for callback in self._buffer_closed_callbacks:
            callback(buffer_id)

    def register_buffer_closed_callback(self, callback: Callable[[BufferId], None]) -> None:
        self._buffer_closed_callbacks.append(callback)

    def get_buffer(self, buffer_id: BufferId) -> Buffer | None:
        return self.buffers.get(buffer_id, None)

    def set_current_buffer(self, buffer_id: int) -> None:
        if buffer_id not in self.buffers:
            raise KeyError(f"Buffer {buffer_id} is not opened")
        self._current_buffer = buffer_id

    def set_cursor(self, line: int, column: int) -> None:
        self._cursor = (line, column)

    def current_buffer(self) -> BufferId | None:
        return self._current_buffer

    def get_cursor(self) -> tuple[int, int]:
        return self._cursor

    def is_buffer_valid(self, buffer_id: BufferId) -> bool:
        return buffer_id in self.buffers


__all__ = ["Buffer", "InMemoryEditor"]
