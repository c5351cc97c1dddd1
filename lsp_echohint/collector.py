from __future__ import annotations

from loguru import logger
from lsprotocol import types

from lsp_echohint import user_messages
from lsp_echohint.domain import (
    BufferId,
    EchoHint,
    HandlerContext,
    HintBucket,
    echo_hint_from_lsp,
)
from lsp_echohint.interfaces import ieditor, ilanguageclients


def group_hints_by_line(result: list[types.InlayHint]) -> HintBucket:
    hints: HintBucket = {}
    # sort by character position so that hints of each line are gathered in the
    # order they should appear in. `sorted` is stable: hints on the same
    # character keep the order of the response
    for hint in sorted(result, key=lambda item: item.position.character):
        line = hint.position.line + 1
        hints.setdefault(line, []).append(echo_hint_from_lsp(hint))
    return hints


class HintCollector:
    """Handler of textDocument/inlayHint responses.

    Keeps a mapping from line numbers to the hints on that line for each buffer.
    The mapping of a buffer is always replaced as a whole: it is built first and
    then published in one step, so that readers never observe incomplete
    information. It is replaced also if the response is an error, to prevent the
    echo area from getting stuck displaying stale hints.
    """

    def __init__(
        self,
        editor: ieditor.IEditor,
        language_clients: ilanguageclients.ILanguageClients,
        notify_errors: bool = False,
    ) -> None:
        self.editor = editor
        self.language_clients = language_clients
        self.notify_errors = notify_errors

        self.hints_by_buffer: dict[BufferId, HintBucket] = {}
        # <buffer: id of the last applied request>
        self.last_request_by_buffer: dict[BufferId, int] = {}

    def handle_inlay_hint(
        self,
        error: types.ResponseError | None,
        result: list[types.InlayHint] | None,
        ctx: HandlerContext,
    ) -> None:
        buffer_id = ctx.buffer_id
        if buffer_id is None:
            logger.debug("Inlay hint response without buffer, ignore it")
            return

        if not self.editor.is_buffer_valid(buffer_id):
            # buffer is gone, its hints must not outlive it
            logger.trace(f"Buffer {buffer_id} is not valid anymore, drop its hints")
            self.forget_buffer(buffer_id)
            return

        if self._is_outdated(ctx):
            logger.trace(
                f"Drop outdated inlay hint response {ctx.request_id} for buffer {buffer_id}"
            )
            return

        hints: HintBucket = {}
        if error is not None:
            logger.debug(f"Inlay hint request for buffer {buffer_id} failed: {error.message}")
            if self.notify_errors:
                user_messages.error(f"Inlay hints: {error.message}")
        elif result is None:
            logger.trace(f"No inlay hints result for buffer {buffer_id}")
        elif ctx.client_id is None or not self.language_clients.supports_inlay_hints(
            ctx.client_id
        ):
            logger.trace(f"Client {ctx.client_id} doesn't provide inlay hints")
        else:
            hints = group_hints_by_line(result)

        self.hints_by_buffer[buffer_id] = hints
        if ctx.request_id is not None:
            self.last_request_by_buffer[buffer_id] = ctx.request_id
        logger.trace(f"Inlay hints of buffer {buffer_id} updated, {len(hints)} lines")

    def _is_outdated(self, ctx: HandlerContext) -> bool:
        if ctx.request_id is None:
            # no sequencing information, the last response wins
            return False
        last_request_id = self.last_request_by_buffer.get(ctx.buffer_id, None)
        return last_request_id is not None and ctx.request_id < last_request_id

    def get_hints(self, buffer_id: BufferId) -> HintBucket | None:
        return self.hints_by_buffer.get(buffer_id, None)

    def get_line_hints(self, buffer_id: BufferId, line: int) -> list[EchoHint]:
        hints = self.get_hints(buffer_id)
        if hints is None:
            return []
        return hints.get(line, None) or []

    def forget_buffer(self, buffer_id: BufferId) -> None:
        self.hints_by_buffer.pop(buffer_id, None)
        self.last_request_by_buffer.pop(buffer_id, None)


__all__ = ["HintCollector", "group_hints_by_line"]
