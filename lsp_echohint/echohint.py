from __future__ import annotations

from typing import Callable

from loguru import logger
from lsprotocol import types

from lsp_echohint import config_models, renderer
from lsp_echohint.collector import HintCollector
from lsp_echohint.domain import BufferId, ClientId, HandlerContext
from lsp_echohint.interfaces import (
    idisplay,
    ieditor,
    ilanguageclients,
    irenderer,
    isyntaxtree,
)

ResponseHandler = Callable[
    [types.ResponseError | None, list[types.InlayHint] | None, HandlerContext], None
]


class EchoHint:
    """Shows inlay hints of the cursor line in the echo area.

    Host calls event methods:
    - registered protocol handlers (`handlers`) when a response arrives
    - `on_cursor_hold` when cursor was idle for host-configured time
    - `on_lsp_attach` when language server is attached to a buffer
    - `on_buffer_closed` when buffer is destroyed
    """

    def __init__(
        self,
        config: config_models.EchoHintConfig,
        editor: ieditor.IEditor,
        language_clients: ilanguageclients.ILanguageClients,
        display: idisplay.IDisplaySurface,
        syntax_tree: isyntaxtree.ISyntaxTree | None = None,
    ) -> None:
        self.config = config
        self.editor = editor
        self.language_clients = language_clients
        self.display = display

        self.collector = HintCollector(
            editor=editor,
            language_clients=language_clients,
            notify_errors=config.notify_errors,
        )
        self.renderer: irenderer.IHintRenderer
        if config.display is not None:
            self.renderer = renderer.FunctionRenderer(config.display)
        else:
            self.renderer = renderer.EchoRenderer(editor=editor, syntax_tree=syntax_tree)

        # <method: handler>, one handler per protocol message type
        self.handlers: dict[str, ResponseHandler] = {
            types.TEXT_DOCUMENT_INLAY_HINT: self.collector.handle_inlay_hint,
        }

    def on_cursor_hold(self) -> None:
        buffer_id = self.editor.current_buffer()
        if buffer_id is None:
            self.display.echo([])
            return

        line, _ = self.editor.get_cursor()
        hints = self.collector.get_line_hints(buffer_id, line)
        if len(hints) == 0:
            # explicitly clear the echo area
            self.display.echo([])
            return

        fragments = self.renderer.render(line, hints) or []
        self.display.echo(fragments)

    def on_lsp_attach(self, buffer_id: BufferId, client_id: ClientId | None) -> None:
        if not self.config.auto_enable or client_id is None:
            return

        if self.language_clients.supports_inlay_hints(client_id):
            logger.debug(f"Enable inlay hints in buffer {buffer_id} for client {client_id}")
            self.language_clients.enable_inlay_hints(buffer_id)
        else:
            logger.trace(f"Client {client_id} doesn't support inlay hints")

    def on_buffer_closed(self, buffer_id: BufferId) -> None:
        self.collector.forget_buffer(buffer_id)


def setup(
    editor: ieditor.IEditor,
    language_clients: ilanguageclients.ILanguageClients,
    display: idisplay.IDisplaySurface,
    syntax_tree: isyntaxtree.ISyntaxTree | None = None,
    config: config_models.EchoHintConfig | None = None,
) -> EchoHint:
    if config is None:
        config = config_models.EchoHintConfig()
    echo_hint = EchoHint(
        config=config,
        editor=editor,
        language_clients=language_clients,
        display=display,
        syntax_tree=syntax_tree,
    )
    logger.trace(f"Echo hints set up, auto enable: {config.auto_enable}")
    return echo_hint


__all__ = ["EchoHint", "ResponseHandler", "setup"]
