from __future__ import annotations

import asyncio
import itertools
import os
from pathlib import Path

from loguru import logger
from lsprotocol import types
from pygls.exceptions import JsonRpcException
from pygls.lsp.client import LanguageClient

from lsp_echohint import create_lsp_client
from lsp_echohint.domain import BufferId, ClientId, HandlerContext
from lsp_echohint.echohint import ResponseHandler
from lsp_echohint.impls.inmemory_editor import InMemoryEditor
from lsp_echohint.interfaces import ilanguageclients


class PyglsLanguageClients(ilanguageclients.ILanguageClients):
    """Language clients of an in-memory editor, backed by pygls.

    Responses are passed to handlers registered with `register_handler`, each
    request gets a monotonic id so that a slow response cannot override a newer
    one.
    """

    def __init__(self, editor: InMemoryEditor) -> None:
        self.editor = editor
        self.clients: dict[ClientId, LanguageClient] = {}
        self.capabilities: dict[ClientId, types.ServerCapabilities] = {}
        # <buffer: clients attached to it>
        self.attached_clients: dict[BufferId, list[ClientId]] = {}
        self.handlers: dict[str, ResponseHandler] = {}
        self.pending_requests: set[asyncio.Task] = set()
        self._request_ids = itertools.count(1)

    def register_handler(self, method: str, handler: ResponseHandler) -> None:
        self.handlers[method] = handler

    def register_client(
        self, client_id: ClientId, client: LanguageClient, capabilities: types.ServerCapabilities
    ) -> None:
        self.clients[client_id] = client
        self.capabilities[client_id] = capabilities

    def unregister_client(self, client_id: ClientId) -> None:
        self.clients.pop(client_id, None)
        self.capabilities.pop(client_id, None)
        for client_ids in self.attached_clients.values():
            if client_id in client_ids:
                client_ids.remove(client_id)

    async def start_client(
        self, client_id: ClientId, server_cmd: str, root_path: Path
    ) -> types.InitializeResult:
        client = await create_lsp_client.create_lsp_client_io(server_cmd, root_path)
        initialize_result = await client.initialize_async(
            types.InitializeParams(
                capabilities=types.ClientCapabilities(
                    text_document=types.TextDocumentClientCapabilities(
                        inlay_hint=types.InlayHintClientCapabilities()
                    )
                ),
                process_id=os.getpid(),
                root_uri=root_path.absolute().as_uri(),
            )
        )
        client.initialized(types.InitializedParams())
        self.register_client(client_id, client, initialize_result.capabilities)
        logger.info(f"Language client {client_id} started: {server_cmd}")
        return initialize_result

    async def stop_clients(self) -> None:
        for client_id, client in list(self.clients.items()):
            logger.trace(f"Stop language client {client_id}")
            await client.shutdown_async(None)
            client.exit(None)
            await client.stop()
            self.unregister_client(client_id)

    def attach_buffer(self, buffer_id: BufferId, client_id: ClientId) -> None:
        buffer = self.editor.get_buffer(buffer_id)
        client = self.clients.get(client_id, None)
        if buffer is None or client is None:
            raise KeyError(f"Cannot attach buffer {buffer_id} to client {client_id}")

        client.text_document_did_open(
            types.DidOpenTextDocumentParams(
                text_document=types.TextDocumentItem(
                    uri=buffer.uri,
                    language_id=buffer.language_id,
                    version=buffer.version,
                    text=buffer.text,
                )
            )
        )
        self.attached_clients.setdefault(buffer_id, []).append(client_id)

    def supports_inlay_hints(self, client_id: ClientId) -> bool:
        capabilities = self.capabilities.get(client_id, None)
        if capabilities is None:
            return False
        return bool(capabilities.inlay_hint_provider)

    def enable_inlay_hints(self, buffer_id: BufferId) -> None:
        loop = asyncio.get_running_loop()
        for client_id in self.attached_clients.get(buffer_id, []):
            if not self.supports_inlay_hints(client_id):
                continue
            task = loop.create_task(self.request_inlay_hints(buffer_id, client_id))
            self.pending_requests.add(task)
            task.add_done_callback(self.pending_requests.discard)

    async def wait_pending_requests(self) -> None:
        if self.pending_requests:
            await asyncio.gather(*self.pending_requests)

    async def request_inlay_hints(self, buffer_id: BufferId, client_id: ClientId) -> None:
        ctx = HandlerContext(
            buffer_id=buffer_id, client_id=client_id, request_id=next(self._request_ids)
        )
        buffer = self.editor.get_buffer(buffer_id)
        client = self.clients.get(client_id, None)
        error: types.ResponseError | None = None
        result: list[types.InlayHint] | None = None

        if buffer is None or client is None:
            logger.trace(f"Buffer {buffer_id} or client {client_id} is gone, skip request")
        else:
            params = types.InlayHintParams(
                text_document=types.TextDocumentIdentifier(uri=buffer.uri),
                range=types.Range(
                    start=types.Position(line=0, character=0),
                    end=types.Position(line=buffer.line_count, character=0),
                ),
            )
            try:
                result = await client.text_document_inlay_hint_async(params)
            except JsonRpcException as exception:
                error = types.ResponseError(
                    code=exception.code, message=exception.message or str(exception)
                )

        self.dispatch(types.TEXT_DOCUMENT_INLAY_HINT, error, result, ctx)

    def dispatch(
        self,
        method: str,
        error: types.ResponseError | None,
        result: list[types.InlayHint] | None,
        ctx: HandlerContext,
    ) -> None:
        handler = self.handlers.get(method, None)
        if handler is None:
            logger.warning(f"No handler for {method}, response dropped")
            return
        handler(error, result, ctx)


__all__ = ["PyglsLanguageClients"]
