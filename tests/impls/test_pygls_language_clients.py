from unittest.mock import AsyncMock, MagicMock

import pytest
from lsprotocol import types
from pygls.exceptions import JsonRpcInternalError

from lsp_echohint import setup
from lsp_echohint.impls.pygls_language_clients import PyglsLanguageClients

pytestmark = pytest.mark.anyio


def _capabilities(inlay_hints: bool) -> types.ServerCapabilities:
    return types.ServerCapabilities(inlay_hint_provider=True if inlay_hints else None)


@pytest.fixture
def lsp_client() -> MagicMock:
    client = MagicMock()
    client.text_document_inlay_hint_async = AsyncMock()
    return client


@pytest.fixture
def pygls_clients(editor, lsp_client) -> PyglsLanguageClients:
    language_clients = PyglsLanguageClients(editor=editor)
    language_clients.register_client(1, lsp_client, _capabilities(inlay_hints=True))
    return language_clients


def _setup_echo_hint(editor, pygls_clients, display):
    echo_hint = setup(editor=editor, language_clients=pygls_clients, display=display)
    pygls_clients.register_handler(
        types.TEXT_DOCUMENT_INLAY_HINT, echo_hint.handlers[types.TEXT_DOCUMENT_INLAY_HINT]
    )
    return echo_hint


def test__supports_inlay_hints(pygls_clients, lsp_client):
    pygls_clients.register_client(2, lsp_client, _capabilities(inlay_hints=False))

    assert pygls_clients.supports_inlay_hints(1) is True
    assert pygls_clients.supports_inlay_hints(2) is False
    assert pygls_clients.supports_inlay_hints(3) is False


def test__attach_buffer__opens_document(pygls_clients, lsp_client, buffer_id, editor):
    pygls_clients.attach_buffer(buffer_id, 1)

    lsp_client.text_document_did_open.assert_called_once()
    params = lsp_client.text_document_did_open.call_args.args[0]
    assert params.text_document.uri == editor.get_buffer(buffer_id).uri
    assert params.text_document.language_id == "rust"
    assert pygls_clients.attached_clients == {buffer_id: [1]}


def test__attach_buffer__unknown_client(pygls_clients, buffer_id):
    with pytest.raises(KeyError):
        pygls_clients.attach_buffer(buffer_id, 5)


async def test__lsp_attach__fetches_and_publishes_hints(
    editor, pygls_clients, lsp_client, display, buffer_id, make_hint
):
    lsp_client.text_document_inlay_hint_async.return_value = [
        make_hint(1, 9, ": i32"),
        make_hint(1, 4, "x:", kind=types.InlayHintKind.Parameter),
    ]
    echo_hint = _setup_echo_hint(editor, pygls_clients, display)
    pygls_clients.attach_buffer(buffer_id, 1)

    echo_hint.on_lsp_attach(buffer_id, 1)
    await pygls_clients.wait_pending_requests()

    params = lsp_client.text_document_inlay_hint_async.call_args.args[0]
    assert params.range.start == types.Position(line=0, character=0)
    assert params.range.end == types.Position(line=3, character=0)
    assert [hint.label for hint in echo_hint.collector.get_hints(buffer_id)[2]] == [
        "x:",
        ": i32",
    ]


async def test__request_error__clears_hints(
    editor, pygls_clients, lsp_client, display, buffer_id, make_hint
):
    echo_hint = _setup_echo_hint(editor, pygls_clients, display)
    pygls_clients.attach_buffer(buffer_id, 1)
    lsp_client.text_document_inlay_hint_async.return_value = [make_hint(1, 9, ": i32")]
    pygls_clients.enable_inlay_hints(buffer_id)
    await pygls_clients.wait_pending_requests()

    lsp_client.text_document_inlay_hint_async.side_effect = JsonRpcInternalError("failed")
    pygls_clients.enable_inlay_hints(buffer_id)
    await pygls_clients.wait_pending_requests()

    assert echo_hint.collector.get_hints(buffer_id) == {}


async def test__enable_inlay_hints__skips_clients_without_capability(
    editor, pygls_clients, lsp_client, buffer_id
):
    pygls_clients.capabilities[1] = _capabilities(inlay_hints=False)
    pygls_clients.attach_buffer(buffer_id, 1)

    pygls_clients.enable_inlay_hints(buffer_id)
    await pygls_clients.wait_pending_requests()

    lsp_client.text_document_inlay_hint_async.assert_not_called()


async def test__dispatch__without_handler_drops_response(pygls_clients, lsp_client, buffer_id):
    pygls_clients.attach_buffer(buffer_id, 1)
    lsp_client.text_document_inlay_hint_async.return_value = []

    pygls_clients.enable_inlay_hints(buffer_id)
    await pygls_clients.wait_pending_requests()

    lsp_client.text_document_inlay_hint_async.assert_awaited_once()


async def test__stop_clients__shuts_down_servers(pygls_clients, lsp_client):
    lsp_client.shutdown_async = AsyncMock()
    lsp_client.stop = AsyncMock()

    await pygls_clients.stop_clients()

    lsp_client.shutdown_async.assert_awaited_once()
    lsp_client.exit.assert_called_once()
    assert pygls_clients.clients == {}
    assert pygls_clients.supports_inlay_hints(1) is False
