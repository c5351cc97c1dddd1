from pathlib import Path

import pytest
from lsprotocol import types

from lsp_echohint.domain import HandlerContext
from lsp_echohint.impls.inmemory_editor import InMemoryEditor


class FakeLanguageClients:
    def __init__(self, clients_with_hints: set) -> None:
        self.clients_with_hints = clients_with_hints
        self.enabled_buffers: list = []

    def supports_inlay_hints(self, client_id) -> bool:
        return client_id in self.clients_with_hints

    def enable_inlay_hints(self, buffer_id) -> None:
        self.enabled_buffers.append(buffer_id)


class FakeDisplay:
    def __init__(self) -> None:
        self.echoed: list[list[tuple[str, str]]] = []

    def echo(self, fragments) -> None:
        self.echoed.append(list(fragments))

    @property
    def last(self):
        return self.echoed[-1]


class FakeSyntaxTree:
    def __init__(self, texts: dict[tuple[int, int], str]) -> None:
        # <(row, column): node text>
        self.texts = texts
        self.requests: list[tuple] = []

    def node_text(self, buffer_id, row: int, column: int) -> str | None:
        self.requests.append((buffer_id, row, column))
        return self.texts.get((row, column), None)


def make_hint(
    line: int,
    character: int,
    label: str | list[str],
    kind: types.InlayHintKind | None = types.InlayHintKind.Type,
) -> types.InlayHint:
    if isinstance(label, list):
        hint_label = [types.InlayHintLabelPart(value=part) for part in label]
    else:
        hint_label = label
    return types.InlayHint(
        position=types.Position(line=line, character=character), label=hint_label, kind=kind
    )


@pytest.fixture
def editor() -> InMemoryEditor:
    editor = InMemoryEditor()
    editor.open_buffer(Path("/tmp/main.rs"), "fn main() {\n    let x = 1;\n}\n", "rust")
    return editor


@pytest.fixture
def buffer_id(editor: InMemoryEditor) -> int:
    return editor.current_buffer()


@pytest.fixture
def language_clients() -> FakeLanguageClients:
    return FakeLanguageClients(clients_with_hints={1})


@pytest.fixture
def display() -> FakeDisplay:
    return FakeDisplay()


@pytest.fixture
def ctx(buffer_id: int) -> HandlerContext:
    return HandlerContext(buffer_id=buffer_id, client_id=1)


@pytest.fixture(name="make_hint")
def make_hint_fixture():
    return make_hint


@pytest.fixture
def fake_syntax_tree_cls():
    return FakeSyntaxTree


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
