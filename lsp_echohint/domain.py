from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Hashable

from lsprotocol import types

BufferId = Hashable
ClientId = Hashable

# (text, highlight group)
Fragment = tuple[str, str]


class Highlight:
    CURSOR = "Cursor"
    NORMAL = "Normal"
    IDENTIFIER = "Identifier"
    DELIMITER = "Delimiter"
    TYPE = "Type"
    ERROR = "ErrorMsg"


@dataclass(frozen=True)
class EchoHint:
    # concatenation of all label parts if the server sent structured label
    label: str
    # 0-based character offset in the line
    character: int
    # types.InlayHintKind value, None if server didn't send it
    kind: int | None = None

    @property
    def is_type(self) -> bool:
        return self.kind == types.InlayHintKind.Type


# <line (1-based): hints ordered by character>
HintBucket = dict[int, list[EchoHint]]


@dataclass
class HandlerContext:
    buffer_id: BufferId | None
    client_id: ClientId | None
    # monotonic per-buffer request counter, optional. Responses with a lower
    # value than the last applied one are dropped
    request_id: int | None = None


def hint_label_text(label: str | list[types.InlayHintLabelPart]) -> str:
    if isinstance(label, str):
        return label
    return "".join(part.value for part in label)


def echo_hint_from_lsp(hint: types.InlayHint) -> EchoHint:
    return EchoHint(
        label=hint_label_text(hint.label),
        character=hint.position.character,
        kind=int(hint.kind) if hint.kind is not None else None,
    )


__all__ = [
    "BufferId",
    "ClientId",
    "Fragment",
    "Highlight",
    "EchoHint",
    "HintBucket",
    "HandlerContext",
    "hint_label_text",
    "echo_hint_from_lsp",
]
