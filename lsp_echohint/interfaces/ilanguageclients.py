from __future__ import annotations

from typing import Protocol

from lsp_echohint.domain import BufferId, ClientId


class ILanguageClients(Protocol):
    def supports_inlay_hints(self, client_id: ClientId) -> bool:
        # False also for unknown or stopped clients
        ...

    def enable_inlay_hints(self, buffer_id: BufferId) -> None:
        # fire-and-forget, response is delivered to the registered
        # textDocument/inlayHint handler
        ...
