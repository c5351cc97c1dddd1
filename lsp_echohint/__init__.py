from lsp_echohint.config_models import EchoHintConfig
from lsp_echohint.domain import EchoHint as Hint
from lsp_echohint.domain import Fragment, HandlerContext, Highlight, HintBucket
from lsp_echohint.echohint import EchoHint, setup

__all__ = [
    "EchoHint",
    "EchoHintConfig",
    "Fragment",
    "HandlerContext",
    "Highlight",
    "Hint",
    "HintBucket",
    "setup",
]
