from typing import Any, Callable, Literal

from pydantic import BaseModel

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class EchoHintConfig(BaseModel):
    # enable inlay hints in buffers whose language server supports them
    auto_enable: bool = True
    # function(line, hints) -> fragments | None, replaces default display
    display: Callable[..., Any] | None = None
    # show protocol errors to the user
    notify_errors: bool = False
    log_level: LogLevel = "INFO"


class EchoHintTomlConfig(BaseModel):
    # `[tool.echohint]` section of pyproject.toml. `display` is a source string
    # in form 'package.module.function'
    auto_enable: bool = True
    display: str | None = None
    notify_errors: bool = False
    log_level: LogLevel = "INFO"
