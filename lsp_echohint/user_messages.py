from __future__ import annotations

from enum import IntEnum
from typing import Callable

from loguru import logger

_message_send: Callable[[str, UserMessageType], None] | None = None


class UserMessageType(IntEnum):
    # values match lsprotocol.types.MessageType
    ERROR = 1
    WARNING = 2
    INFO = 3
    LOG = 4
    DEBUG = 5


def register_sender(sender: Callable[[str, UserMessageType], None] | None) -> None:
    global _message_send
    _message_send = sender


def error(message: str) -> None:
    send(message=message, message_type=UserMessageType.ERROR)


def send(message: str, message_type: UserMessageType) -> None:
    logger.trace(f"User message: [{message_type.name}] {message}")
    if _message_send is not None:
        _message_send(message, message_type)
    else:
        logger.error("Sender of user messages is not initialized")


__all__ = ["UserMessageType", "register_sender", "error", "send"]
