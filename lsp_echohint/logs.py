import inspect
import logging
import sys
from pathlib import Path

from loguru import logger


def save_logs_to_file(
    file_path: Path, log_level: str = "INFO", rotation: str = "10 MB", retention=3
) -> int:
    handler_id = logger.add(
        str(file_path),
        rotation=rotation,
        retention=retention,
        level=log_level,
        # set encoding explicitly to be able to handle special symbols
        encoding="utf8",
    )
    logger.info(f"Log file: {file_path}")
    return handler_id


def setup_logs(log_file: Path | None, log_level: str, stderr: bool = False) -> None:
    # stdout is used for echo area, logs go to the file or to stderr
    logger.remove()
    intercept_std_logging()
    if log_file is not None:
        save_logs_to_file(file_path=log_file, log_level=log_level)
    elif stderr is True:
        logger.add(sys.stderr, level=log_level)


class InterceptHandler(logging.Handler):
    # pygls uses standard python logger, pass its records to loguru
    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists.
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message.
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_std_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


__all__ = ["save_logs_to_file", "setup_logs", "InterceptHandler", "intercept_std_logging"]
