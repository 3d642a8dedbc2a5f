# File: page_scout/logger.py
"""page_scout.logger: общий логгер PageScout.

Все модули пишут в один логгер ``PageScout``. Консольный вывод идёт в
stderr, чтобы JSON-отчёт команд ``crawl`` и ``discover`` в stdout можно
было перенаправить в файл без примеси логов. По ``--log-file`` добавляется
файл с ротацией.

    from page_scout.logger import logger
    logger.info("[CRAWL] %s", url)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "PageScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

#: ротация файла логов: 5 МиБ, три архивных копии
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

Level = Union[int, str]


def _console_handler(fmt: str) -> logging.Handler:
    # поток берётся при каждой настройке: CliRunner подменяет sys.stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _rotating_handler(path: Union[str, Path], fmt: str) -> logging.Handler:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Настраивает логгер ``PageScout``.

    Args:
        level: уровень, числом или именем (``"DEBUG"``).
        log_file: файл логов; ``None`` означает только консоль.
        log_format: формат для :class:`logging.Formatter`.
        replace_handlers: снять и закрыть прежние обработчики.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    if replace_handlers:
        for handler in list(log.handlers):
            log.removeHandler(handler)
            handler.close()

    log.addHandler(_console_handler(log_format))
    if log_file is not None:
        log.addHandler(_rotating_handler(log_file, log_format))
    log.propagate = False
    return log


def init_logging(
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Точка входа для CLI: заменить обработчики и выставить уровень."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
