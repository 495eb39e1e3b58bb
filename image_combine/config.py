"""Настройки процесса, читаются из окружения при импорте.

Параметры алгоритма (качество 90/10/10) сюда намеренно не входят.
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# Число потоков для параллельного декодирования.
WORKERS = _int_env("IMAGE_COMBINE_WORKERS", min(8, os.cpu_count() or 1))

LOG_LEVEL = os.getenv("IMAGE_COMBINE_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | int | None = None) -> None:
    """Настраивает корневой логгер; вызывается только из точек входа."""
    logging.basicConfig(level=level if level is not None else LOG_LEVEL, format=DEFAULT_LOG_FORMAT)
