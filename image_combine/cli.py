"""Консольная склейка.

Запуск:
    image-combine page1.jpg page2.png -o merged.jpg --max-size-kb 500
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from image_combine import config
from image_combine.services.image_service import load_file, save_result
from image_combine.services.merge_service import merge_images_vertically

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"ожидается целое число: {value}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"ожидается положительное число: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="image-combine", description="Вертикальная склейка изображений в один JPEG")
    p.add_argument("files", nargs="+", help="Пути к изображениям, сверху вниз")
    p.add_argument("-o", "--out", default="merged.jpg", help="Файл результата (JPEG)")
    p.add_argument("--max-size-kb", type=_positive_int, default=None, help="Лимит размера результата, КБ")
    p.add_argument("-v", "--verbose", action="store_true", help="Подробный лог (DEBUG)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging(logging.DEBUG if args.verbose else None)

    blobs: List[bytes] = []
    for f in args.files:
        try:
            blobs.append(load_file(f))
        except FileNotFoundError as exc:
            # unreadable path is treated like an undecodable blob
            logger.warning("%s", exc)
            blobs.append(b"")

    data = merge_images_vertically(blobs, args.max_size_kb)
    if data is None:
        logger.error("Склейка не дала результата")
        return 1

    save_result(args.out, data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
