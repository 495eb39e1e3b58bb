"""Декодирование входных блобов в RGBA-буферы.

Принципы:
- SRP: класс отвечает только за превращение байтов в `DecodedImage`.
- Ошибка одного блоба локальна: она логируется, а блоб исключается из пакета.
"""
from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
from PIL import Image, UnidentifiedImageError

from image_combine import config
from image_combine.errors import DecodeError
from image_combine.models.image_model import DecodedImage

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(self, workers: Optional[int] = None) -> None:
        self.workers = workers or config.WORKERS

    def decode(self, blob: bytes, index: int = 0) -> DecodedImage:
        """Декодирует блоб и возвращает его пиксели в режиме RGBA.

        Args:
            blob: Закодированное изображение (PNG, JPEG, ... — формат определяет Pillow).
            index: Позиция блоба во входном списке.

        Returns:
            `DecodedImage` с массивом формы (height, width, 4).

        Raises:
            DecodeError: если данные не распознаны или повреждены.
        """
        try:
            with Image.open(io.BytesIO(blob)) as pil_image:
                rgba = pil_image.convert("RGBA")
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Не удалось декодировать изображение #{index}: {exc}", index=index) from exc

        width, height = rgba.size
        return DecodedImage(index=index, width=width, height=height, pixels=np.asarray(rgba, dtype=np.uint8))

    def decode_many(self, blobs: Sequence[bytes]) -> List[DecodedImage]:
        """Декодирует пакет параллельно; возвращает успешные в исходном порядке."""
        if not blobs:
            return []

        decoded: List[DecodedImage] = []
        with ThreadPoolExecutor(max_workers=min(self.workers, len(blobs))) as pool:
            for result in pool.map(self._try_decode, blobs, range(len(blobs))):
                if result is not None:
                    decoded.append(result)

        # order is a property of the composer input, not of completion order
        decoded.sort(key=lambda img: img.index)
        return decoded

    def _try_decode(self, blob: bytes, index: int) -> Optional[DecodedImage]:
        try:
            return self.decode(blob, index)
        except DecodeError as exc:
            logger.warning("%s", exc)
            return None


def load_file(file_path: str | Path) -> bytes:
    """Читает файл изображения целиком.

    Raises:
        FileNotFoundError: если путь не существует или не указывает на файл.
    """
    path = Path(file_path)
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"Файл не найден: {path}")
    return path.read_bytes()


def save_result(file_path: str | Path, data: bytes) -> Path:
    """Записывает результат склейки как есть, создавая каталоги при необходимости."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("Результат сохранён: %s (%d байт)", path, len(data))
    return path
