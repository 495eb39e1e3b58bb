"""Вертикальная склейка декодированных изображений в общий холст."""
from __future__ import annotations

import logging
import time
from typing import Sequence, Tuple

from image_combine.models.image_model import CompositeCanvas, DecodedImage

logger = logging.getLogger(__name__)


class ComposeService:
    def composite_size(self, images: Sequence[DecodedImage]) -> Tuple[int, int]:
        """Ширина — максимум ширин, высота — сумма высот."""
        if not images:
            raise ValueError("Нет изображений для склейки")
        return max(img.width for img in images), sum(img.height for img in images)

    def compose(self, images: Sequence[DecodedImage]) -> CompositeCanvas:
        """Складывает изображения сверху вниз строго в порядке входа.

        Каждое изображение копируется попиксельно (все 4 канала, без смешивания)
        в полосу строк [offset, offset + h) начиная с нулевого столбца.
        Всё, что не покрыто полосами, остаётся непрозрачным белым.
        """
        width, height = self.composite_size(images)
        canvas = CompositeCanvas.blank(width, height)

        offset = 0
        for position, img in enumerate(images, start=1):
            started = time.perf_counter()
            canvas.pixels[offset:offset + img.height, :img.width] = img.pixels
            offset += img.height
            logger.debug("Изображение %d размещено за %.4f с", position, time.perf_counter() - started)

        return canvas
