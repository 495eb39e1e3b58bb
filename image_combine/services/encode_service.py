"""Кодирование холста в JPEG с подбором качества под лимит размера.

Цикл: Start(90) -> Attempt(q) -> Accepted | Retry(q - 10) | Failed.
Качество не опускается ниже 10; на нижней границе результат принимается,
даже если он всё ещё больше лимита.
"""
from __future__ import annotations

import io
import logging
from typing import Callable, Optional

import numpy as np
from PIL import Image

from image_combine.errors import CompressionError
from image_combine.models.image_model import CompositeCanvas, QualityState

logger = logging.getLogger(__name__)

Encoder = Callable[[np.ndarray, int], bytes]


def to_rgb(canvas: CompositeCanvas) -> np.ndarray:
    """Отбрасывает альфа-канал; возвращает непрерывный массив (h, w, 3)."""
    return np.ascontiguousarray(canvas.pixels[:, :, :3])


def jpeg_encode(rgb: np.ndarray, quality: int) -> bytes:
    """Однократное кодирование RGB-буфера в JPEG с заданным качеством."""
    out = io.BytesIO()
    Image.fromarray(rgb).save(out, format="JPEG", quality=quality)
    return out.getvalue()


def supervised_encode(encoder: Encoder, rgb: np.ndarray, quality: int) -> bytes:
    """Вызывает внешний кодировщик, превращая любой его сбой в `CompressionError`."""
    try:
        data = encoder(rgb, quality)
    except Exception as exc:
        logger.exception("Сбой кодировщика JPEG (качество %d)", quality)
        raise CompressionError(f"Не удалось закодировать JPEG: {exc}") from exc
    if not isinstance(data, (bytes, bytearray)):
        raise CompressionError(f"Кодировщик вернул {type(data).__name__} вместо байтов")
    return bytes(data)


class EncodeService:
    def __init__(self, encoder: Encoder = jpeg_encode) -> None:
        self._encoder = encoder

    def encode(self, canvas: CompositeCanvas, max_size_kb: Optional[int] = None) -> QualityState:
        """Кодирует холст; при лимите снижает качество шагом 10 до попадания в лимит.

        Args:
            canvas: Готовый RGBA-холст.
            max_size_kb: Лимит размера в килобайтах (×1024) или None.

        Returns:
            `QualityState` с последними байтами и списком опробованных качеств.

        Raises:
            ValueError: если лимит задан, но не положителен.
            CompressionError: если кодировщик не справился.
        """
        if max_size_kb is not None and max_size_kb <= 0:
            raise ValueError(f"Лимит размера должен быть положительным: {max_size_kb}")

        rgb = to_rgb(canvas)
        state = QualityState(budget_bytes=max_size_kb * 1024 if max_size_kb is not None else None)

        while True:
            state.attempts.append(state.quality)
            state.last_bytes = supervised_encode(self._encoder, rgb, state.quality)
            logger.debug("JPEG: качество %d -> %d байт", state.quality, len(state.last_bytes))

            if state.fits():
                return state
            if state.at_floor():
                logger.warning(
                    "Лимит %d байт не достигнут даже при качестве %d: %d байт",
                    state.budget_bytes,
                    state.quality,
                    len(state.last_bytes),
                )
                return state
            state.step_down()

    def encode_adaptive(self, canvas: CompositeCanvas, max_size_kb: Optional[int] = None) -> Optional[bytes]:
        """То же, что `encode`, но сбой кодировщика сворачивается в None."""
        try:
            return self.encode(canvas, max_size_kb).last_bytes
        except CompressionError:
            return None
