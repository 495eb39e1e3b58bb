"""Оркестрация: декодирование -> склейка -> кодирование.

Публичный контракт — `merge_images_vertically(images, max_size_kb)`:
синхронная функция, принимает список байтов и возвращает байты JPEG
или None. Причина неудачи наружу не передаётся, только в лог.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from image_combine.errors import CompressionError, EmptyInputError, MergeError, NoValidImagesError
from image_combine.models.image_model import MergeReport
from image_combine.services.compose_service import ComposeService
from image_combine.services.encode_service import EncodeService, Encoder, jpeg_encode
from image_combine.services.image_service import ImageService

logger = logging.getLogger(__name__)


class MergeService:
    """Связывает загрузчик, компоновщик и кодировщик.

    Зависимости передаются через конструктор, чтобы в тестах можно было
    подменить кодировщик или число потоков декодирования.
    """

    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        compose_service: Optional[ComposeService] = None,
        encoder: Encoder = jpeg_encode,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._compose_service = compose_service or ComposeService()
        self._encode_service = EncodeService(encoder)

    def run(self, images: Sequence[bytes], max_size_kb: Optional[int] = None) -> MergeReport:
        """Выполняет склейку и возвращает подробный отчёт.

        Raises:
            EmptyInputError: пустой входной список.
            NoValidImagesError: ни один блоб не декодировался.
            CompressionError: кодировщик не справился.
        """
        started = time.perf_counter()
        if not images:
            raise EmptyInputError("Пустой список изображений")

        decoded = self._image_service.decode_many(images)
        if not decoded:
            raise NoValidImagesError(f"Ни одно из {len(images)} изображений не удалось декодировать")

        canvas = self._compose_service.compose(decoded)
        logger.debug("Склейка %dx%d заняла %.4f с", canvas.width, canvas.height, time.perf_counter() - started)

        state = self._encode_service.encode(canvas, max_size_kb)
        logger.info(
            "Склеено %d из %d изображений: %dx%d, качество %d, %d байт, %.3f с",
            len(decoded),
            len(images),
            canvas.width,
            canvas.height,
            state.quality,
            len(state.last_bytes),
            time.perf_counter() - started,
        )

        used = {img.index for img in decoded}
        return MergeReport(
            data=state.last_bytes,
            width=canvas.width,
            height=canvas.height,
            quality=state.quality,
            attempts=tuple(state.attempts),
            skipped=tuple(i for i in range(len(images)) if i not in used),
        )

    def merge(self, images: Sequence[bytes], max_size_kb: Optional[int] = None) -> Optional[bytes]:
        """Как `run`, но любая ошибка конвейера превращается в None."""
        try:
            return self.run(images, max_size_kb).data
        except EmptyInputError:
            logger.info("Пустой список изображений, склеивать нечего")
        except NoValidImagesError as exc:
            logger.error("%s", exc)
        except CompressionError as exc:
            logger.error("%s", exc)
        except MergeError:
            logger.exception("Склейка не удалась")
        return None


_default_service: Optional[MergeService] = None


def merge_images_vertically(images: Sequence[bytes], max_size_kb: Optional[int] = None) -> Optional[bytes]:
    """Склеивает изображения вертикально и возвращает JPEG или None."""
    global _default_service
    if _default_service is None:
        _default_service = MergeService()
    return _default_service.merge(images, max_size_kb)
