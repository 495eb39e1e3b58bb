"""Ошибки конвейера склейки.

Наружу (`merge_images_vertically`) все они сворачиваются в `None`;
внутри сервисы бросают их, как `ImageService` бросает `ValueError`.
"""
from __future__ import annotations


class MergeError(Exception):
    """Базовая ошибка конвейера."""


class DecodeError(MergeError, ValueError):
    """Блоб не удалось декодировать как изображение."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class EmptyInputError(MergeError):
    """Пустой входной список."""


class NoValidImagesError(MergeError):
    """Ни один блоб не декодировался."""


class CompressionError(MergeError):
    """Кодировщик JPEG вернул ошибку или аварийно завершился."""
