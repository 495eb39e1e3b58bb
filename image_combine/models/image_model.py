"""Модели данных для склейки изображений.

Принципы:
- SRP: только структуры данных и константы алгоритма, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) там, где объект не мутирует.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

# Параметры поиска качества JPEG — фиксированы, не настраиваются.
START_QUALITY = 90
QUALITY_STEP = 10
MIN_QUALITY = 10

WHITE: Tuple[int, int, int, int] = (255, 255, 255, 255)


@dataclass(frozen=True)
class DecodedImage:
    """Успешно декодированное изображение в RGBA.

    Fields:
        index: Позиция исходного блоба во входном списке.
        width: Ширина, px.
        height: Высота, px.
        pixels: Массив uint8 формы (height, width, 4).
    """
    index: int
    width: int
    height: int
    pixels: np.ndarray


@dataclass
class CompositeCanvas:
    """Общий холст: ширина = max ширин, высота = сумма высот, фон — белый."""
    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def blank(cls, width: int, height: int) -> "CompositeCanvas":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = WHITE
        return cls(width=width, height=height, pixels=pixels)


@dataclass
class QualityState:
    """Состояние цикла подбора качества (живёт только внутри кодировщика)."""
    budget_bytes: Optional[int] = None
    quality: int = START_QUALITY
    last_bytes: Optional[bytes] = None
    attempts: List[int] = field(default_factory=list)

    def fits(self) -> bool:
        if self.budget_bytes is None or self.last_bytes is None:
            return True
        return len(self.last_bytes) <= self.budget_bytes

    def at_floor(self) -> bool:
        return self.quality <= MIN_QUALITY

    def step_down(self) -> None:
        self.quality = max(MIN_QUALITY, self.quality - QUALITY_STEP)


@dataclass(frozen=True)
class MergeReport:
    """Итог склейки: байты JPEG (или None) и сведения о подборе качества."""
    data: Optional[bytes]
    width: int = 0
    height: int = 0
    quality: Optional[int] = None
    attempts: Tuple[int, ...] = ()
    skipped: Tuple[int, ...] = ()

    @property
    def ok(self) -> bool:
        return self.data is not None
