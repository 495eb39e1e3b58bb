from __future__ import annotations

from io import BytesIO
from typing import Callable, List, Tuple

import numpy as np
import pytest
from PIL import Image


def encode_image(im: Image.Image, fmt: str = "PNG") -> bytes:
    buf = BytesIO()
    im.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> Callable[..., bytes]:
    def _make(w: int, h: int, color: Tuple[int, ...] = (255, 0, 0, 255)) -> bytes:
        return encode_image(Image.new("RGBA", (w, h), color=color))
    return _make


@pytest.fixture
def noise_jpeg() -> Callable[..., bytes]:
    def _make(w: int, h: int, seed: int = 0) -> bytes:
        rng = np.random.default_rng(seed)
        arr = rng.integers(0, 256, size=(h, w, 3), dtype=np.uint8)
        return encode_image(Image.fromarray(arr), fmt="JPEG")
    return _make


class RecordingEncoder:
    """Подменный кодировщик: запоминает буферы и качества, размер задаётся функцией."""

    def __init__(self, size_for_quality: Callable[[int], int] = lambda q: 100) -> None:
        self.size_for_quality = size_for_quality
        self.qualities: List[int] = []
        self.buffers: List[np.ndarray] = []

    def __call__(self, rgb: np.ndarray, quality: int) -> bytes:
        self.qualities.append(quality)
        self.buffers.append(rgb.copy())
        return b"\xff" * self.size_for_quality(quality)


@pytest.fixture
def recording_encoder() -> Callable[..., RecordingEncoder]:
    return RecordingEncoder
