from __future__ import annotations

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from image_combine.errors import CompressionError
from image_combine.models.image_model import CompositeCanvas
from image_combine.services.encode_service import EncodeService, jpeg_encode, supervised_encode, to_rgb


def _canvas(w: int = 4, h: int = 3) -> CompositeCanvas:
    return CompositeCanvas.blank(w, h)


def test_to_rgb_drops_alpha():
    canvas = _canvas()
    canvas.pixels[0, 0] = (1, 2, 3, 0)

    rgb = to_rgb(canvas)

    assert rgb.shape == (3, 4, 3)
    assert tuple(rgb[0, 0]) == (1, 2, 3)


def test_jpeg_encode_produces_decodable_jpeg():
    data = jpeg_encode(to_rgb(_canvas(6, 5)), 90)

    im = Image.open(BytesIO(data))
    assert im.format == "JPEG"
    assert im.size == (6, 5)


def test_no_budget_accepts_first_attempt(recording_encoder):
    encoder = recording_encoder(lambda q: 10_000_000)

    state = EncodeService(encoder).encode(_canvas())

    assert encoder.qualities == [90]
    assert state.quality == 90
    assert len(state.last_bytes) == 10_000_000


def test_quality_steps_down_until_budget_fits(recording_encoder):
    encoder = recording_encoder(lambda q: q * 200)

    state = EncodeService(encoder).encode(_canvas(), max_size_kb=10)

    # 50 * 200 = 10000 <= 10 * 1024
    assert encoder.qualities == [90, 80, 70, 60, 50]
    assert state.attempts == [90, 80, 70, 60, 50]
    assert len(state.last_bytes) <= 10 * 1024


def test_floor_result_is_returned_even_if_over_budget(recording_encoder, caplog):
    encoder = recording_encoder(lambda q: 5000)

    data = EncodeService(encoder).encode_adaptive(_canvas(), max_size_kb=1)

    assert encoder.qualities == [90, 80, 70, 60, 50, 40, 30, 20, 10]
    assert data is not None and len(data) == 5000
    assert "10" in caplog.text


def test_budget_exactly_met_is_accepted(recording_encoder):
    encoder = recording_encoder(lambda q: 2048)

    state = EncodeService(encoder).encode(_canvas(), max_size_kb=2)

    assert encoder.qualities == [90]
    assert state.quality == 90


def test_encoder_failure_yields_none():
    def broken(rgb, quality):
        raise RuntimeError("encoder blew up")

    assert EncodeService(broken).encode_adaptive(_canvas(), max_size_kb=5) is None


def test_failure_mid_search_yields_none(recording_encoder):
    inner = recording_encoder(lambda q: 100_000)

    def flaky(rgb, quality):
        if quality == 70:
            raise MemoryError("out of memory inside codec")
        return inner(rgb, quality)

    assert EncodeService(flaky).encode_adaptive(_canvas(), max_size_kb=1) is None
    assert inner.qualities == [90, 80]


def test_supervised_encode_wraps_errors():
    def broken(rgb, quality):
        raise ValueError("bad")

    with pytest.raises(CompressionError):
        supervised_encode(broken, np.zeros((1, 1, 3), dtype=np.uint8), 90)


def test_supervised_encode_rejects_non_bytes():
    with pytest.raises(CompressionError):
        supervised_encode(lambda rgb, q: None, np.zeros((1, 1, 3), dtype=np.uint8), 90)


@pytest.mark.parametrize("bad", [0, -5])
def test_non_positive_budget_is_rejected(bad):
    with pytest.raises(ValueError):
        EncodeService().encode(_canvas(), max_size_kb=bad)


def test_real_jpeg_search_respects_budget():
    rng = np.random.default_rng(1)
    canvas = CompositeCanvas.blank(256, 256)
    canvas.pixels[:, :, :3] = rng.integers(0, 256, size=(256, 256, 3), dtype=np.uint8)

    state = EncodeService().encode(canvas, max_size_kb=40)

    assert state.attempts[0] == 90
    assert all(a - b == 10 for a, b in zip(state.attempts, state.attempts[1:]))
    assert min(state.attempts) >= 10
    assert len(state.last_bytes) <= 40 * 1024 or state.quality == 10
