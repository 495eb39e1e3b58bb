from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from image_combine.errors import CompressionError, EmptyInputError, NoValidImagesError
from image_combine.services.image_service import ImageService
from image_combine.services.merge_service import MergeService, merge_images_vertically

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)


def test_empty_input_returns_none():
    assert merge_images_vertically([]) is None
    assert merge_images_vertically([], 100) is None


def test_empty_input_does_not_decode():
    class Exploding(ImageService):
        def decode_many(self, blobs):
            raise AssertionError("decoder must not run")

    with pytest.raises(EmptyInputError):
        MergeService(image_service=Exploding()).run([])


def test_invalid_images_return_none():
    assert merge_images_vertically([bytes([0, 1, 2, 3, 4, 5])]) is None
    with pytest.raises(NoValidImagesError):
        MergeService().run([b"garbage", b""])


def test_multiple_images_are_stacked(png_bytes):
    result = merge_images_vertically([png_bytes(2, 2, RED), png_bytes(2, 3, GREEN)])

    assert result is not None
    merged = Image.open(BytesIO(result)).convert("RGB")
    assert merged.size == (2, 5)
    # JPEG is lossy; check the dominant channel of each band
    r, g, _ = merged.getpixel((0, 0))
    assert r > g
    r, g, _ = merged.getpixel((1, 4))
    assert g > r


def test_bands_are_copied_exactly(png_bytes, recording_encoder):
    encoder = recording_encoder()

    report = MergeService(encoder=encoder).run([png_bytes(2, 2, RED), png_bytes(2, 3, GREEN)])

    rgb = encoder.buffers[0]
    assert rgb.shape == (5, 2, 3)
    assert (rgb[:2] == RED[:3]).all()
    assert (rgb[2:] == GREEN[:3]).all()
    assert (report.width, report.height) == (2, 5)


def test_invalid_blobs_are_skipped(png_bytes, recording_encoder):
    encoder = recording_encoder()

    report = MergeService(encoder=encoder).run([b"junk", png_bytes(3, 1, RED), b"", png_bytes(1, 2, GREEN)])

    assert report.skipped == (0, 2)
    rgb = encoder.buffers[0]
    assert rgb.shape == (3, 3, 3)
    assert (rgb[0] == RED[:3]).all()
    assert (rgb[1:, :1] == GREEN[:3]).all()
    assert (rgb[1:, 1:] == 255).all()


def test_reordering_keeps_dimensions(png_bytes, recording_encoder):
    a, b = png_bytes(4, 1, RED), png_bytes(2, 3, GREEN)
    first, second = recording_encoder(), recording_encoder()

    MergeService(encoder=first).run([a, b])
    MergeService(encoder=second).run([b, a])

    assert first.buffers[0].shape == second.buffers[0].shape == (4, 4, 3)
    assert (first.buffers[0][0] == RED[:3]).all()
    assert (second.buffers[0][0, :2] == GREEN[:3]).all()


def test_compression_failure_returns_none(png_bytes):
    def broken(rgb, quality):
        raise RuntimeError("codec abort")

    service = MergeService(encoder=broken)
    assert service.merge([png_bytes(2, 2)], 10) is None
    with pytest.raises(CompressionError):
        service.run([png_bytes(2, 2)])


def test_budget_respected_with_real_jpegs(noise_jpeg):
    blobs = [noise_jpeg(200, 150, seed=s) for s in range(3)]

    report = MergeService().run(blobs, max_size_kb=60)

    assert (report.width, report.height) == (200, 450)
    assert len(report.data) <= 60 * 1024 or report.quality == 10
    assert report.attempts == tuple(range(90, report.quality - 1, -10))
