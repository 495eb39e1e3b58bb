from __future__ import annotations

import numpy as np
import pytest

from image_combine.models.image_model import WHITE, DecodedImage
from image_combine.services.compose_service import ComposeService


def _image(index: int, w: int, h: int, color) -> DecodedImage:
    pixels = np.empty((h, w, 4), dtype=np.uint8)
    pixels[...] = color
    return DecodedImage(index=index, width=w, height=h, pixels=pixels)


def test_composite_size_is_max_width_and_sum_height():
    images = [_image(0, 3, 4, WHITE), _image(1, 7, 1, WHITE), _image(2, 5, 2, WHITE)]

    assert ComposeService().composite_size(images) == (7, 7)


def test_compose_stacks_in_input_order():
    red = (255, 0, 0, 255)
    green = (0, 255, 0, 255)

    canvas = ComposeService().compose([_image(0, 2, 2, red), _image(1, 2, 3, green)])

    assert (canvas.width, canvas.height) == (2, 5)
    assert (canvas.pixels[:2] == red).all()
    assert (canvas.pixels[2:] == green).all()


def test_narrow_images_are_left_aligned_with_white_padding():
    blue = (0, 0, 255, 255)

    canvas = ComposeService().compose([_image(0, 4, 2, blue), _image(1, 2, 2, blue)])

    assert (canvas.pixels[2:, :2] == blue).all()
    assert (canvas.pixels[2:, 2:] == WHITE).all()


def test_copy_overwrites_alpha_without_blending():
    transparent = (10, 20, 30, 0)

    canvas = ComposeService().compose([_image(0, 1, 1, transparent)])

    assert tuple(canvas.pixels[0, 0]) == transparent


def test_reordering_changes_bands_not_dimensions():
    a = _image(0, 2, 1, (1, 1, 1, 255))
    b = _image(1, 3, 2, (2, 2, 2, 255))
    service = ComposeService()

    ab = service.compose([a, b])
    ba = service.compose([b, a])

    assert (ab.width, ab.height) == (ba.width, ba.height) == (3, 3)
    assert tuple(ab.pixels[0, 0]) == (1, 1, 1, 255)
    assert tuple(ba.pixels[0, 0]) == (2, 2, 2, 255)


def test_compose_rejects_empty_input():
    with pytest.raises(ValueError):
        ComposeService().compose([])
