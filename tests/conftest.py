from __future__ import annotations

from io import BytesIO

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def grid(rng: np.random.Generator) -> np.ndarray:
    """A 16x12 random RGB pixel grid."""
    return rng.integers(0, 256, size=(12, 16, 3), dtype=np.uint8)


@pytest.fixture
def blank_grid() -> np.ndarray:
    return np.zeros((8, 8, 3), dtype=np.uint8)


@pytest.fixture
def cover_image(grid: np.ndarray) -> Image.Image:
    return Image.fromarray(grid, mode="RGB")


@pytest.fixture
def cover_png(cover_image: Image.Image) -> bytes:
    buf = BytesIO()
    cover_image.save(buf, "PNG")
    return buf.getvalue()
