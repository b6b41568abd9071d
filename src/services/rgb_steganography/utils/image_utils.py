"""
Image utility functions for steganography operations
"""

from io import BytesIO
from typing import Optional

import httpx
import numpy as np
from PIL import Image


def load_image_from_input(file: Optional[BytesIO] = None, url: Optional[str] = None) -> Image.Image:
    """
    Load an image from either a file object or URL

    Args:
        file: BytesIO object containing image data
        url: URL to fetch image from

    Returns:
        PIL Image object

    Raises:
        ValueError: If neither file nor url is provided
    """
    if file is not None:
        return Image.open(file)
    if url is not None:
        with httpx.Client(timeout=30) as client:
            resp = client.get(url)
            resp.raise_for_status()
            return Image.open(BytesIO(resp.content))
    raise ValueError("Provide file or url")


def ensure_rgb_image(image: Image.Image) -> Image.Image:
    """
    Ensure image is in RGB mode for consistent processing

    Args:
        image: Input PIL Image

    Returns:
        Image converted to RGB mode
    """
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def image_to_grid(image: Image.Image) -> np.ndarray:
    """Return a (height, width, 3) uint8 pixel grid for the image."""
    return np.array(ensure_rgb_image(image), dtype=np.uint8)


def grid_to_image(grid: np.ndarray) -> Image.Image:
    return Image.fromarray(grid.astype(np.uint8), mode="RGB")


def grid_to_raw_bytes(grid: np.ndarray) -> bytes:
    """Row-major RGB bytes of the grid, without any image container."""
    return np.ascontiguousarray(grid, dtype=np.uint8).tobytes()


def get_image_dimensions(image: Image.Image) -> tuple[int, int]:
    """
    Get image dimensions

    Args:
        image: PIL Image object

    Returns:
        Tuple of (width, height)
    """
    return image.size


def human_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    size = float(n)
    for unit in ["KB", "MB", "GB", "TB"]:
        size /= 1024.0
        if size < 1024:
            return f"{size:.2f} {unit}"
    return f"{size:.2f} PB"
