"""
Pixel distributions: the order in which pixels are visited while encoding or decoding
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

import numpy as np

from ..models.stego_models import BitDistributionSpec, DistributionType
from .errors import InvalidConfigurationError

# One bit per RGB channel
BITS_PER_VISIT = 3


def visit_count(num_bits: int) -> int:
    """Number of pixel visits needed to carry ``num_bits`` bits."""
    return math.ceil(num_bits / BITS_PER_VISIT)


def get_linspace(a: float, b: float, n: int) -> List[int]:
    """
    Return ``n`` evenly spaced samples over [a, b], floored to integers

    Args:
        a: First sample
        b: Last sample
        n: Number of samples

    Returns:
        List of integer sample points
    """
    return [int(p) for p in np.floor(np.linspace(a, b, n))]


def index_to_coordinate(index: int, width: int) -> Tuple[int, int]:
    return index % width, index // width


class PixelDistribution(ABC):
    """Maps successive pixel visits to (x, y) coordinates."""

    @abstractmethod
    def coordinates(self, width: int, height: int) -> Iterator[Tuple[int, int]]:
        """Yield pixel coordinates in visiting order."""
        pass

    @abstractmethod
    def for_bits(self, num_bits: int) -> "PixelDistribution":
        """Return the distribution to use when encoding ``num_bits`` bits."""
        pass

    @property
    @abstractmethod
    def kind(self) -> DistributionType:
        pass


class SequentialDistribution(PixelDistribution):
    """Raster order starting from the top-left pixel."""

    def coordinates(self, width: int, height: int) -> Iterator[Tuple[int, int]]:
        for k in range(width * height):
            yield index_to_coordinate(k, width)

    def for_bits(self, num_bits: int) -> "SequentialDistribution":
        return self

    @property
    def kind(self) -> DistributionType:
        return DistributionType.SEQUENTIAL


class LinearDistribution(PixelDistribution):
    """Evenly spaced pixels spanning the first to the last pixel of the image.

    ``length`` is the number of pixel visits. It is derived from the message
    when encoding and has to be handed back explicitly when decoding.
    """

    def __init__(self, length: int = 0):
        if length < 0:
            raise InvalidConfigurationError(f"linear distribution length must be >= 0. Got {length}")
        self.length = length

    def pixel_indices(self, width: int, height: int) -> List[int]:
        pixel_count = width * height
        if self.length > pixel_count:
            raise InvalidConfigurationError(
                f"linear distribution length {self.length} exceeds pixel count {pixel_count}"
            )
        return get_linspace(0.0, float(pixel_count - 1), self.length)

    def coordinates(self, width: int, height: int) -> Iterator[Tuple[int, int]]:
        for index in self.pixel_indices(width, height):
            yield index_to_coordinate(index, width)

    def for_bits(self, num_bits: int) -> "LinearDistribution":
        return LinearDistribution(visit_count(num_bits))

    @property
    def kind(self) -> DistributionType:
        return DistributionType.LINEAR


def create_distribution(spec: BitDistributionSpec) -> PixelDistribution:
    if spec.type == DistributionType.LINEAR:
        return LinearDistribution(spec.length)
    return SequentialDistribution()
