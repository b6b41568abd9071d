"""
Core bit-level codec: spreads a byte message over the channel bytes of an RGB pixel grid
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .bit_strategy import BitStrategy
from .distribution import BITS_PER_VISIT, PixelDistribution, SequentialDistribution, visit_count
from .errors import CapacityExceededError, DecodingError, EncodingNotFoundError

logger = logging.getLogger(__name__)

# End-of-message marker appended to every encoded message
END_MARKER = b"$TGV"
END_MARKER_BITS = len(END_MARKER) * 8


def bytes_to_bits(data: bytes) -> List[int]:
    """Expand bytes to a list of bits, most significant bit first."""
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8)).tolist()


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    """
    Regroup bits (most significant bit first) into bytes

    Raises:
        DecodingError: If the bit count is not a multiple of 8
    """
    if len(bits) % 8:
        raise DecodingError(f"reconstructing byte: {len(bits)} bits do not form whole bytes")
    return np.packbits(np.array(bits, dtype=np.uint8)).tobytes()


def has_end_marker(bits: Sequence[int], end: Sequence[int]) -> bool:
    if len(bits) < len(end):
        return False
    return list(bits[len(bits) - len(end):]) == list(end)


def max_message_bytes(width: int, height: int) -> int:
    """Maximum message bytes that fit a width x height image, marker included."""
    return max(0, (width * height * BITS_PER_VISIT - END_MARKER_BITS) // 8)


class BitEncoder:
    """
    Encodes a message into a pixel grid and decodes it back

    The grid is a uint8 array of shape (height, width, 3). Each pixel visit
    carries up to three bits, one per channel in R, G, B order.
    """

    def __init__(
        self,
        strategy: BitStrategy,
        distribution: Optional[PixelDistribution] = None,
        end_marker: bool = True,
    ):
        self.strategy = strategy
        self.distribution = distribution or SequentialDistribution()
        self.end_marker = end_marker

    def max_bytes(self, grid: np.ndarray) -> int:
        height, width = grid.shape[:2]
        if not self.end_marker:
            return (width * height * BITS_PER_VISIT) // 8
        return max_message_bytes(width, height)

    def encode(self, grid: np.ndarray, message: bytes) -> Tuple[np.ndarray, PixelDistribution]:
        """
        Encode a message into a copy of the grid

        The caller validates capacity beforehand; a message needing more
        pixel visits than the grid has raises CapacityExceededError.

        Args:
            grid: Cover pixel grid
            message: Bytes to hide

        Returns:
            Tuple of (stego_grid, distribution_used). For a linear
            distribution the returned instance holds the visit count
            required for decoding.
        """
        data = message + END_MARKER if self.end_marker else message
        bits = bytes_to_bits(data)

        out = grid.copy()
        height, width = out.shape[:2]
        if visit_count(len(bits)) > width * height:
            raise CapacityExceededError(len(message), self.max_bytes(out))

        distribution = self.distribution.for_bits(len(bits))
        coordinates = distribution.coordinates(width, height)

        for start, (x, y) in zip(range(0, len(bits), BITS_PER_VISIT), coordinates):
            pixel = out[y, x]
            for channel, bit in enumerate(bits[start:start + BITS_PER_VISIT]):
                pixel[channel] = self.strategy.encode(bit, int(pixel[channel]))

        return out, distribution

    def _channel_values(self, grid: np.ndarray) -> Iterator[int]:
        height, width = grid.shape[:2]
        for x, y in self.distribution.coordinates(width, height):
            for value in grid[y, x, :BITS_PER_VISIT]:
                yield int(value)

    def decode(self, grid: np.ndarray, bit_count: Optional[int] = None) -> bytes:
        """
        Decode a message from the grid

        Args:
            grid: Stego pixel grid
            bit_count: Number of bits to read when the end marker is disabled

        Returns:
            The hidden message bytes

        Raises:
            EncodingNotFoundError: If the end marker is expected but never seen
            DecodingError: If the extracted bits do not form whole bytes
        """
        end = bytes_to_bits(END_MARKER)
        limit = None if self.end_marker else bit_count
        bitstream: List[int] = []
        found = False

        for value in self._channel_values(grid):
            if limit is not None and len(bitstream) >= limit:
                break
            bitstream.append(self.strategy.decode(value))
            if self.end_marker and has_end_marker(bitstream, end):
                found = True
                break

        if self.end_marker:
            if not found:
                raise EncodingNotFoundError()
            # message found in the bitstream, remove the end marker
            del bitstream[-len(end):]
        elif bit_count is not None and len(bitstream) < bit_count:
            raise DecodingError(f"only {len(bitstream)} of {bit_count} requested bits available")

        logger.debug("Extracted %d message bits", len(bitstream))
        return bits_to_bytes(bitstream)
