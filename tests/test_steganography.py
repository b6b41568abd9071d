"""Encode / decode tests for the bit codec."""

from __future__ import annotations

import numpy as np
import pytest

from src.services.rgb_steganography.core.bit_strategy import LeastSignificantBit, RandomSignificantBit
from src.services.rgb_steganography.core.distribution import LinearDistribution, SequentialDistribution
from src.services.rgb_steganography.core.errors import CapacityExceededError, DecodingError, EncodingNotFoundError
from src.services.rgb_steganography.core.steganography import (
    END_MARKER,
    BitEncoder,
    bits_to_bytes,
    bytes_to_bits,
    has_end_marker,
    max_message_bytes,
)


def _strategy(kind: str):
    if kind == "lsb":
        return LeastSignificantBit()
    return RandomSignificantBit(4, "correct horse battery staple")


def _distribution(kind: str, length: int = 0):
    if kind == "linear":
        return LinearDistribution(length)
    return SequentialDistribution()


class TestBitHelpers:
    def test_msb_first_expansion(self) -> None:
        assert bytes_to_bits(b"\x41") == [0, 1, 0, 0, 0, 0, 0, 1]

    def test_marker_is_32_bits(self) -> None:
        assert len(bytes_to_bits(END_MARKER)) == 32

    def test_regroup_into_bytes(self) -> None:
        assert bits_to_bytes([0, 1, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1]) == b"\x41\xff"

    def test_partial_byte_is_an_error(self) -> None:
        with pytest.raises(DecodingError):
            bits_to_bytes([1, 0, 1])

    def test_has_end_marker(self) -> None:
        end = [1, 0, 1]
        assert has_end_marker([0, 0, 1, 0, 1], end)
        assert not has_end_marker([0, 1], end)
        assert not has_end_marker([1, 0, 1, 1], end)


class TestCapacity:
    @pytest.mark.parametrize("width,height", [(4, 4), (16, 12), (1, 11), (100, 37)])
    def test_formula(self, width: int, height: int) -> None:
        assert max_message_bytes(width, height) == (3 * width * height - 32) // 8

    def test_tiny_image_has_no_capacity(self) -> None:
        assert max_message_bytes(2, 2) == 0

    def test_marker_free_capacity_uses_every_channel(self, grid: np.ndarray) -> None:
        encoder = BitEncoder(LeastSignificantBit(), end_marker=False)
        assert encoder.max_bytes(grid) == (16 * 12 * 3) // 8


class TestConcreteScenario:
    def test_single_byte_in_four_by_four(self) -> None:
        grid = np.full((4, 4, 3), 0x80, dtype=np.uint8)
        encoder = BitEncoder(LeastSignificantBit(), SequentialDistribution())
        assert encoder.max_bytes(grid) == 2

        stego, _ = encoder.encode(grid, b"\x41")
        decoded = BitEncoder(LeastSignificantBit(), SequentialDistribution()).decode(stego)
        assert decoded == b"\x41"

    def test_last_visit_leaves_unused_channels_untouched(self) -> None:
        grid = np.full((4, 4, 3), 0xAB, dtype=np.uint8)
        stego, _ = BitEncoder(LeastSignificantBit()).encode(grid, b"\xff")
        # 40 bits: 13 full visits, then the final 0 bit of "V" in pixel (1, 3)
        assert stego[3, 1, 0] == 0xAA
        assert stego[3, 1, 1] == 0xAB
        assert stego[3, 1, 2] == 0xAB
        assert (stego[3, 2:] == 0xAB).all()


class TestRoundTrip:
    @pytest.mark.parametrize("strategy", ["lsb", "rsb"])
    @pytest.mark.parametrize("distribution", ["sequential", "linear"])
    @pytest.mark.parametrize("message", [b"", b"x", b"Hello, World!", bytes(range(32))])
    def test_round_trip(self, grid: np.ndarray, strategy: str, distribution: str, message: bytes) -> None:
        stego, used = BitEncoder(_strategy(strategy), _distribution(distribution)).encode(grid, message)

        length = used.length if distribution == "linear" else 0
        decoder = BitEncoder(_strategy(strategy), _distribution(distribution, length))
        assert decoder.decode(stego) == message

    def test_full_capacity(self, grid: np.ndarray) -> None:
        encoder = BitEncoder(LeastSignificantBit())
        message = bytes(range(256))[: encoder.max_bytes(grid)]
        stego, _ = encoder.encode(grid, message)
        assert BitEncoder(LeastSignificantBit()).decode(stego) == message

    def test_does_not_mutate_cover(self, grid: np.ndarray) -> None:
        original = grid.copy()
        BitEncoder(LeastSignificantBit()).encode(grid, b"payload")
        assert np.array_equal(grid, original)

    def test_linear_spreads_over_image(self, grid: np.ndarray) -> None:
        stego, used = BitEncoder(LeastSignificantBit(), LinearDistribution()).encode(grid, b"hi")
        assert used.length == 16  # (2 + 4) * 8 bits / 3 per visit, rounded up
        changed_rows = np.nonzero((stego != grid).any(axis=(1, 2)))[0]
        assert changed_rows.max() > grid.shape[0] // 2


class TestMarkerFree:
    def test_bit_count_round_trip(self, grid: np.ndarray) -> None:
        stego, _ = BitEncoder(LeastSignificantBit(), end_marker=False).encode(grid, b"raw")
        decoder = BitEncoder(LeastSignificantBit(), end_marker=False)
        assert decoder.decode(stego, bit_count=24) == b"raw"

    def test_zero_bits(self, grid: np.ndarray) -> None:
        assert BitEncoder(LeastSignificantBit(), end_marker=False).decode(grid, bit_count=0) == b""

    def test_full_scan_requires_whole_bytes(self) -> None:
        grid = np.zeros((1, 3, 3), dtype=np.uint8)  # 9 channel bytes
        with pytest.raises(DecodingError):
            BitEncoder(LeastSignificantBit(), end_marker=False).decode(grid)

    def test_bit_count_larger_than_image(self) -> None:
        grid = np.zeros((1, 3, 3), dtype=np.uint8)
        with pytest.raises(DecodingError):
            BitEncoder(LeastSignificantBit(), end_marker=False).decode(grid, bit_count=16)


class TestDeterminism:
    def test_lsb_is_deterministic(self, grid: np.ndarray) -> None:
        first, _ = BitEncoder(LeastSignificantBit()).encode(grid, b"same message")
        second, _ = BitEncoder(LeastSignificantBit()).encode(grid, b"same message")
        assert np.array_equal(first, second)

    def test_rsb_same_seed_is_reproducible(self, grid: np.ndarray) -> None:
        first, _ = BitEncoder(RandomSignificantBit(4, "seed")).encode(grid, b"same message")
        second, _ = BitEncoder(RandomSignificantBit(4, "seed")).encode(grid, b"same message")
        assert np.array_equal(first, second)

    def test_rsb_different_seeds_differ(self, grid: np.ndarray) -> None:
        first, _ = BitEncoder(RandomSignificantBit(4, "seed-one")).encode(grid, b"same message")
        second, _ = BitEncoder(RandomSignificantBit(4, "seed-two")).encode(grid, b"same message")
        assert not np.array_equal(first, second)


class TestMarkerAbsence:
    def test_blank_image(self, blank_grid: np.ndarray) -> None:
        with pytest.raises(EncodingNotFoundError):
            BitEncoder(LeastSignificantBit()).decode(blank_grid)

    def test_message_encoded_without_marker(self, blank_grid: np.ndarray) -> None:
        stego, _ = BitEncoder(LeastSignificantBit(), end_marker=False).encode(blank_grid, b"no end")
        with pytest.raises(EncodingNotFoundError):
            BitEncoder(LeastSignificantBit()).decode(stego)

    def test_linear_length_zero_finds_nothing(self, grid: np.ndarray) -> None:
        stego, _ = BitEncoder(LeastSignificantBit(), LinearDistribution()).encode(grid, b"hi")
        with pytest.raises(EncodingNotFoundError):
            BitEncoder(LeastSignificantBit(), LinearDistribution(0)).decode(stego)


class TestOverflow:
    def test_message_larger_than_grid_raises_capacity_error(self) -> None:
        grid = np.zeros((2, 2, 3), dtype=np.uint8)
        with pytest.raises(CapacityExceededError):
            BitEncoder(LeastSignificantBit()).encode(grid, b"too long")

    def test_linear_overflow_raises_capacity_error(self) -> None:
        grid = np.zeros((2, 2, 3), dtype=np.uint8)
        with pytest.raises(CapacityExceededError):
            BitEncoder(LeastSignificantBit(), LinearDistribution()).encode(grid, b"too long")

    def test_exact_fit_without_marker(self) -> None:
        grid = np.zeros((2, 4, 3), dtype=np.uint8)  # 24 channel bytes
        encoder = BitEncoder(LeastSignificantBit(), end_marker=False)
        stego, _ = encoder.encode(grid, b"abc")
        assert encoder.decode(stego, bit_count=24) == b"abc"
