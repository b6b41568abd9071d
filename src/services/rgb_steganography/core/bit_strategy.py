from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, Type

import numpy as np

from ..models.stego_models import StegMethod, StegoOptions
from .errors import InvalidConfigurationError


class BitMask(IntEnum):
    """Single-bit masks for the four lowest bit positions of a channel byte"""

    ONE = 0b0000_0001
    TWO = 0b0000_0010
    FOUR = 0b0000_0100
    EIGHT = 0b0000_1000

    @classmethod
    def from_draw(cls, n: int) -> "BitMask":
        """Map a draw in 1..4 to the mask of bit position n - 1."""
        return cls(1 << (n - 1))


def _set_bit(value: int, bit: int, mask: int) -> int:
    if bit:
        return value | mask
    return value & ~mask & 0xFF


class BitStrategy(ABC):
    """Abstract base class for bit strategies.

    A bit strategy decides which bit of a channel byte carries one payload
    bit. Encoding and decoding must be called in the same order for the
    same message, since stateful strategies advance on every call.
    """

    @abstractmethod
    def encode(self, bit: int, value: int) -> int:
        """Store a payload bit into a channel byte.

        Args:
            bit: Payload bit (0 or 1)
            value: Channel byte

        Returns:
            The channel byte with exactly one bit set or cleared
        """
        pass

    @abstractmethod
    def decode(self, value: int) -> int:
        """Read back the payload bit stored in a channel byte."""
        pass

    @classmethod
    @abstractmethod
    def method(cls) -> str:
        """Return the StegMethod value this strategy implements."""
        pass

    @classmethod
    def from_options(cls, options: StegoOptions) -> "BitStrategy":
        """Build a strategy instance from validated options."""
        return cls()


class LeastSignificantBit(BitStrategy):
    def encode(self, bit: int, value: int) -> int:
        return _set_bit(value, bit, BitMask.ONE)

    def decode(self, value: int) -> int:
        return value & BitMask.ONE

    @classmethod
    def method(cls) -> str:
        return StegMethod.LEAST_SIGNIFICANT_BIT.value


def seed_from_string(seed: str) -> int:
    """Deterministic 64-bit seed derived from a user supplied string."""
    return int.from_bytes(hashlib.sha256(seed.encode("utf-8")).digest()[:8], "little", signed=False)


class RandomSignificantBit(BitStrategy):
    """Store each bit in one of the ``max_bit`` lowest bits, chosen by a seeded PRNG.

    The generator advances once per encoded or decoded bit, so an instance
    must not be reused across unrelated encode/decode calls.
    """

    def __init__(self, max_bit: int, seed: str):
        self.max_bit = max_bit
        self._rng = np.random.Generator(np.random.PCG64(seed_from_string(seed)))

    def _next_mask(self) -> BitMask:
        n = int(self._rng.integers(1, self.max_bit, endpoint=True))
        return BitMask.from_draw(n)

    def encode(self, bit: int, value: int) -> int:
        return _set_bit(value, bit, self._next_mask())

    def decode(self, value: int) -> int:
        return 1 if value & self._next_mask() else 0

    @classmethod
    def method(cls) -> str:
        return StegMethod.RANDOM_SIGNIFICANT_BIT.value

    @classmethod
    def from_options(cls, options: StegoOptions) -> "RandomSignificantBit":
        return cls(options.max_bit, options.seed)


class BitStrategyFactory:
    """Factory for creating bit strategy objects from request options.

    Strategies are created fresh for every call so that a seeded generator
    is never shared between two encode/decode sessions.
    """

    _registry: Dict[str, Type[BitStrategy]] = {}

    @classmethod
    def register(cls, strategy: Type[BitStrategy]) -> None:
        cls._registry[strategy.method()] = strategy

    @classmethod
    def create(cls, options: StegoOptions) -> BitStrategy:
        """Create a bit strategy instance for the given options.

        Args:
            options: Validated steganography options

        Returns:
            A new strategy instance

        Raises:
            InvalidConfigurationError: If the method is not registered
        """
        if not cls.is_registered(options.method):
            raise InvalidConfigurationError(f"unknown encoding method: {options.method.value}")

        strategy_class = cls._registry[options.method.value]
        return strategy_class.from_options(options)

    @classmethod
    def is_registered(cls, method: StegMethod) -> bool:
        return method.value in cls._registry


BitStrategyFactory.register(LeastSignificantBit)
BitStrategyFactory.register(RandomSignificantBit)
