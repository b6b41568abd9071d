"""
Validation utilities for steganography operations
"""

from typing import Optional

from ..core.errors import CapacityExceededError, InvalidConfigurationError
from ..models.stego_models import BitDistributionSpec, DistributionType, StegMethod, StegoOptions

MIN_SIGNIFICANT_BIT = 1
MAX_SIGNIFICANT_BIT = 4


def validate_max_bit(max_bit: Optional[int]) -> None:
    """
    Validate the maximum significant bit for random significant bit encoding

    Raises:
        InvalidConfigurationError: If max_bit is missing or outside 1-4
    """
    if max_bit is None:
        raise InvalidConfigurationError("max-bit is required for random significant bit encoding")
    if not isinstance(max_bit, int) or not MIN_SIGNIFICANT_BIT <= max_bit <= MAX_SIGNIFICANT_BIT:
        raise InvalidConfigurationError(
            f"max-bit must be between {MIN_SIGNIFICANT_BIT}-{MAX_SIGNIFICANT_BIT}. Got {max_bit}"
        )


def validate_options(options: StegoOptions) -> None:
    """
    Validate request options before a codec is built

    Args:
        options: Options to validate

    Raises:
        InvalidConfigurationError: If a strategy parameter is missing or out of range
    """
    if options.method == StegMethod.RANDOM_SIGNIFICANT_BIT:
        validate_max_bit(options.max_bit)
        if not options.seed:
            raise InvalidConfigurationError("seed is required for random significant bit encoding")
    elif options.max_bit is not None:
        validate_max_bit(options.max_bit)

    if options.distribution.length < 0:
        raise InvalidConfigurationError(
            f"linear distribution length must be >= 0. Got {options.distribution.length}"
        )


def parse_method(value: str) -> StegMethod:
    try:
        return StegMethod(value.strip().lower())
    except ValueError as exc:
        raise InvalidConfigurationError(f"unknown encoding method: {value}") from exc


def parse_distribution(value: str) -> BitDistributionSpec:
    """
    Parse a textual distribution selector

    Accepts ``sequential``, ``linear`` and ``linear-N`` where N is the
    pixel visit count reported when the message was encoded.

    Raises:
        InvalidConfigurationError: If the name is unknown or N is not a non-negative integer
    """
    parts = value.strip().lower().split("-")
    name = parts[0]

    if name == DistributionType.SEQUENTIAL.value and len(parts) == 1:
        return BitDistributionSpec(type=DistributionType.SEQUENTIAL)

    if name == DistributionType.LINEAR.value and len(parts) <= 2:
        raw_length = parts[1] if len(parts) == 2 else "0"
        try:
            length = int(raw_length)
        except ValueError as exc:
            raise InvalidConfigurationError(
                f"error parsing message length in linear bit distribution: {raw_length!r}"
            ) from exc
        if length < 0:
            raise InvalidConfigurationError(f"linear distribution length must be >= 0. Got {length}")
        return BitDistributionSpec(type=DistributionType.LINEAR, length=length)

    raise InvalidConfigurationError(f"unknown bit distribution {value}")


def validate_message_fits(message_bytes: int, capacity_bytes: int) -> None:
    """
    Validate that a message fits in the image capacity

    Raises:
        CapacityExceededError: If the message is larger than the capacity
    """
    if message_bytes > capacity_bytes:
        raise CapacityExceededError(message_bytes, capacity_bytes)


def validate_bit_count(bit_count: Optional[int], end_marker: bool) -> None:
    """
    Validate the number of bits to read on a marker-free decode

    Raises:
        InvalidConfigurationError: If bit_count is negative or given while the end marker is expected
    """
    if bit_count is None:
        return
    if end_marker:
        raise InvalidConfigurationError("bit_count is only used when the end marker is disabled")
    if not isinstance(bit_count, int) or bit_count < 0:
        raise InvalidConfigurationError(f"bit_count must be >= 0. Got {bit_count}")
