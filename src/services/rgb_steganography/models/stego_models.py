from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StegMethod(str, Enum):
    LEAST_SIGNIFICANT_BIT = "lsb"
    RANDOM_SIGNIFICANT_BIT = "rsb"


class DistributionType(str, Enum):
    SEQUENTIAL = "sequential"
    LINEAR = "linear"


class OutputFormat(str, Enum):
    PNG = "png"
    RAW = "raw"


class BitDistributionSpec(BaseModel):
    type: DistributionType = DistributionType.SEQUENTIAL
    length: int = Field(default=0, description="Pixel visit count, required when decoding a linear distribution")


class StegoOptions(BaseModel):
    method: StegMethod = Field(default=StegMethod.LEAST_SIGNIFICANT_BIT, description="Bit encoding method")
    seed: Optional[str] = Field(default=None, description="Seed for random significant bit encoding")
    max_bit: Optional[int] = Field(default=None, description="Maximum significant bit to modify (1-4)")
    distribution: BitDistributionSpec = Field(default_factory=BitDistributionSpec)
    end_marker: bool = Field(default=True, description="Append / expect the end-of-message marker")


class StegoEncodeRequest(BaseModel):
    message: bytes
    options: StegoOptions = Field(default_factory=StegoOptions)


class StegoDecodeRequest(BaseModel):
    options: StegoOptions = Field(default_factory=StegoOptions)
    bit_count: Optional[int] = Field(default=None, description="Bits to read when the end marker is disabled")


class StegoCapacityResult(BaseModel):
    width: int
    height: int
    method: StegMethod
    capacity_bits: int
    capacity_bytes: int
    capacity_human: str


class StegoHideResult(BaseModel):
    payload_size_bytes: int
    used_capacity_bits: int
    capacity_bytes: int
    method: StegMethod
    distribution: DistributionType
    linear_length: Optional[int] = None
    end_marker: bool = True


class StegoRevealResult(BaseModel):
    data: bytes
    size_bytes: int
    method: StegMethod
    distribution: DistributionType
