"""
Main service class for RGB bit steganography operations
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from ..models.stego_models import (
    DistributionType,
    StegoCapacityResult,
    StegoDecodeRequest,
    StegoEncodeRequest,
    StegoHideResult,
    StegoOptions,
    StegoRevealResult,
    StegMethod,
)
from ..utils.image_utils import get_image_dimensions, human_bytes, image_to_grid
from ..utils.validation import validate_bit_count, validate_message_fits, validate_options
from .bit_strategy import BitStrategyFactory
from .distribution import create_distribution
from .steganography import END_MARKER_BITS, BitEncoder, max_message_bytes

logger = logging.getLogger(__name__)


def build_encoder(options: StegoOptions) -> BitEncoder:
    """
    Build a fresh codec for one encode or decode call

    Args:
        options: Steganography options

    Returns:
        BitEncoder with its own strategy and distribution

    Raises:
        InvalidConfigurationError: If the options are invalid
    """
    validate_options(options)
    strategy = BitStrategyFactory.create(options)
    distribution = create_distribution(options.distribution)
    return BitEncoder(strategy, distribution, end_marker=options.end_marker)


class ImageStegoService:
    """
    Main service class for RGB bit steganography operations

    Hides a byte message in the low-order bits of an image's RGB channels
    and recovers it, using a selectable bit strategy and pixel distribution.
    """

    def capacity(
        self,
        image: Image.Image,
        method: StegMethod = StegMethod.LEAST_SIGNIFICANT_BIT,
    ) -> StegoCapacityResult:
        """
        Calculate the maximum message size for an image

        Args:
            image: Input image
            method: Encoding method to report on

        Returns:
            StegoCapacityResult with capacity information
        """
        width, height = get_image_dimensions(image)
        capacity_bytes = max_message_bytes(width, height)
        return StegoCapacityResult(
            width=width,
            height=height,
            method=method,
            capacity_bits=max(0, width * height * 3 - END_MARKER_BITS),
            capacity_bytes=capacity_bytes,
            capacity_human=human_bytes(capacity_bytes),
        )

    def hide_in_grid(self, grid: np.ndarray, req: StegoEncodeRequest) -> Tuple[np.ndarray, StegoHideResult]:
        """
        Hide a message in a pixel grid

        Args:
            grid: Cover pixel grid of shape (height, width, 3)
            req: Encode request with message and options

        Returns:
            Tuple of (stego_grid, result_metadata)

        Raises:
            InvalidConfigurationError: If options are invalid
            CapacityExceededError: If the message does not fit
        """
        options = req.options
        encoder = build_encoder(options)

        capacity_bytes = encoder.max_bytes(grid)
        validate_message_fits(len(req.message), capacity_bytes)

        stego_grid, distribution = encoder.encode(grid, req.message)

        linear_length = None
        if distribution.kind == DistributionType.LINEAR:
            linear_length = distribution.length
            logger.info("Note: use length '%d' when decoding with linear distribution", linear_length)

        logger.info(
            "Encoded %d bytes with %s/%s (capacity %d bytes)",
            len(req.message), options.method.value, distribution.kind.value, capacity_bytes,
        )

        result = StegoHideResult(
            payload_size_bytes=len(req.message),
            used_capacity_bits=(len(req.message) * 8) + (END_MARKER_BITS if options.end_marker else 0),
            capacity_bytes=capacity_bytes,
            method=options.method,
            distribution=distribution.kind,
            linear_length=linear_length,
            end_marker=options.end_marker,
        )
        return stego_grid, result

    def hide(self, cover: Image.Image, req: StegoEncodeRequest) -> Tuple[np.ndarray, StegoHideResult]:
        """
        Hide a message in an image

        Returns:
            Tuple of (stego_grid, result_metadata). The grid is handed to an
            image writer by the caller.
        """
        return self.hide_in_grid(image_to_grid(cover), req)

    def reveal_from_grid(self, grid: np.ndarray, req: StegoDecodeRequest) -> StegoRevealResult:
        """
        Reveal a hidden message from a pixel grid

        Raises:
            InvalidConfigurationError: If options are invalid
            EncodingNotFoundError: If the end marker was not found
            DecodingError: If the extracted bits do not form whole bytes
        """
        options = req.options
        validate_bit_count(req.bit_count, options.end_marker)
        encoder = build_encoder(options)
        data = encoder.decode(grid, bit_count=req.bit_count)

        logger.info(
            "Decoded %d bytes with %s/%s",
            len(data), options.method.value, options.distribution.type.value,
        )
        return StegoRevealResult(
            data=data,
            size_bytes=len(data),
            method=options.method,
            distribution=options.distribution.type,
        )

    def reveal(self, stego_image: Image.Image, req: Optional[StegoDecodeRequest] = None) -> StegoRevealResult:
        return self.reveal_from_grid(image_to_grid(stego_image), req or StegoDecodeRequest())
