"""
Error types raised by the steganography codec and its validation layer
"""


class StegError(ValueError):
    """Base class for every steganography failure surfaced to callers"""


class CapacityExceededError(StegError):
    """The message does not fit in the cover image"""

    def __init__(self, message_bytes: int, capacity_bytes: int):
        self.message_bytes = message_bytes
        self.capacity_bytes = capacity_bytes
        super().__init__(
            f"Message length is too long. It exceeds capacity that can fit in the image supplied. "
            f"{message_bytes} > {capacity_bytes}. Try using either larger images or less data"
        )


class EncodingNotFoundError(StegError):
    """Decoding scanned the whole distribution without seeing the end marker"""

    def __init__(self, message: str = "Encoded message not found in data"):
        super().__init__(message)


class DecodingError(StegError):
    """Extracted bits could not be reassembled into bytes"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error decoding message: {reason}")


class InvalidConfigurationError(StegError):
    """Out-of-range or missing strategy / distribution parameters"""
