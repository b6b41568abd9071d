"""
RGB Steganography Service - Bit-level codec

Hides an arbitrary byte message in the low-order bits of an RGB image:
- Least significant bit or seeded random significant bit (1-4) encoding
- Sequential or evenly spaced (linear) pixel distribution
- End-of-message marker or explicit bit count on decode
- Capacity reporting
"""

__version__ = "1.0.0"
__author__ = "Image Lab Team"
