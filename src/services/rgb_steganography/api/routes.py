"""
API routes for the RGB Steganography Service
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse
from PIL import Image

from src.utility.constants_manager import ConstantsManager

from ..core.errors import CapacityExceededError, EncodingNotFoundError, StegError
from ..core.service import ImageStegoService
from ..models.stego_models import (
    OutputFormat,
    StegoCapacityResult,
    StegoDecodeRequest,
    StegoEncodeRequest,
    StegoOptions,
)
from ..utils.image_utils import grid_to_image, grid_to_raw_bytes, load_image_from_input
from ..utils.validation import parse_distribution, parse_method
from .responses import StegoAPIResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stego", tags=["stego"])

# Service instance
stego_service = ImageStegoService()
constants = ConstantsManager()


def send_response(
    status_code: int,
    message: str,
    path: Optional[str] = None,
    details: Optional[dict] = None
) -> JSONResponse:
    """
    Helper function to send consistent API responses

    Args:
        status_code: HTTP status code
        message: Response message
        path: Optional file path
        details: Optional additional details

    Returns:
        JSONResponse with consistent format
    """
    return JSONResponse(
        status_code=status_code,
        content=StegoAPIResult(
            success=status_code < 400,
            message=message,
            path=path,
            details=details
        ).dict()
    )


def send_error(exc: Exception) -> JSONResponse:
    if isinstance(exc, CapacityExceededError):
        return send_response(413, str(exc), details={
            "message_bytes": exc.message_bytes,
            "capacity_bytes": exc.capacity_bytes,
        })
    if isinstance(exc, EncodingNotFoundError):
        return send_response(404, str(exc))
    return send_response(400, str(exc))


def _ensure_dir(path: str) -> Path:
    out = Path(path)
    out.mkdir(parents=True, exist_ok=True)
    return out


async def _read_image(file: Optional[UploadFile], url: Optional[str]) -> Image.Image:
    if file is not None:
        return load_image_from_input(file=BytesIO(await file.read()))
    return load_image_from_input(url=url)


def _build_options(
    method: str,
    seed: Optional[str],
    max_bit: Optional[int],
    distribution: str,
    end_marker: bool,
) -> StegoOptions:
    return StegoOptions(
        method=parse_method(method),
        seed=seed,
        max_bit=max_bit,
        distribution=parse_distribution(distribution),
        end_marker=end_marker,
    )


@router.post("/capacity", response_model=StegoCapacityResult)
async def check_capacity(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    method: str = Form("lsb"),
):
    """
    Check the maximum message length an image can carry

    Args:
        file: The image file to check
        url: Image URL, used when no file is uploaded
        method: Encoding method (lsb, rsb)

    Returns:
        StegoCapacityResult with capacity information
    """
    try:
        img = await _read_image(file, url)
        return stego_service.capacity(img, parse_method(method))
    except StegError as e:
        return send_error(e)
    except Exception as e:
        logger.error(f"Error calculating capacity: {str(e)}")
        return send_response(400, str(e))


@router.post("/encode", response_model=StegoAPIResult)
async def encode(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    text: Optional[str] = Form(None),
    secret: Optional[UploadFile] = File(None),
    method: str = Form("lsb"),
    seed: Optional[str] = Form(None),
    max_bit: Optional[int] = Form(None),
    distribution: str = Form("sequential"),
    end_marker: bool = Form(True),
    output_filename: Optional[str] = Form(None),
    output_format: str = Form("png"),
):
    """
    Hide a text or file message in an image

    Args:
        file: Cover image
        url: Cover image URL, used when no file is uploaded
        text: Text message to hide
        secret: File to hide, used when no text is given
        method: Encoding method (lsb, rsb)
        seed: Seed for rsb
        max_bit: Maximum significant bit to modify for rsb (1-4)
        distribution: sequential or linear
        end_marker: Append the end-of-message marker
        output_filename: Optional custom output filename
        output_format: png, or raw for the bare RGB bytes

    Returns:
        StegoAPIResult with operation details
    """
    try:
        options = _build_options(method, seed, max_bit, distribution, end_marker)
        fmt = OutputFormat(output_format.lower())

        if text is not None:
            message = text.encode("utf-8")
        elif secret is not None:
            message = await secret.read()
        else:
            return send_response(400, "Provide text or secret")

        cover = await _read_image(file, url)
        stego_grid, result = stego_service.hide(cover, StegoEncodeRequest(message=message, options=options))

        out_dir = _ensure_dir(constants.get_output_dir())
        if fmt == OutputFormat.RAW:
            output_path = out_dir / Path(output_filename or "stego.rgb").name
            output_path.write_bytes(grid_to_raw_bytes(stego_grid))
        else:
            output_path = out_dir / Path(output_filename or "stego.png").with_suffix(".png").name
            grid_to_image(stego_grid).save(output_path, "PNG")

        details = {
            "payload_size_bytes": result.payload_size_bytes,
            "used_capacity_bits": result.used_capacity_bits,
            "capacity_bytes": result.capacity_bytes,
            "method": result.method.value,
            "distribution": result.distribution.value,
            "end_marker": result.end_marker,
        }
        message_text = f"Message hidden successfully using {result.method.value} with {result.distribution.value} distribution"
        if result.linear_length is not None:
            details["linear_length"] = result.linear_length
            message_text += f". Use length '{result.linear_length}' when decoding"

        return send_response(200, message_text, str(output_path), details)
    except StegError as e:
        return send_error(e)
    except Exception as e:
        logger.exception("Error encoding message")
        return send_response(400, str(e))


@router.post("/decode", response_model=StegoAPIResult)
async def decode(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    method: str = Form("lsb"),
    seed: Optional[str] = Form(None),
    max_bit: Optional[int] = Form(None),
    distribution: str = Form("sequential"),
    end_marker: bool = Form(True),
    bit_count: Optional[int] = Form(None),
    as_file: bool = Form(False),
    output_filename: Optional[str] = Form(None),
):
    """
    Reveal a hidden message from an image

    Args:
        file: The steganographic image
        url: Image URL, used when no file is uploaded
        method: Encoding method used (lsb, rsb)
        seed: Seed used for rsb
        max_bit: Maximum significant bit used for rsb
        distribution: sequential, or linear-N with the length reported at encode time
        end_marker: Expect the end-of-message marker
        bit_count: Number of bits to read when end_marker is false
        as_file: Write the message to a file instead of returning text
        output_filename: Optional name for the recovered file

    Returns:
        StegoAPIResult with the revealed message
    """
    try:
        options = _build_options(method, seed, max_bit, distribution, end_marker)
        img = await _read_image(file, url)
        result = stego_service.reveal(img, StegoDecodeRequest(options=options, bit_count=bit_count))

        details = {
            "size_bytes": result.size_bytes,
            "method": result.method.value,
            "distribution": result.distribution.value,
        }
        if as_file:
            out_dir = _ensure_dir(constants.get_recovered_dir())
            out_path = out_dir / Path(output_filename or "recovered.bin").name
            out_path.write_bytes(result.data)
            return send_response(200, f"Message revealed to '{out_path.name}'", str(out_path), details)

        details["text"] = result.data.decode("utf-8", errors="replace")
        return send_response(200, "Message revealed successfully", None, details)
    except StegError as e:
        return send_error(e)
    except Exception as e:
        logger.exception("Error decoding message")
        return send_response(400, str(e))
