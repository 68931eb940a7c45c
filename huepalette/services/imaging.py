"""
Hue Palette Imaging Utilities
Handles image decoding, resizing, rasterization and upload validation.
"""
import io
from typing import Tuple, Union

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from huepalette.config import config


ImageInput = Union[Image.Image, np.ndarray, bytes]


class ImageDecodeError(ValueError):
    """Raised when an image cannot be decoded or rasterized."""


def decode(image_bytes: bytes) -> Image.Image:
    """
    Decode encoded image bytes with PIL.

    Args:
        image_bytes: Raw file bytes (PNG, JPEG, ...)

    Returns:
        Fully loaded PIL image

    Raises:
        ImageDecodeError: For empty, truncated or unsupported data
    """
    if not image_bytes:
        raise ImageDecodeError("Empty image data")

    try:
        pil_image = Image.open(io.BytesIO(image_bytes))
        pil_image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image: {str(e)}") from e

    return pil_image


def rasterize(image: ImageInput) -> np.ndarray:
    """
    Convert an image to an RGBA8 pixel buffer.

    Args:
        image: PIL image, encoded bytes, or uint8 array of shape (H, W),
            (H, W, 3) RGB or (H, W, 4) RGBA

    Returns:
        uint8 array of shape (H, W, 4), top-left origin

    Raises:
        ImageDecodeError: For zero dimensions or unsupported inputs
    """
    if isinstance(image, (bytes, bytearray)):
        image = decode(bytes(image))

    if isinstance(image, Image.Image):
        if image.width == 0 or image.height == 0:
            raise ImageDecodeError("Image has zero dimensions")
        try:
            rgba = np.array(image.convert("RGBA"), dtype=np.uint8)
        except (OSError, ValueError) as e:
            raise ImageDecodeError(f"Failed to rasterize image: {str(e)}") from e
    elif isinstance(image, np.ndarray):
        rgba = _array_to_rgba(image)
    else:
        raise ImageDecodeError(f"Unsupported image type: {type(image).__name__}")

    height, width = rgba.shape[:2]
    if width == 0 or height == 0:
        raise ImageDecodeError("Image has zero dimensions")

    return np.ascontiguousarray(rgba)


def _array_to_rgba(arr: np.ndarray) -> np.ndarray:
    if arr.dtype != np.uint8:
        raise ImageDecodeError(f"Expected uint8 pixel data, got {arr.dtype}")

    if arr.ndim in (2, 3) and (arr.shape[0] == 0 or arr.shape[1] == 0):
        raise ImageDecodeError("Image has zero dimensions")

    if arr.ndim == 2:
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
    if arr.ndim == 3 and arr.shape[2] == 3:
        return cv2.cvtColor(arr, cv2.COLOR_RGB2RGBA)
    if arr.ndim == 3 and arr.shape[2] == 4:
        return arr

    raise ImageDecodeError(f"Unsupported pixel array shape: {arr.shape}")


def default_target_size(width: int, height: int, target_width: int = None) -> Tuple[int, int]:
    """
    Compute a target size with fixed width that preserves aspect ratio.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        target_width: Output width (default from config)

    Returns:
        Tuple of (width, height)
    """
    if target_width is None:
        target_width = config.DEFAULT_WIDTH

    if width <= 0 or height <= 0:
        raise ImageDecodeError("Image has zero dimensions")

    ratio = width / height
    target_height = max(1, int(round(target_width / ratio)))
    return target_width, target_height


def resize(pixels: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """
    Resize a pixel buffer to (width, height).

    Uses INTER_AREA when shrinking and INTER_CUBIC when enlarging.

    Args:
        pixels: Pixel buffer (H, W, C)
        size: Target (width, height)

    Returns:
        Resized pixel buffer, or the input when the size already matches
    """
    new_width, new_height = size
    if new_width <= 0 or new_height <= 0:
        raise ImageDecodeError(f"Invalid target size: {new_width}x{new_height}")

    height, width = pixels.shape[:2]
    if (width, height) == (new_width, new_height):
        return pixels

    if new_width * new_height < width * height:
        interpolation = cv2.INTER_AREA
    else:
        interpolation = cv2.INTER_CUBIC

    return cv2.resize(pixels, (new_width, new_height), interpolation=interpolation)


def pixel_at(pixels: np.ndarray, x: int, y: int) -> Tuple[int, int, int, int]:
    """
    Read one RGBA pixel with bounds checking.

    Raises:
        IndexError: If (x, y) lies outside the buffer
    """
    height, width = pixels.shape[:2]
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) outside {width}x{height} buffer")

    r, g, b, a = pixels[y, x]
    return int(r), int(g), int(b), int(a)


def premultiply_opaque(pixels: np.ndarray) -> np.ndarray:
    """
    Premultiply RGB by alpha and force alpha to 255.

    Transparent regions become black, as when the image is drawn into a
    zeroed premultiplied-alpha context.
    """
    out = pixels.copy()
    alpha = pixels[..., 3:4].astype(np.uint16)
    out[..., :3] = ((pixels[..., :3].astype(np.uint16) * alpha + 127) // 255).astype(np.uint8)
    out[..., 3] = 255
    return out


def get_image_dimensions(pixels: np.ndarray) -> Tuple[int, int]:
    """
    Get image width and height.

    Args:
        pixels: Input pixel buffer

    Returns:
        Tuple of (width, height)
    """
    height, width = pixels.shape[:2]
    return width, height


# ============================================================================
# UPLOAD VALIDATION
# ============================================================================

def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file for size and format compliance.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    # Check file size (file.size might be None for some clients)
    if getattr(file, "size", None) and file.size > config.max_file_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )


async def read_upload(file: UploadFile) -> Image.Image:
    """
    Read and decode an uploaded image file.

    Args:
        file: FastAPI UploadFile object

    Returns:
        Decoded PIL image

    Raises:
        HTTPException: 400 for read or decode errors
    """
    try:
        file_bytes = await file.read()
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(file_bytes) > config.max_file_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    try:
        return decode(file_bytes)
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
