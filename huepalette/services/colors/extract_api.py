"""
Palette Extraction API Orchestrator

Coordinates an upload request from validation through palette extraction to
the optional swatch artifact.
"""

import time
from typing import Optional, Tuple

from fastapi import HTTPException, UploadFile

from huepalette.config import config
from huepalette.schemas import PaletteArtifacts, PaletteColor, PaletteResponse
from huepalette.services.colors.extraction import Palette, PaletteExtractor
from huepalette.services.colors.swatches import render_palette_swatch
from huepalette.services.imaging import ImageDecodeError, read_upload, validate_file_upload
from huepalette.utils.ids import generate_request_id
from huepalette.utils.logging import get_logger

logger = get_logger()


def _palette_fields(palette: Palette) -> dict:
    return {name: PaletteColor(**entry) for name, entry in palette.to_dict().items()}


async def handle_extract(
    file: UploadFile,
    target_size: Optional[Tuple[int, int]] = None,
    include_swatch: bool = True,
    chip_size: Optional[int] = None,
    extractor: Optional[PaletteExtractor] = None
) -> PaletteResponse:
    """
    Extract a palette from an uploaded image.

    Args:
        file: Uploaded image file
        target_size: Optional (width, height) to analyze at
        include_swatch: Whether to render the swatch artifact
        chip_size: Swatch chip size in pixels (default from config)
        extractor: Extractor to use (default built from config)

    Returns:
        PaletteResponse with the four palette colors

    Raises:
        HTTPException: 400 for undecodable input, 415 for unsupported types
    """
    request_id = generate_request_id("pal")
    start_time = time.time()

    logger.info("Starting palette extraction", extra={"request_id": request_id})

    try:
        validate_file_upload(file)
        image = await read_upload(file)
        width, height = image.size

        decode_time = (time.time() - start_time) * 1000
        logger.info(f"Decoded upload: {width}x{height}",
                    extra={"request_id": request_id, "ms_decode": decode_time})

        extractor = extractor or PaletteExtractor()

        extract_start = time.time()
        try:
            palette = extractor.extract(image, target_size)
        except ImageDecodeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        extract_time = (time.time() - extract_start) * 1000

        logger.info("Palette extraction complete",
                    extra={"request_id": request_id, "ms_extract": extract_time, **palette.hexes()})

        artifacts = None
        if include_swatch:
            swatch_b64 = None
            try:
                swatch_b64 = render_palette_swatch(palette, chip_size=chip_size or config.SWATCH_CHIP_SIZE)
            except (ValueError, RuntimeError) as e:
                logger.warning(f"Swatch generation failed: {str(e)}",
                               extra={"request_id": request_id})
            artifacts = PaletteArtifacts(swatch_png_b64=swatch_b64)

        total_time = (time.time() - start_time) * 1000

        return PaletteResponse(
            request_id=request_id,
            width=width,
            height=height,
            artifacts=artifacts,
            timings_ms={
                "decode": round(decode_time, 2),
                "extract": round(extract_time, 2),
                "total": round(total_time, 2),
            },
            **_palette_fields(palette)
        )

    except HTTPException as e:
        logger.warning(f"Palette request rejected: {e.detail}",
                       extra={"request_id": request_id, "status_code": e.status_code})
        raise

    except Exception as e:
        error_time = time.time() - start_time
        logger.error(f"Palette extraction failed: {str(e)}",
                     extra={
                         "request_id": request_id,
                         "ms_total": error_time * 1000,
                         "result": "error",
                         "error_type": type(e).__name__
                     })
        raise
