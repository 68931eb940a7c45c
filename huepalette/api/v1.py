"""
Hue Palette v1 API Routes
Implements /v1/palette and supporting routes.
"""
import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from huepalette import __version__
from huepalette.config import config
from huepalette.schemas import ErrorResponse, PaletteResponse
from huepalette.services.colors.extract_api import handle_extract
from huepalette.services.observability import get_metrics_collector

router = APIRouter(prefix="/v1", tags=["Palette"])


@router.post("/palette",
             response_model=PaletteResponse,
             responses={
                 400: {"model": ErrorResponse, "description": "Undecodable image or invalid parameters"},
                 415: {"model": ErrorResponse, "description": "Unsupported media type"},
             },
             summary="Extract Palette",
             description="Extract background, primary, secondary and detail colors from an image")
async def extract_palette_endpoint(
    file: UploadFile = File(..., description="Image file"),
    width: Optional[int] = Query(None, description="Analysis width in pixels (requires height)"),
    height: Optional[int] = Query(None, description="Analysis height in pixels (requires width)"),
    include_swatch: bool = Query(config.INCLUDE_SWATCH, description="Render a PNG swatch strip"),
    chip_size: int = Query(config.SWATCH_CHIP_SIZE, description="Swatch chip size in pixels (4-256)")
) -> PaletteResponse:
    """Palette extraction endpoint."""
    if not config.validate_target_size(width, height):
        raise HTTPException(
            status_code=400,
            detail=f"width and height must be given together, each in [1, {config.MAX_TARGET_EDGE}]"
        )

    if include_swatch and not config.validate_chip_size(chip_size):
        raise HTTPException(
            status_code=400,
            detail=f"chip_size must be between 4 and 256, got {chip_size}"
        )

    return await handle_extract(
        file=file,
        target_size=config.target_size(width, height),
        include_swatch=include_swatch,
        chip_size=chip_size
    )


@router.get("/healthz",
            summary="Health Check",
            description="Liveness probe")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    return {
        "ok": True,
        "service": "hue-palette",
        "version": __version__,
        "timestamp": int(time.time())
    }


@router.get("/metrics",
            summary="Pipeline Metrics",
            description="Aggregated per-stage extraction timings")
async def get_metrics() -> Dict[str, Any]:
    """Metrics endpoint."""
    return get_metrics_collector().get_all_stats()
