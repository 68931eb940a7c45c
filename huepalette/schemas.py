"""
Hue Palette API Schemas
Pydantic models for palette extraction request/response validation.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("hue-palette", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class PaletteColor(BaseModel):
    """Single palette slot."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    rgba: List[float] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="Normalized RGBA channels"
    )


class PaletteArtifacts(BaseModel):
    """Palette extraction output artifacts."""
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG strip of background, primary, secondary, detail"
    )


class PaletteResponse(BaseModel):
    """Palette extraction response."""
    request_id: str = Field(..., description="Request identifier for tracing")
    width: int = Field(..., description="Source image width in pixels")
    height: int = Field(..., description="Source image height in pixels")
    background: PaletteColor = Field(..., description="Edge-derived background color")
    primary: PaletteColor = Field(..., description="Most frequent contrasting color")
    secondary: PaletteColor = Field(..., description="Next color distinct from primary")
    detail: PaletteColor = Field(..., description="Next color distinct from primary and secondary")
    artifacts: Optional[PaletteArtifacts] = Field(None, description="Optional artifacts")
    timings_ms: Dict[str, float] = Field(default_factory=dict, description="Stage timings in milliseconds")
