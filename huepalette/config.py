"""
Hue Palette Configuration
Manages environment variables and defaults for palette extraction services.
"""
import os
from typing import Optional, Tuple


class Config:
    """Configuration class for Hue Palette services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("HUE_MAX_FILE_MB", "10"))

    # Extraction defaults
    DEFAULT_WIDTH: int = int(os.environ.get("HUE_DEFAULT_WIDTH", "250"))
    MAX_TARGET_EDGE: int = int(os.environ.get("HUE_MAX_TARGET_EDGE", "4096"))
    WEIGHTED_CONTRAST: bool = bool(int(os.environ.get("HUE_WEIGHTED_CONTRAST", "0")))

    # Artifacts
    INCLUDE_SWATCH: bool = bool(int(os.environ.get("HUE_INCLUDE_SWATCH", "1")))
    SWATCH_CHIP_SIZE: int = int(os.environ.get("HUE_SWATCH_CHIP_SIZE", "40"))

    # Logging and observability
    LOG_LEVEL: str = os.environ.get("HUE_LOG_LEVEL", "INFO")
    METRICS_ENABLED: bool = bool(int(os.environ.get("HUE_METRICS_ENABLED", "1")))

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/bmp", "image/webp"]

    @classmethod
    def validate_target_size(cls, width: Optional[int], height: Optional[int]) -> bool:
        """Validate an optional target size; both dimensions or neither."""
        if width is None and height is None:
            return True
        if width is None or height is None:
            return False
        return 1 <= width <= cls.MAX_TARGET_EDGE and 1 <= height <= cls.MAX_TARGET_EDGE

    @classmethod
    def validate_chip_size(cls, chip_size: int) -> bool:
        """Validate swatch chip size."""
        return 4 <= chip_size <= 256

    @classmethod
    def max_file_bytes(cls) -> int:
        return cls.MAX_FILE_MB * 1024 * 1024

    @classmethod
    def target_size(cls, width: Optional[int], height: Optional[int]) -> Optional[Tuple[int, int]]:
        """Return a (width, height) tuple or None when the default sizing applies."""
        if width is None or height is None:
            return None
        return (width, height)


# Global config instance
config = Config()
