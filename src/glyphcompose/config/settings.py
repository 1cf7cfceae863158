"""Configuration settings for glyphcompose."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class BBoxPrecision(str, Enum):
    """How curves are measured when computing bounding boxes."""

    ANCHORS = "anchors"
    SAMPLED = "sampled"
    EXACT = "exact"


class UnresolvedPolicy(str, Enum):
    """What to render for a position pair that has no accepted offset."""

    BASE_ONLY = "base_only"
    EMPTY = "empty"


class BBoxConfig(BaseModel):
    """Configuration for bounding-box measurement."""

    precision: BBoxPrecision = Field(
        default=BBoxPrecision.SAMPLED,
        description="Curve handling: raw anchor points, flattened curves, or exact extrema",
    )
    flatten_tolerance: float = Field(
        default=1.0,
        ge=0.05,
        le=20.0,
        description="Maximum deviation from the true curve when flattening (font units)",
    )


class PlacementConfig(BaseModel):
    """Configuration for default mark placement."""

    mark_gap: float = Field(
        default=0.0,
        ge=0.0,
        le=500.0,
        description="Clearance between the base top and the mark bottom",
    )
    top_ink_tolerance: float = Field(
        default=50.0,
        ge=0.0,
        le=1000.0,
        description="How far below the topline the base top may sit before the topline is used instead",
    )
    use_combining_class: bool = Field(
        default=False,
        description="Derive anchors from the Unicode canonical combining class when no anchor is authored",
    )


class ResolverConfig(BaseModel):
    """Configuration for glyph composition."""

    unresolved_policy: UnresolvedPolicy = Field(
        default=UnresolvedPolicy.BASE_ONLY,
        description="Rendering for position pairs without an accepted offset",
    )
    max_depth: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Maximum link/composite nesting depth",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphComposeSettings(BaseModel):
    """Main application settings."""

    bbox: BBoxConfig = Field(default_factory=BBoxConfig)
    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphComposeSettings:
    """Get default application settings."""
    return GlyphComposeSettings()
