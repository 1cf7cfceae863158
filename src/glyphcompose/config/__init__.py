"""Configuration management for glyphcompose.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- BBoxConfig: Bounding-box precision settings
- PlacementConfig: Default mark placement settings
- ResolverConfig: Glyph composition settings
- LoggingConfig: Logging settings
- GlyphComposeSettings: Main application settings
"""

from glyphcompose.config.settings import (
    BBoxConfig,
    BBoxPrecision,
    GlyphComposeSettings,
    LoggingConfig,
    PlacementConfig,
    ResolverConfig,
    UnresolvedPolicy,
    get_default_settings,
)

__all__ = [
    "BBoxConfig",
    "BBoxPrecision",
    "GlyphComposeSettings",
    "LoggingConfig",
    "PlacementConfig",
    "ResolverConfig",
    "UnresolvedPolicy",
    "get_default_settings",
]
