"""glyphcompose - Rule-based glyph composition and positioning.

glyphcompose resolves the glyphs of a font project that are built from
other glyphs (links, composites, base + mark pairs, kerning previews),
computes default mark offsets from authored positioning and anchor rules,
and accepts them into the project's positioning and kerning caches.

Example:
    $ glyphcompose accept-all devanagari.json

This will create devanagari-composed.json with every drawn position pair
positioned and every kern pair given a value.
"""

__version__ = "0.1.0"
__author__ = "glyphcompose contributors"

__all__ = ["__author__", "__version__"]
