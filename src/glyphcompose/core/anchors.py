"""Anchor lookup for mark attachment.

An anchor rule names one of eight points on the base bounding box and one
on the mark bounding box; the mark is moved so the two coincide (plus an
authored adjustment). Rules come from the project's mark attachment table
or, optionally, from the mark's Unicode canonical combining class.
"""

import unicodedata

from glyphcompose.core.groups import ClassExpander, is_class_reference
from glyphcompose.domain import AnchorRule, AttachmentPoint, BoundingBox, MarkAttachmentTable, Point

AP = AttachmentPoint


def attachment_point(bbox: BoundingBox, point: AttachmentPoint) -> Point:
    """Coordinates of a named attachment point on a y-up bounding box.

    Examples:
        >>> attachment_point(BoundingBox(10, 20, 100, 200), AttachmentPoint.TOP_CENTER)
        Point(x=60.0, y=220)
    """
    left, right = bbox.x, bbox.right
    center_x = bbox.x + bbox.width / 2
    bottom, top = bbox.y, bbox.top
    middle_y = bbox.y + bbox.height / 2

    coords = {
        AP.TOP_LEFT: (left, top),
        AP.TOP_CENTER: (center_x, top),
        AP.TOP_RIGHT: (right, top),
        AP.MID_LEFT: (left, middle_y),
        AP.MID_RIGHT: (right, middle_y),
        AP.BOTTOM_LEFT: (left, bottom),
        AP.BOTTOM_CENTER: (center_x, bottom),
        AP.BOTTOM_RIGHT: (right, bottom),
    }
    x, y = coords[point]
    return Point(x, y)


def resolve_anchor_rule(
    base_name: str,
    mark_name: str,
    table: MarkAttachmentTable | None,
    classes: ClassExpander,
) -> AnchorRule | None:
    """Find the authored anchor rule for a base/mark pair.

    Lookup order:
    1. Exact base name, exact mark name
    2. First class-keyed base entry containing the base; within it the
       exact mark name, then the first class-keyed mark entry containing
       the mark

    Args:
        base_name: Base glyph name
        mark_name: Mark glyph name
        table: Mark attachment table (base token -> mark token -> rule)
        classes: Expander for class-keyed entries

    Returns:
        AnchorRule, or None when nothing is authored for the pair
    """
    if not table:
        return None

    exact = table.get(base_name, {}).get(mark_name)
    if exact is not None:
        return exact

    for base_key, mark_rules in table.items():
        if not is_class_reference(base_key) or not classes.contains([base_key], base_name):
            continue

        rule = mark_rules.get(mark_name)
        if rule is not None:
            return rule

        for mark_key, candidate in mark_rules.items():
            if is_class_reference(mark_key) and classes.contains([mark_key], mark_name):
                return candidate

    return None


# Canonical combining class -> (base point, mark point) for attached marks
# and (base point, mark point, dx sign, dy sign) for spaced marks, where the
# signs are multiplied by the gap.
_ATTACHED: dict[int, tuple[AttachmentPoint, AttachmentPoint]] = {
    1: (AP.TOP_CENTER, AP.BOTTOM_CENTER),
    6: (AP.TOP_RIGHT, AP.BOTTOM_LEFT),
    7: (AP.BOTTOM_CENTER, AP.TOP_CENTER),
    8: (AP.TOP_RIGHT, AP.BOTTOM_LEFT),
    9: (AP.BOTTOM_CENTER, AP.TOP_CENTER),
    200: (AP.BOTTOM_LEFT, AP.TOP_RIGHT),
    202: (AP.BOTTOM_CENTER, AP.TOP_CENTER),
    204: (AP.BOTTOM_RIGHT, AP.TOP_LEFT),
    208: (AP.MID_LEFT, AP.MID_RIGHT),
    210: (AP.MID_RIGHT, AP.MID_LEFT),
    212: (AP.TOP_LEFT, AP.BOTTOM_RIGHT),
    214: (AP.TOP_CENTER, AP.BOTTOM_CENTER),
    216: (AP.TOP_RIGHT, AP.BOTTOM_LEFT),
    240: (AP.BOTTOM_RIGHT, AP.TOP_LEFT),
}

_SPACED: dict[int, tuple[AttachmentPoint, AttachmentPoint, int, int]] = {
    218: (AP.BOTTOM_LEFT, AP.TOP_RIGHT, -1, -1),
    220: (AP.BOTTOM_CENTER, AP.TOP_CENTER, 0, -1),
    222: (AP.BOTTOM_LEFT, AP.TOP_RIGHT, -1, -1),
    224: (AP.BOTTOM_RIGHT, AP.TOP_LEFT, 1, -1),
    228: (AP.MID_LEFT, AP.MID_RIGHT, -1, 0),
    230: (AP.TOP_CENTER, AP.BOTTOM_CENTER, 0, 1),
    232: (AP.MID_RIGHT, AP.MID_LEFT, 1, 0),
    233: (AP.TOP_LEFT, AP.BOTTOM_RIGHT, -1, 1),
    234: (AP.TOP_RIGHT, AP.BOTTOM_LEFT, 1, 1),
}


def combining_class_rule(mark_unicode: int | None, gap: float = 0.0) -> AnchorRule | None:
    """Derive an anchor rule from a mark's canonical combining class.

    Args:
        mark_unicode: Mark code point (None for unencoded marks)
        gap: Clearance for non-attached classes

    Returns:
        AnchorRule, or None for spacing characters and unencoded marks

    Examples:
        >>> combining_class_rule(0x0301, gap=20).dy
        20
        >>> combining_class_rule(ord("a")) is None
        True
    """
    if mark_unicode is None:
        return None

    ccc = unicodedata.combining(chr(mark_unicode))
    if ccc == 0:
        return None

    if ccc in _ATTACHED:
        base_point, mark_point = _ATTACHED[ccc]
        return AnchorRule(base_point, mark_point)

    if ccc in _SPACED:
        base_point, mark_point, sx, sy = _SPACED[ccc]
        return AnchorRule(base_point, mark_point, dx=sx * gap, dy=sy * gap)

    # Fixed-position classes (10-199) sit above the base
    if 10 <= ccc <= 199:
        return AnchorRule(AP.TOP_CENTER, AP.BOTTOM_CENTER, dy=gap)

    return None
