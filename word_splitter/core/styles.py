"""Style resolution and style copying for emitted word units.

WHY: A source run can mix fonts, sizes, and colors. Each output word must
carry the style of the characters it came from, and must not share mutable
color objects with the source (editing one word's color would otherwise
repaint others). Strokes are always switched off on the output.

HOW: resolve_style() samples the run's style at the token's first
character, degrading to the first-character style on any lookup problem.
copy_style() copies present fields one by one and rebuilds colors with
clone_color(). force_no_stroke() applies the output stroke policy after the
copy, and output_style() chains the two for a fresh unit style.

RULES:
- resolve_style never raises
- copy_style skips fields whose source value is None
- Colors are reconstructed per variant, never aliased
- A source NoColor/None color leaves the destination color as it was
- force_no_stroke: stroke_weight=0, overprint_stroke=False, stroke_color=NoColor()
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Optional

from word_splitter.core.ir import (
    CMYKColor,
    Color,
    GrayColor,
    NoColor,
    RGBColor,
    SourceTextRun,
    SpotColor,
    StyleAttributes,
    Token,
)

logger = logging.getLogger(__name__)

_COLOR_FIELDS = frozenset({"fill_color", "stroke_color"})


def resolve_style(token: Token, run: SourceTextRun) -> StyleAttributes:
    """Return the style effective at the token's first character.

    RULES:
    - Index is min(token.start, last valid index), clamped to 0
    - Any lookup failure → the run's first-character style
    """
    try:
        index = min(token.start, len(run.contents) - 1)
        if index < 0:
            index = 0
        return run.style_at(index)
    except (IndexError, TypeError, AttributeError):
        logger.debug("Style lookup failed at offset %s; using first character", token.start)
        return run.first_style()


def clone_color(color: Optional[Color]) -> Optional[Color]:
    """Rebuild a color as a new object of the same variant.

    Returns None for None and for NoColor, matching how the copier treats
    both as "nothing to copy".
    """
    if color is None:
        return None
    if isinstance(color, RGBColor):
        return RGBColor(red=color.red, green=color.green, blue=color.blue)
    if isinstance(color, GrayColor):
        return GrayColor(gray=color.gray)
    if isinstance(color, CMYKColor):
        return CMYKColor(
            cyan=color.cyan,
            magenta=color.magenta,
            yellow=color.yellow,
            black=color.black,
        )
    if isinstance(color, SpotColor):
        return SpotColor(spot=color.spot, tint=color.tint)
    return None


def copy_style(source: StyleAttributes, dest: StyleAttributes) -> StyleAttributes:
    """Copy every present attribute of ``source`` onto ``dest`` in place.

    Returns ``dest`` so calls can be chained.
    """
    for f in fields(StyleAttributes):
        value = getattr(source, f.name)
        if f.name in _COLOR_FIELDS:
            value = clone_color(value)
        if value is None:
            continue
        setattr(dest, f.name, value)
    return dest


def force_no_stroke(style: StyleAttributes) -> StyleAttributes:
    style.stroke_weight = 0.0
    style.overprint_stroke = False
    style.stroke_color = NoColor()
    return style


def output_style(source: StyleAttributes) -> StyleAttributes:
    """A fresh style for an emitted word: a deep copy with the stroke off."""
    return force_no_stroke(copy_style(source, StyleAttributes()))
