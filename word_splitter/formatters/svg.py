"""SVG preview formatter — one <text> element per word unit.

WHY: The quickest way to check that a split kept the original spacing is to
look at it. An SVG opens in any browser or design tool and shows every word
at its computed origin, grouped per source run.

HOW: Builds the tree with xml.etree.ElementTree: one <g> per output group,
one <text> per unit. Artboard coordinates grow upward, SVG coordinates grow
downward, so y is negated. The viewBox is fitted around all units with a
margin of one font size.

RULES:
- Output suffix: -words.svg
- Fill color converted to CSS; NoColor fill → fill="none"; absent → omitted
- Strokes are never written (the output policy is no stroke)
- baseline_shift raises the word; tracking becomes letter-spacing in em
- capitalization "all_caps" becomes text-transform:uppercase
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple

from word_splitter.config import DEFAULT_FONT_SIZE
from word_splitter.core.ir import (
    CMYKColor,
    Color,
    GrayColor,
    NoColor,
    RGBColor,
    SpotColor,
    SplitResult,
    WordUnit,
)
from word_splitter.formatters.base import BaseFormatter, FormatterOutput

SVG_NS = "http://www.w3.org/2000/svg"


def _fmt(value: float) -> str:
    text = "{:.3f}".format(value).rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


def css_color(color: Optional[Color]) -> Optional[str]:
    """CSS color for a fill, or None when the fill is absent.

    Gray and CMYK values are percentages of ink; spot colors have no
    known process equivalent and render as black (tint applies as opacity
    in the caller).
    """
    if color is None:
        return None
    if isinstance(color, NoColor):
        return "none"
    if isinstance(color, RGBColor):
        return "rgb({},{},{})".format(_channel(color.red), _channel(color.green), _channel(color.blue))
    if isinstance(color, GrayColor):
        level = _channel(255 * (1 - color.gray / 100.0))
        return "rgb({0},{0},{0})".format(level)
    if isinstance(color, CMYKColor):
        k = 1 - color.black / 100.0
        return "rgb({},{},{})".format(
            _channel(255 * (1 - color.cyan / 100.0) * k),
            _channel(255 * (1 - color.magenta / 100.0) * k),
            _channel(255 * (1 - color.yellow / 100.0) * k),
        )
    if isinstance(color, SpotColor):
        return "rgb(0,0,0)"
    return None


def _svg_position(unit: WordUnit) -> Tuple[float, float]:
    shift = unit.style.baseline_shift or 0.0
    return unit.x, -(unit.y + shift)


def _view_box(units: List[WordUnit]) -> str:
    if not units:
        return "0 0 1 1"
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    for unit in units:
        x, y = _svg_position(unit)
        size = unit.style.size or DEFAULT_FONT_SIZE
        min_x = min(min_x, x - size)
        max_x = max(max_x, x + unit.width + size)
        min_y = min(min_y, y - 2 * size)
        max_y = max(max_y, y + size)
    return " ".join(_fmt(v) for v in (min_x, min_y, max_x - min_x, max_y - min_y))


def _text_element(parent: ET.Element, unit: WordUnit) -> None:
    x, y = _svg_position(unit)
    style = unit.style
    attrs = {"x": _fmt(x), "y": _fmt(y)}
    if style.font:
        attrs["font-family"] = style.font
    if style.size:
        attrs["font-size"] = _fmt(style.size)
    fill = css_color(style.fill_color)
    if fill is not None:
        attrs["fill"] = fill
    if isinstance(style.fill_color, SpotColor) and style.fill_color.tint < 100:
        attrs["fill-opacity"] = _fmt(style.fill_color.tint / 100.0)
    if style.tracking:
        attrs["letter-spacing"] = "{}em".format(_fmt(style.tracking / 1000.0))
    if style.capitalization == "all_caps":
        attrs["style"] = "text-transform:uppercase"
    elem = ET.SubElement(parent, "text", attrs)
    elem.text = unit.text


class SVGFormatter(BaseFormatter):
    """Formatter producing an SVG preview of the split."""

    @property
    def name(self) -> str:
        return "SVG Preview"

    @property
    def suffix(self) -> str:
        return "-words.svg"

    def format(self, result: SplitResult) -> List[FormatterOutput]:
        units = [unit for group in result.groups for unit in group.units]

        root = ET.Element("svg", {
            "xmlns": SVG_NS,
            "viewBox": _view_box(units),
        })
        layer = ET.SubElement(root, "g", {"id": result.layer_name})
        for group in result.groups:
            group_elem = ET.SubElement(layer, "g", {"id": group.name})
            for unit in group.units:
                _text_element(group_elem, unit)

        content = ET.tostring(root, encoding="unicode")
        return [FormatterOutput(
            suffix=self.suffix,
            content='<?xml version="1.0" encoding="UTF-8"?>\n' + content + "\n",
            media_type="image/svg+xml",
        )]
