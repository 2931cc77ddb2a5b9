"""Intermediate representation dataclasses for styled runs and word units.

WHY: The splitter reads styled text from a document host, lays it out one
word at a time, and hands the positioned words to formatters (JSON, SVG) and
to the HTTP API. Every stage needs the same vocabulary — tokens, styles,
colors, word units, groups — so the stages stay independently testable.

HOW: Plain dataclasses, leaf-first:
  Color variants  — NoColor / GrayColor / RGBColor / CMYKColor / SpotColor
  StyleAttributes — character attributes sampled from the source run
  StyleRange      — a [start, end) span of a run sharing one style
  SourceTextRun   — text contents plus its style ranges
  Token           — one word / whitespace run / line break with offsets
  WordUnit        — one positioned, independently styled word
  OutputGroup     — the word units produced from one source run
  OutputContainer — the named layer that owns the groups
  SplitResult     — totals and groups reported back to the caller

RULES:
- Token offsets are [start, end) into the run's normalized contents
- Every StyleAttributes field is optional; None means "absent"
- Colors are a closed variant set; copies are made with clone_color()
- WordUnit is frozen; its style is a private copy with stroke forced off
- Coordinates follow the artboard convention: y grows upward, so moving to
  the next line subtracts leading
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


@dataclass
class NoColor:
    """The "no paint" color. Used to force strokes off on every output."""

    model: ClassVar[str] = "none"

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model}


@dataclass
class GrayColor:
    model: ClassVar[str] = "gray"

    gray: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model, "gray": self.gray}


@dataclass
class RGBColor:
    """An RGB color with 0–255 channels."""

    model: ClassVar[str] = "rgb"

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model, "red": self.red, "green": self.green, "blue": self.blue}


@dataclass
class CMYKColor:
    """A process color with 0–100 percentages per ink."""

    model: ClassVar[str] = "cmyk"

    cyan: float = 0.0
    magenta: float = 0.0
    yellow: float = 0.0
    black: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "cyan": self.cyan,
            "magenta": self.magenta,
            "yellow": self.yellow,
            "black": self.black,
        }


@dataclass
class SpotColor:
    """A named spot ink at a tint percentage."""

    model: ClassVar[str] = "spot"

    spot: str = ""
    tint: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model, "spot": self.spot, "tint": self.tint}


Color = Union[NoColor, GrayColor, RGBColor, CMYKColor, SpotColor]


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------

_COLOR_FIELDS = ("fill_color", "stroke_color")


@dataclass
class StyleAttributes:
    """Character attributes sampled from one character of a source run.

    WHY: Each output word must look like the text it came from. The host
    exposes style per character, so the splitter samples it at the first
    character of every token and copies it onto the emitted word.

    RULES:
    - Every field may be None (absent); copying skips absent fields
    - size and leading are in points; tracking and kerning in 1/1000 em
    - horizontal_scale / vertical_scale are percentages (100 = unscaled)
    - leading <= 0 or None means "auto": size × 1.2
    """

    font: Optional[str] = None
    size: Optional[float] = None
    fill_color: Optional[Color] = None
    stroke_color: Optional[Color] = None
    tracking: Optional[float] = None
    leading: Optional[float] = None
    horizontal_scale: Optional[float] = None
    vertical_scale: Optional[float] = None
    baseline_shift: Optional[float] = None
    capitalization: Optional[str] = None
    kerning: Optional[float] = None
    stroke_weight: Optional[float] = None
    overprint_fill: Optional[bool] = None
    overprint_stroke: Optional[bool] = None

    def effective_size(self, fallback: float) -> float:
        return self.size if self.size else fallback

    def effective_leading(self, fallback_size: float, factor: float = 1.2) -> float:
        """Positive ``leading`` if set, otherwise ``size × factor``."""
        if self.leading is not None and self.leading > 0:
            return self.leading
        return self.effective_size(fallback_size) * factor

    def to_dict(self) -> Dict[str, Any]:
        """Serialize present fields only; colors as tagged dicts."""
        out: Dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if value is None:
                continue
            if name in _COLOR_FIELDS:
                value = value.to_dict()
            out[name] = value
        return out


@dataclass
class StyleRange:
    """A [start, end) span of a source run that shares one style."""

    start: int
    end: int
    attributes: StyleAttributes = field(default_factory=StyleAttributes)

    def covers(self, index: int) -> bool:
        return self.start <= index < self.end


@dataclass
class SourceTextRun:
    """One source text object: its contents and per-range character styles.

    WHY: The layout needs both the characters and the style of each
    character. Hosts usually store style as ranges, so the run keeps a list
    of ranges and answers per-index lookups.

    RULES:
    - contents uses "\\n" line breaks (normalized by the document host)
    - style_at(i) returns the range covering i; uncovered characters use
      first_style()
    - first_style() is the range covering index 0, else the first declared
      range, else an all-absent StyleAttributes
    - Immutable for the duration of a split
    """

    contents: str
    style_ranges: List[StyleRange] = field(default_factory=list)
    name: Optional[str] = None

    def first_style(self) -> StyleAttributes:
        for style_range in self.style_ranges:
            if style_range.covers(0):
                return style_range.attributes
        if self.style_ranges:
            return self.style_ranges[0].attributes
        return StyleAttributes()

    def style_at(self, index: int) -> StyleAttributes:
        if index < 0 or index >= len(self.contents):
            raise IndexError("character index {} out of range".format(index))
        for style_range in self.style_ranges:
            if style_range.covers(index):
                return style_range.attributes
        return self.first_style()


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenKind(str, enum.Enum):
    WORD = "word"
    WHITESPACE = "whitespace"
    LINE_BREAK = "line_break"


@dataclass(frozen=True)
class Token:
    """A contiguous slice of a run's normalized contents.

    RULES:
    - text == contents[start:end]
    - WORD tokens contain no whitespace and no line break
    - WHITESPACE tokens contain only space, tab, or U+00A0
    - LINE_BREAK tokens are exactly "\\n"
    """

    kind: TokenKind
    text: str
    start: int
    end: int


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WordUnit:
    """One positioned word with its own copy of the source style.

    RULES:
    - (x, y) is the point-text origin on the baseline
    - width is the measured (or estimated) advance, always > 0
    - style.stroke_color is NoColor and stroke_weight is 0
    """

    text: str
    x: float
    y: float
    style: StyleAttributes
    width: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "style": self.style.to_dict(),
        }


@dataclass
class OutputGroup:
    """The word units produced from one source run, in emission order."""

    name: str
    units: List[WordUnit] = field(default_factory=list)
    source_name: Optional[str] = None


@dataclass
class OutputContainer:
    """A named output layer. Groups are appended; later groups sit in front."""

    name: str
    groups: List[OutputGroup] = field(default_factory=list)
    locked: bool = False
    visible: bool = True

    def add_group(self, name: str, source_name: Optional[str] = None) -> OutputGroup:
        group = OutputGroup(name=name, source_name=source_name)
        self.groups.append(group)
        return group

    @property
    def unit_count(self) -> int:
        return sum(len(g.units) for g in self.groups)


@dataclass
class SplitResult:
    """What a split reports back: the layer, its new groups, and totals."""

    layer_name: str
    groups: List[OutputGroup]
    total_words: int
    anchor: Tuple[float, float]
    skipped_runs: int = 0
