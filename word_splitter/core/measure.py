"""Measurement oracle: host interface, fallback ladder, and a Pillow host.

WHY: The layout advances by the rendered width of every word and every
whitespace run, but rendered width is only known to a rendering host, and
hosts are unreliable — metrics may not be ready yet, tabs and other
non-printing characters often measure as zero, and probe objects can fail
to create. The layout still needs a usable positive width every time.

HOW: TextHost is the host contract — measure a transient probe, or report
the width of a placed word unit. MeasurementAdapter wraps a host with a
two-tier fallback: retry tab-bearing text with tabs expanded to spaces,
then estimate from character count and font size. PillowTextHost is a real
host backed by Pillow fonts; each measurement draws into a throwaway 1×1
image that is always closed afterwards.

RULES:
- A width is valid only if it is a finite number > 0
- Host exceptions count as invalid widths; they are logged, never raised
- Tab retry: each "\\t" becomes ``tab_spaces`` spaces (default 4)
- Estimate: max(min_width, len(text) × size × advance_char_factor)
- size for the estimate: style size, else the caller's fallback size,
  else the configured default font size
- Probe images are released in a finally block; release errors are
  logged at WARNING and swallowed
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from PIL import Image, ImageDraw, ImageFont

from word_splitter.config import FONT_EXTENSIONS, LayoutConfig
from word_splitter.core.ir import StyleAttributes, WordUnit

logger = logging.getLogger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


def is_valid_width(width: Optional[float]) -> bool:
    if width is None or isinstance(width, bool) or not isinstance(width, (int, float)):
        return False
    return math.isfinite(width) and width > 0


def fallback_width(
    text: str,
    size: float,
    factor: float = 0.55,
    minimum: float = 1.0,
) -> float:
    """Estimate a rendered width from character count and font size."""
    return max(minimum, len(text) * size * factor)


class TextHost(ABC):
    """Abstract rendering host that can report text widths.

    WHY: The layout engine must not depend on any particular renderer.
    A host only has to answer two questions: how wide would this text be
    in this style, and how wide is this word unit once placed.

    To add a host:
    1. Subclass TextHost
    2. Implement measure_probe() and place_unit()
    3. Let failures surface as exceptions or non-positive widths; the
       adapter turns both into fallbacks
    """

    @abstractmethod
    def measure_probe(self, text: str, style: StyleAttributes) -> float:
        """Width of ``text`` rendered in ``style``, measured off-canvas."""

    @abstractmethod
    def place_unit(self, unit: WordUnit) -> float:
        """Materialize ``unit`` at its origin and return its bounding width."""


class MeasurementAdapter:
    """Wraps a TextHost so every measurement yields a positive width."""

    def __init__(self, host: TextHost, config: Optional[LayoutConfig] = None) -> None:
        self.host = host
        self.config = config or LayoutConfig()

    def estimate(self, text: str, style: StyleAttributes, fallback_size: Optional[float] = None) -> float:
        size = style.size or fallback_size or self.config.default_font_size
        return fallback_width(
            text,
            size,
            factor=self.config.advance_char_factor,
            minimum=self.config.min_width,
        )

    def _probe(self, text: str, style: StyleAttributes) -> Optional[float]:
        try:
            return self.host.measure_probe(text, style)
        except Exception:
            logger.debug("Probe measurement failed for %r", text, exc_info=True)
            return None

    def measure(
        self,
        text: str,
        style: StyleAttributes,
        fallback_size: Optional[float] = None,
    ) -> float:
        """Measure ``text`` through the host, falling back as needed.

        Args:
            text: Word or whitespace text to measure.
            style: Style to render it in.
            fallback_size: Font size to use for the estimate when the style
                           has none (normally the run's default size).

        Returns:
            A finite width > 0.
        """
        width = self._probe(text, style)
        if is_valid_width(width):
            return float(width)

        if "\t" in text:
            expanded = text.replace("\t", " " * self.config.tab_spaces)
            width = self._probe(expanded, style)
            if is_valid_width(width):
                logger.debug("Tab fallback: %r measured as %s spaces per tab", text, self.config.tab_spaces)
                return float(width)

        estimate = self.estimate(text, style, fallback_size)
        logger.debug("Estimated width %.2f for %r", estimate, text)
        return estimate

    def measure_placed(self, unit: WordUnit, fallback_size: Optional[float] = None) -> float:
        """Width of a placed word unit, estimated if the host reports nonsense."""
        try:
            width = self.host.place_unit(unit)
        except Exception:
            logger.debug("Placing %r failed", unit.text, exc_info=True)
            width = None
        if is_valid_width(width):
            return float(width)
        return self.estimate(unit.text, unit.style, fallback_size)


# ---------------------------------------------------------------------------
# Pillow host
# ---------------------------------------------------------------------------


def _normalize_font_name(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def find_font_file(name: str, font_dirs: Sequence[Path]) -> Optional[Path]:
    """Find ``<name>.ttf`` (or .otf / .ttc) in the given directories.

    Matching ignores case, spaces, hyphens, and underscores, so
    "Open Sans-Bold" finds ``OpenSans-Bold.ttf`` and ``open_sans_bold.otf``.
    """
    wanted = _normalize_font_name(name)
    if not wanted:
        return None
    for directory in font_dirs:
        if not directory.is_dir():
            continue
        for candidate in sorted(directory.rglob("*")):
            if candidate.suffix.lower() not in FONT_EXTENSIONS:
                continue
            if _normalize_font_name(candidate.stem) == wanted:
                return candidate
    return None


class PillowTextHost(TextHost):
    """TextHost that measures advance widths with Pillow.

    WHY: Gives the CLI and HTTP API a real measurement oracle without a
    desktop design application. Pillow's FreeType binding reports the
    advance width a renderer would use for the same font and size.

    HOW: Fonts are resolved by name in the configured font directories,
    then by Pillow's own system font lookup, then Pillow's bundled default
    font at the requested size. Each measurement opens a throwaway image,
    asks ImageDraw.textlength(), applies horizontal scale, tracking, and
    capitalization, and closes the image.

    RULES:
    - Fonts are cached per (name, size)
    - capitalization "all_caps" measures the upper-cased text
    - horizontal_scale is a percentage; tracking is 1/1000 em per character
    - A placed unit is measured exactly like a probe of its text and style
    """

    def __init__(self, font_dirs: Optional[List[Path]] = None, default_size: float = 24.0) -> None:
        self.font_dirs = list(font_dirs or [])
        self.default_size = default_size
        self._load_font = lru_cache(maxsize=64)(self._load_font_uncached)

    def _load_font_uncached(self, name: Optional[str], size: float) -> FontType:
        if name:
            path = find_font_file(name, self.font_dirs)
            candidates = [str(path)] if path else []
            candidates.append(name)
            for candidate in candidates:
                try:
                    return ImageFont.truetype(candidate, size)
                except OSError:
                    continue
            logger.info("Font %r not found; using Pillow's default font", name)
        return ImageFont.load_default(size=size)

    @contextmanager
    def _probe(self) -> Iterator[ImageDraw.ImageDraw]:
        image = Image.new("L", (1, 1))
        try:
            yield ImageDraw.Draw(image)
        finally:
            try:
                image.close()
            except Exception:
                logger.warning("Failed to release measurement probe", exc_info=True)

    def measure_probe(self, text: str, style: StyleAttributes) -> float:
        size = style.size or self.default_size
        font = self._load_font(style.font, float(size))
        if style.capitalization == "all_caps":
            text = text.upper()

        with self._probe() as draw:
            width = float(draw.textlength(text, font=font))

        if style.horizontal_scale:
            width *= style.horizontal_scale / 100.0
        if style.tracking:
            width += style.tracking / 1000.0 * size * len(text)
        return width

    def place_unit(self, unit: WordUnit) -> float:
        return self.measure_probe(unit.text, unit.style)
