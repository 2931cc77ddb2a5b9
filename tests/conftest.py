"""Shared test fixtures for the word_splitter test suite.

WHY: Layout results depend on measured widths, and a real font renderer
makes exact positions hard to predict. Most tests therefore run against a
fake rendering host with a fixed advance per character, so every expected
coordinate can be worked out by hand.

HOW: Pytest fixtures provide fake hosts (fixed-width, failing, zero-width),
a pinned LayoutConfig that ignores the environment, a factory for uniformly
styled runs, and a sample document covering nested groups, hidden and
locked items, and mixed line endings.

RULES:
- FixedWidthHost: every character is char_width wide except "\\t", which
  measures 0 (the way real hosts report tabs)
- Font size does not affect FixedWidthHost widths; only estimates use size
- sample_document returns a fresh deep copy for each test
"""

import copy
import math
from typing import Any, Dict, List, Optional

import pytest

from word_splitter.config import LayoutConfig
from word_splitter.core.ir import SourceTextRun, StyleAttributes, StyleRange, WordUnit
from word_splitter.core.measure import TextHost


class FixedWidthHost(TextHost):
    """Measures char_width per character and records every call."""

    def __init__(self, char_width: float = 10.0) -> None:
        self.char_width = char_width
        self.probes: List[str] = []
        self.placed: List[WordUnit] = []

    def _width(self, text: str) -> float:
        return sum(0.0 if ch == "\t" else self.char_width for ch in text)

    def measure_probe(self, text: str, style: StyleAttributes) -> float:
        self.probes.append(text)
        return self._width(text)

    def place_unit(self, unit: WordUnit) -> float:
        self.placed.append(unit)
        return self._width(unit.text)


class FailingHost(TextHost):
    """Every measurement raises, as when the host has no layout yet."""

    def measure_probe(self, text: str, style: StyleAttributes) -> float:
        raise RuntimeError("metrics not ready")

    def place_unit(self, unit: WordUnit) -> float:
        raise RuntimeError("cannot place")


class ConstantHost(TextHost):
    """Returns the same (possibly nonsensical) width for everything."""

    def __init__(self, width: float) -> None:
        self.width = width

    def measure_probe(self, text: str, style: StyleAttributes) -> float:
        return self.width

    def place_unit(self, unit: WordUnit) -> float:
        return self.width


@pytest.fixture
def fixed_host():
    return FixedWidthHost(char_width=10.0)


@pytest.fixture
def make_host():
    """Factory for FixedWidthHost with a chosen per-character width."""
    return FixedWidthHost


@pytest.fixture
def failing_host():
    return FailingHost()


@pytest.fixture
def zero_host():
    return ConstantHost(0.0)


@pytest.fixture
def nan_host():
    return ConstantHost(math.nan)


@pytest.fixture
def bool_host():
    """Reports True instead of a width."""
    return ConstantHost(True)


@pytest.fixture
def layout_config():
    """Layout knobs pinned to the documented defaults, independent of env."""
    return LayoutConfig(
        layer_name="Split Text",
        margin_x=40.0,
        margin_y=80.0,
        tab_spaces=4,
        advance_char_factor=0.55,
        min_width=1.0,
        gap=0.0,
        default_font_size=24.0,
        leading_factor=1.2,
        font_dirs=[],
    )


@pytest.fixture
def make_run():
    """Factory for a run styled uniformly across its whole contents."""

    def _make(text: str, name: Optional[str] = "run", **attributes: Any) -> SourceTextRun:
        style = StyleAttributes(**attributes)
        return SourceTextRun(
            contents=text,
            style_ranges=[StyleRange(start=0, end=max(1, len(text)), attributes=style)],
            name=name,
        )

    return _make


SAMPLE_DOCUMENT: Dict[str, Any] = {
    "name": "poster",
    "artboards": [{"name": "Artboard 1", "rect": [0, 792, 612, 0]}],
    "active_artboard": 0,
    "layers": [
        {
            "name": "Layer 1",
            "items": [
                {
                    "id": "title",
                    "type": "text",
                    "name": "Title",
                    "contents": "Hello  world\r\nfoo",
                    "styles": [
                        {
                            "start": 0,
                            "end": 16,
                            "attributes": {
                                "font": "Helvetica",
                                "size": 10,
                                "fill_color": {"model": "rgb", "red": 255, "green": 0, "blue": 0},
                                "stroke_color": {"model": "gray", "gray": 50},
                                "stroke_weight": 2,
                                "overprint_stroke": True,
                            },
                        }
                    ],
                },
                {
                    "id": "grp",
                    "type": "group",
                    "children": [
                        {
                            "id": "body",
                            "type": "text",
                            "contents": "A\tB",
                            "styles": [{"start": 0, "end": 3, "attributes": {"size": 12}}],
                        },
                        {"id": "secret", "type": "text", "hidden": True, "contents": "hidden words"},
                        {"id": "shape", "type": "path"},
                    ],
                },
                {"id": "pinned", "type": "text", "locked": True, "contents": "locked words"},
                {"id": "blank", "type": "text", "contents": ""},
            ],
        },
        {"name": "Background", "locked": True, "items": [{"id": "bg", "type": "path"}]},
    ],
    "selection": ["title", "grp"],
}


@pytest.fixture
def sample_document():
    """The sample document as a decoded JSON dict (fresh copy per test).

    Default selection yields two runs: "Title" (3 words on two lines) and
    "body" (2 words separated by a tab).
    """
    return copy.deepcopy(SAMPLE_DOCUMENT)
