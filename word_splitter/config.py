"""Configuration constants, layout knobs, and .env loading.

WHY: The splitter's behavior hinges on a handful of numbers — artboard
margins, the tab-to-spaces ratio, the per-character fallback advance — that
users tune per document. Keeping them as plain module-level values makes
them easy to find and override without touching the layout code.

HOW: python-dotenv loads the .env file on import. Each constant reads an
optional environment variable with a hardcoded default. LayoutConfig bundles
the numeric knobs for a single split so the CLI and HTTP API can override
individual values per call instead of mutating module globals.

RULES:
- All defaults can be overridden via environment variables
- Numeric env values that fail to parse raise ValueError with the variable name
- FONT_DIRS is an os.pathsep-separated list of directories
- LayoutConfig is the only thing the core reads; module constants are defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back to ``default``.

    RULES:
    - Missing or blank variable → default
    - Unparseable value → ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(
            "Invalid value for {}: {!r} is not a number.".format(name, raw)
        ) from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "Invalid value for {}: {!r} is not an integer.".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Output destination
# ---------------------------------------------------------------------------

OUTPUT_LAYER_NAME = os.getenv("WORD_SPLITTER_LAYER", "Split Text")
"""Name of the layer that receives one group of word units per source run."""

GROUP_NAME_PREFIX = "SplitWords_"

# ---------------------------------------------------------------------------
# Layout defaults
# ---------------------------------------------------------------------------

ARTBOARD_MARGIN_X = _env_float("WORD_SPLITTER_MARGIN_X", 40.0)
ARTBOARD_MARGIN_Y = _env_float("WORD_SPLITTER_MARGIN_Y", 80.0)

TAB_SPACES = _env_int("WORD_SPLITTER_TAB_SPACES", 4)
"""How many spaces a tab approximates when the host measures a tab as zero."""

ADVANCE_CHAR_FACTOR = _env_float("WORD_SPLITTER_ADVANCE_FACTOR", 0.55)
"""Fallback advance per character, as a fraction of the font size."""

SAFETY_MIN_WORD_W = _env_float("WORD_SPLITTER_MIN_WIDTH", 1.0)
GAP_MIN_PX = _env_float("WORD_SPLITTER_GAP", 0.0)
DEFAULT_FONT_SIZE = _env_float("WORD_SPLITTER_FONT_SIZE", 24.0)
LEADING_FACTOR = 1.2

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------


def _font_dirs_from_env() -> List[Path]:
    raw = os.getenv("WORD_SPLITTER_FONT_DIRS", "")
    return [Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip()]


FONT_DIRS: List[Path] = _font_dirs_from_env()
"""Directories searched for ``<font>.ttf`` / ``.otf`` / ``.ttc`` files."""

FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")


@dataclass
class LayoutConfig:
    """Numeric knobs for one split operation.

    WHY: The CLI and HTTP API let callers override margins and fallback
    factors per request. Passing a config object keeps the core free of
    global state, so two splits with different settings never interfere.

    RULES:
    - Defaults mirror the module-level constants (and therefore the env)
    - tab_spaces must be >= 1; sizes and factors must be positive
    """

    layer_name: str = OUTPUT_LAYER_NAME
    margin_x: float = ARTBOARD_MARGIN_X
    margin_y: float = ARTBOARD_MARGIN_Y
    tab_spaces: int = TAB_SPACES
    advance_char_factor: float = ADVANCE_CHAR_FACTOR
    min_width: float = SAFETY_MIN_WORD_W
    gap: float = GAP_MIN_PX
    default_font_size: float = DEFAULT_FONT_SIZE
    leading_factor: float = LEADING_FACTOR
    font_dirs: List[Path] = field(default_factory=lambda: list(FONT_DIRS))

    def __post_init__(self) -> None:
        if self.tab_spaces < 1:
            raise ValueError("tab_spaces must be at least 1.")
        if self.default_font_size <= 0:
            raise ValueError("default_font_size must be positive.")
        if self.advance_char_factor <= 0 or self.leading_factor <= 0:
            raise ValueError("advance_char_factor and leading_factor must be positive.")
