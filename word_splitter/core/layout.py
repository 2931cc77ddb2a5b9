"""Layout engine: positions one word unit per word token along a baseline.

WHY: Splitting a text object into separate words is only useful if the
words stay where they were. Without access to the host's line-breaking
metrics, the best available approximation is to walk the text left to
right, advancing a cursor by the measured width of every word and every
authored whitespace run, and dropping one line per hard break.

HOW: A cursor starts at the anchor. Each token moves it:
  WORD        → emit a WordUnit at the cursor, advance x by its placed width
  WHITESPACE  → advance x by the whitespace's measured width (nothing emitted)
  LINE_BREAK  → x back to the anchor's left edge, y down by the leading of
                the next word found by next_word_leading()
The result carries the emitted units and the cursor position after every
token, so identical inputs can be checked for identical trajectories.

RULES:
- Words are measured after placement (measure_placed), whitespace by probe
- Whitespace advances by max(0, width)
- Every line break re-scans forward for the next word's leading; blank
  lines therefore advance by the leading of the word that follows them
- Leading of a word: its positive leading, else the run default
- Run default leading: first character's positive leading, else its size
  (or the configured default size) × leading_factor
- Empty word text is skipped
- Nothing here raises on bad measurements; the adapter guarantees width > 0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from word_splitter.config import LayoutConfig
from word_splitter.core.ir import (
    OutputGroup,
    SourceTextRun,
    Token,
    TokenKind,
    WordUnit,
)
from word_splitter.core.measure import MeasurementAdapter
from word_splitter.core.styles import output_style, resolve_style


@dataclass
class Cursor:
    """Transient pen position for one run's layout pass."""

    x: float
    y: float


@dataclass
class LayoutResult:
    units: List[WordUnit] = field(default_factory=list)
    trajectory: List[Tuple[float, float]] = field(default_factory=list)


def run_defaults(run: SourceTextRun, config: LayoutConfig) -> Tuple[float, float]:
    """Return the run's (default size, default leading) from its first character."""
    first = run.first_style()
    size = first.effective_size(config.default_font_size)
    leading = first.effective_leading(size, config.leading_factor)
    return size, leading


def next_word_leading(
    tokens: Sequence[Token],
    from_index: int,
    run: SourceTextRun,
    default_leading: float,
) -> float:
    """Leading of the first WORD token at or after ``from_index``.

    Whitespace and line-break tokens are skipped. A word without a positive
    leading of its own, or no word at all, gives ``default_leading``.
    """
    for token in tokens[from_index:]:
        if token.kind is not TokenKind.WORD:
            continue
        style = resolve_style(token, run)
        if style.leading is not None and style.leading > 0:
            return style.leading
        return default_leading
    return default_leading


def layout_run(
    run: SourceTextRun,
    tokens: Sequence[Token],
    adapter: MeasurementAdapter,
    anchor: Tuple[float, float],
    group: Optional[OutputGroup] = None,
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """Lay out one run's tokens starting at ``anchor``.

    Args:
        run: The source run the tokens were cut from (for style lookup).
        tokens: Output of tokenize(run.contents).
        adapter: Measurement adapter wrapping the rendering host.
        anchor: (left, top) starting point; left is also every line's start.
        group: Optional output group; emitted units are appended to it.
        config: Layout knobs. Defaults to LayoutConfig().

    Returns:
        LayoutResult with emitted units and the cursor after each token.
    """
    config = config or adapter.config
    anchor_left, anchor_top = anchor
    default_size, default_leading = run_defaults(run, config)

    cursor = Cursor(x=anchor_left, y=anchor_top)
    result = LayoutResult()

    for index, token in enumerate(tokens):
        if token.kind is TokenKind.LINE_BREAK:
            cursor.x = anchor_left
            cursor.y -= next_word_leading(tokens, index + 1, run, default_leading)

        elif token.kind is TokenKind.WHITESPACE:
            style = resolve_style(token, run)
            width = adapter.measure(token.text, style, fallback_size=default_size)
            cursor.x += max(0.0, width) + config.gap

        elif token.text:
            source_style = resolve_style(token, run)
            unit = WordUnit(
                text=token.text,
                x=cursor.x,
                y=cursor.y,
                style=output_style(source_style),
            )
            width = adapter.measure_placed(unit, fallback_size=default_size)
            unit = WordUnit(text=unit.text, x=unit.x, y=unit.y, style=unit.style, width=width)
            result.units.append(unit)
            if group is not None:
                group.units.append(unit)
            cursor.x += width + config.gap

        result.trajectory.append((cursor.x, cursor.y))

    return result
