"""Word Splitter — break styled text objects into positioned word units.

WHY: Designers animating or restyling text word by word need each word as
its own object, sitting exactly where it sat in the original text. Doing
that by hand destroys the authored spacing; this package reproduces it from
measured widths and per-line leading.

HOW: Four-stage pipeline — load (document host collects styled runs),
tokenize (words, whitespace runs, line breaks), lay out (measure through a
rendering host and advance a cursor), format (pluggable JSON / SVG output).
Each stage is independently testable.

RULES:
- Only hard line breaks are honored; soft wraps of area text are not rebuilt
- Every output word has its stroke forced off
- All formatters consume the same SplitResult
"""

__version__ = "0.1.0"
