"""Output formatter registry — pluggable format hub.

WHY: The CLI and HTTP API need a single lookup to find the right formatter
by name. A central dict makes it trivial to add new formats: create the
formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["word_units"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API requests)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from word_splitter.formatters.svg import SVGFormatter
from word_splitter.formatters.word_units import WordUnitsFormatter

if TYPE_CHECKING:
    from word_splitter.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "word_units": WordUnitsFormatter,
    "svg": SVGFormatter,
}
