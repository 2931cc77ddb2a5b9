"""Word Units JSON formatter — the split result as a schema-checked document.

WHY: Downstream tools (scripting hosts, animation pipelines, the HTTP API)
need every positioned word with its full style in a stable, machine-readable
shape. Validating against a bundled JSON Schema catches regressions in the
output contract before a broken file leaves the process.

HOW: Serializes layer, anchor, totals, and one object per group with its
units (text, origin, width, style). Runs jsonschema validation against
word_units_schema.json, then dumps with indentation.

RULES:
- Output suffix: -words.json
- Unit style omits absent attributes; colors are tagged dicts
- Every unit's stroke_color is {"model": "none"} and stroke_weight is 0
- Schema violations raise jsonschema.ValidationError (never silently written)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from word_splitter.core.ir import SplitResult
from word_splitter.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "word_units_schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def _get_schema() -> dict:
    """Load and cache the word units JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def result_to_dict(result: SplitResult) -> Dict[str, Any]:
    """Plain-dict form of a SplitResult, shared with the HTTP API."""
    return {
        "layer": result.layer_name,
        "anchor": [result.anchor[0], result.anchor[1]],
        "total_words": result.total_words,
        "skipped_runs": result.skipped_runs,
        "groups": [
            {
                "name": group.name,
                "source": group.source_name,
                "units": [unit.to_dict() for unit in group.units],
            }
            for group in result.groups
        ],
    }


class WordUnitsFormatter(BaseFormatter):
    """Formatter producing one JSON document of all emitted word units."""

    @property
    def name(self) -> str:
        return "Word Units JSON"

    @property
    def suffix(self) -> str:
        return "-words.json"

    def format(self, result: SplitResult) -> List[FormatterOutput]:
        """Serialize and validate the split result.

        Raises:
            jsonschema.ValidationError: If the generated document does not
                conform to word_units_schema.json.
        """
        output_dict = result_to_dict(result)
        jsonschema.validate(instance=output_dict, schema=_get_schema())

        content = json.dumps(output_dict, indent=2, ensure_ascii=False)
        return [FormatterOutput(
            suffix=self.suffix,
            content=content,
            media_type="application/json",
        )]
