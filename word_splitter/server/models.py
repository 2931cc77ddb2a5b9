"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint pair (request + response) has its own model. Enums
represent closed sets like output format names. All models include
Field descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum values match internal constants exactly (format keys)
- The document is accepted as a plain object and validated by the
  document host, so its errors read the same as on the CLI
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Available output format identifiers.

    RULES:
    - Values match keys in word_splitter.formatters.FORMATTERS exactly
    """

    word_units = "word_units"
    svg = "svg"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SplitRequest(BaseModel):
    """A document to split plus per-request layout overrides."""

    document: Dict[str, Any] = Field(
        description="Document with artboards, layers of nodes, and a selection.",
    )
    selection: Optional[List[str]] = Field(
        default=None,
        description="Node ids to split. Defaults to the document's own selection.",
    )
    layer_name: Optional[str] = Field(
        default=None,
        description="Output layer name. Defaults to the server's configured layer.",
    )
    margin_x: Optional[float] = Field(
        default=None,
        description="Horizontal offset of the anchor from the artboard's left edge.",
    )
    margin_y: Optional[float] = Field(
        default=None,
        description="Vertical offset of the anchor from the artboard's top edge.",
    )
    formats: List[OutputFormat] = Field(
        default_factory=list,
        description="Rendered outputs to include in the response (none by default).",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "document": {
                    "artboards": [{"rect": [0, 792, 612, 0]}],
                    "layers": [{"name": "Layer 1", "items": [
                        {"id": "t1", "type": "text", "contents": "Hello  world",
                         "styles": [{"start": 0, "end": 12, "attributes": {"size": 24}}]},
                    ]}],
                    "selection": ["t1"],
                },
                "formats": ["svg"],
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RenderedOutput(BaseModel):
    format: str = Field(description="Formatter key that produced this output.")
    suffix: str = Field(description="File suffix the CLI would use (e.g. '-words.svg').")
    media_type: str = Field(description="MIME type of the content.")
    content: str = Field(description="Rendered file content.")


class SplitResponse(BaseModel):
    """Result of a split: totals, groups of word units, and rendered outputs."""

    message: str = Field(description="Summary line, e.g. 'Created 3 word blocks on layer: Split Text'.")
    layer: str = Field(description="Output layer that received the groups.")
    anchor: List[float] = Field(description="[left, top] where every run started.")
    total_words: int = Field(description="Number of word units created.")
    skipped_runs: int = Field(description="Selected text runs with nothing to split.")
    groups: List[Dict[str, Any]] = Field(description="One entry per laid-out run, with its units.")
    outputs: List[RenderedOutput] = Field(
        default_factory=list,
        description="Rendered outputs for the requested formats.",
    )


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-words.json').")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
