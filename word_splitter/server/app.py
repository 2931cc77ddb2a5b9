"""FastAPI application exposing the splitter over HTTP.

WHY: Scripting hosts and automation tools (plugins, n8n, CI jobs) need to
split documents without shelling out to the CLI. An HTTP endpoint takes the
same document JSON and returns the word units, optionally rendered.

HOW: A single FastAPI app with three endpoints. POST /split validates the
document through the document host, collects runs, lays them out with a
shared Pillow text host, and returns the result plus any requested
formatter outputs. Each request gets its own parsed document and output
layer, so requests never share mutable state.

RULES:
- Fatal document preconditions → 400 with the same message as the CLI
- Wrongly typed style values are document errors too → 400
- The Pillow text host is created once at import (fonts are cached)
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, HTTPException

from word_splitter import __version__
from word_splitter.config import FONT_DIRS, LayoutConfig
from word_splitter.core.document import (
    anchor_for,
    collect_source_runs,
    get_or_create_layer,
    parse_document,
)
from word_splitter.core.measure import PillowTextHost
from word_splitter.core.splitter import split_runs, summary_message
from word_splitter.exceptions import DocumentError
from word_splitter.formatters import FORMATTERS
from word_splitter.formatters.word_units import result_to_dict
from word_splitter.server.models import (
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    RenderedOutput,
    SplitRequest,
    SplitResponse,
)

logger = logging.getLogger(__name__)

text_host = PillowTextHost(font_dirs=list(FONT_DIRS))

app = FastAPI(
    title="Word Splitter API",
    description=(
        "Split the selected text objects of a document into individually "
        "positioned word units, keeping the authored spacing. Returns the "
        "word units as JSON and optionally as rendered files (SVG, JSON)."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


def _config_for(request: SplitRequest) -> LayoutConfig:
    config = LayoutConfig()
    if request.layer_name:
        config.layer_name = request.layer_name
    if request.margin_x is not None:
        config.margin_x = request.margin_x
    if request.margin_y is not None:
        config.margin_y = request.margin_y
    return config


# ---------------------------------------------------------------------------
# Endpoints: Split
# ---------------------------------------------------------------------------


@app.post(
    "/split",
    response_model=SplitResponse,
    responses={400: {"model": ErrorResponse, "description": "Unusable document or selection."}},
    tags=["split"],
    summary="Split a document's selected text into word units",
    description=(
        "Collects the selected text objects, lays out one word unit per word "
        "with the measured spacing, and returns the groups of units. Requested "
        "formats are rendered and returned inline."
    ),
)
def split(request: SplitRequest) -> SplitResponse:
    config = _config_for(request)
    try:
        document = parse_document(request.document)
        runs = collect_source_runs(document, selection=request.selection)
    except DocumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    container = get_or_create_layer(document, config.layer_name)
    anchor = anchor_for(document, config.margin_x, config.margin_y)
    result = split_runs(runs, text_host, container, anchor, config)
    logger.info("Split %d run(s) into %d word units", len(runs), result.total_words)

    outputs: List[RenderedOutput] = []
    for fmt in request.formats:
        for output in FORMATTERS[fmt.value]().format(result):
            content = output.content
            if isinstance(content, bytes):
                content = content.decode("utf-8")
            outputs.append(RenderedOutput(
                format=fmt.value,
                suffix=output.suffix,
                media_type=output.media_type,
                content=content,
            ))

    body = result_to_dict(result)
    return SplitResponse(
        message=summary_message(result),
        layer=body["layer"],
        anchor=body["anchor"],
        total_words=body["total_words"],
        skipped_runs=body["skipped_runs"],
        groups=body["groups"],
        outputs=outputs,
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description="Returns all supported output formats with their identifiers, names, and suffixes.",
)
def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the word-splitter-api console script."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
