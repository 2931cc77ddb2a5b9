"""Document host: loads a JSON document and supplies runs, layer, and anchor.

WHY: The splitter core works on SourceTextRuns, an injected output
container, and an anchor point. Something has to produce those from a real
document: walk the selection for text objects, find or create the output
layer, and work out where on the active artboard the words should start.

HOW: The document JSON is validated with pydantic models (layers of nested
nodes with strictly typed style attributes and tagged colors, artboards,
and a selection list of node ids). collect_source_runs() descends from
each selected node, stopping at text nodes. Output layers are
OutputContainers kept on the Document next to the parsed model.

RULES:
- Missing file, bad JSON, invalid structure, or wrongly typed style
  attributes → NoDocumentError
- Selection: explicit argument, else the document's own selection list
- Empty selection → EmptySelectionError; unknown ids are ignored
- Descend only within the selection; hidden or locked nodes are skipped
  with their whole subtree
- No text nodes found → NoTextFramesError
- Text contents are normalized to "\\n" line breaks; style offsets refer
  to the normalized contents
- get_or_create_layer is idempotent and leaves the layer unlocked and visible
- anchor_for: (left + margin_x, top - margin_y) of the active artboard
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr, ValidationError

from word_splitter.core.ir import (
    CMYKColor,
    Color,
    GrayColor,
    NoColor,
    OutputContainer,
    RGBColor,
    SourceTextRun,
    SpotColor,
    StyleAttributes,
    StyleRange,
)
from word_splitter.core.tokenizer import normalize_line_breaks
from word_splitter.exceptions import EmptySelectionError, NoDocumentError, NoTextFramesError

logger = logging.getLogger(__name__)

TEXT_NODE_TYPE = "text"

_COLOR_FIELDS = frozenset({"fill_color", "stroke_color"})


# ---------------------------------------------------------------------------
# Document schema
# ---------------------------------------------------------------------------


# Numbers must arrive as JSON numbers; "14" or true is a bad document.
Number = Union[StrictInt, StrictFloat]


class NoColorModel(BaseModel):
    model: Literal["none"]

    def to_color(self) -> Color:
        return NoColor()


class GrayColorModel(BaseModel):
    model: Literal["gray"]
    gray: Number = 0.0

    def to_color(self) -> Color:
        return GrayColor(gray=self.gray)


class RGBColorModel(BaseModel):
    model: Literal["rgb"]
    red: Number = 0.0
    green: Number = 0.0
    blue: Number = 0.0

    def to_color(self) -> Color:
        return RGBColor(red=self.red, green=self.green, blue=self.blue)


class CMYKColorModel(BaseModel):
    model: Literal["cmyk"]
    cyan: Number = 0.0
    magenta: Number = 0.0
    yellow: Number = 0.0
    black: Number = 0.0

    def to_color(self) -> Color:
        return CMYKColor(cyan=self.cyan, magenta=self.magenta, yellow=self.yellow, black=self.black)


class SpotColorModel(BaseModel):
    model: Literal["spot"]
    spot: StrictStr = ""
    tint: Number = 100.0

    def to_color(self) -> Color:
        return SpotColor(spot=self.spot, tint=self.tint)


ColorModel = Annotated[
    Union[NoColorModel, GrayColorModel, RGBColorModel, CMYKColorModel, SpotColorModel],
    Field(discriminator="model"),
]


class StyleAttributesModel(BaseModel):
    """Character attributes as they appear in the document.

    RULES:
    - Every field is optional; absent and null both mean "not set"
    - Colors are tagged objects discriminated by ``model``
    - Unknown keys are ignored
    """

    font: Optional[StrictStr] = None
    size: Optional[Number] = None
    fill_color: Optional[ColorModel] = None
    stroke_color: Optional[ColorModel] = None
    tracking: Optional[Number] = None
    leading: Optional[Number] = None
    horizontal_scale: Optional[Number] = None
    vertical_scale: Optional[Number] = None
    baseline_shift: Optional[Number] = None
    capitalization: Optional[StrictStr] = None
    kerning: Optional[Number] = None
    stroke_weight: Optional[Number] = None
    overprint_fill: Optional[StrictBool] = None
    overprint_stroke: Optional[StrictBool] = None

    def to_attributes(self) -> StyleAttributes:
        values: Dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            if name in _COLOR_FIELDS:
                value = value.to_color()
            values[name] = value
        return StyleAttributes(**values)


class StyleRangeModel(BaseModel):
    """A [start, end) character span and its attributes."""

    start: int = Field(ge=0, description="First character index (inclusive).")
    end: int = Field(ge=0, description="Last character index (exclusive).")
    attributes: StyleAttributesModel = Field(
        default_factory=StyleAttributesModel,
        description="Character attributes (font, size, fill_color, ...).",
    )


class NodeModel(BaseModel):
    """A page item. Text nodes carry contents; containers carry children."""

    id: Optional[str] = Field(default=None, description="Stable id used by the selection.")
    type: str = Field(default="group", description="'text', 'group', 'path', ...")
    name: Optional[str] = None
    hidden: bool = False
    locked: bool = False
    contents: Optional[str] = None
    styles: List[StyleRangeModel] = Field(default_factory=list)
    children: List[NodeModel] = Field(default_factory=list)


NodeModel.model_rebuild()


class LayerModel(BaseModel):
    name: str
    locked: bool = False
    visible: bool = True
    items: List[NodeModel] = Field(default_factory=list)


class ArtboardModel(BaseModel):
    name: Optional[str] = None
    rect: Tuple[float, float, float, float] = Field(
        description="[left, top, right, bottom] with y growing upward.",
    )


class DocumentModel(BaseModel):
    name: Optional[str] = None
    artboards: List[ArtboardModel] = Field(default_factory=list)
    active_artboard: int = 0
    layers: List[LayerModel] = Field(default_factory=list)
    selection: List[str] = Field(default_factory=list)


@dataclass
class Document:
    """A parsed document plus the output layers created during this session."""

    model: DocumentModel
    output_layers: List[OutputContainer] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.model.name or "Untitled"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_document(data: Any) -> Document:
    """Validate a decoded JSON value as a document.

    RULES:
    - Wrong structure or wrongly typed style values → NoDocumentError
    - The message names the first offending field, e.g.
      ``layers.0.items.0.styles.0.attributes.size``
    """
    if not isinstance(data, dict):
        raise NoDocumentError("No document open: expected a JSON object.")
    try:
        model = DocumentModel.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise NoDocumentError("No document open: invalid document ({} errors): {}: {}".format(
            e.error_count(), location, first["msg"]
        )) from e
    return Document(model=model)


def load_document(path: str | Path) -> Document:
    """Read and validate a document JSON file.

    Raises:
        NoDocumentError: If the file is missing, unreadable, or invalid.
    """
    doc_path = Path(path)
    if not doc_path.is_file():
        raise NoDocumentError("No document open: file not found: {}".format(doc_path))
    try:
        data = json.loads(doc_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise NoDocumentError("No document open: cannot read {}: {}".format(doc_path, e)) from e
    return parse_document(data)


# ---------------------------------------------------------------------------
# Source runs
# ---------------------------------------------------------------------------


def _iter_nodes(nodes: Sequence[NodeModel]) -> Iterator[NodeModel]:
    for node in nodes:
        yield node
        yield from _iter_nodes(node.children)


def _index_nodes(model: DocumentModel) -> Dict[str, NodeModel]:
    index: Dict[str, NodeModel] = {}
    for layer in model.layers:
        for node in _iter_nodes(layer.items):
            if node.id is not None and node.id not in index:
                index[node.id] = node
    return index


def run_from_node(node: NodeModel) -> SourceTextRun:
    """Build a SourceTextRun from a text node."""
    ranges = [
        StyleRange(
            start=s.start,
            end=s.end,
            attributes=s.attributes.to_attributes(),
        )
        for s in node.styles
    ]
    return SourceTextRun(
        contents=normalize_line_breaks(node.contents or ""),
        style_ranges=ranges,
        name=node.name or node.id,
    )


def run_from_text(
    text: str,
    style: Optional[StyleAttributes] = None,
    name: Optional[str] = None,
) -> SourceTextRun:
    """A single uniformly styled run, for plain-text input."""
    contents = normalize_line_breaks(text)
    attributes = style or StyleAttributes()
    return SourceTextRun(
        contents=contents,
        style_ranges=[StyleRange(start=0, end=max(1, len(contents)), attributes=attributes)],
        name=name,
    )


def _collect(node: NodeModel, out: List[SourceTextRun]) -> None:
    if node.hidden or node.locked:
        return
    if node.type == TEXT_NODE_TYPE:
        out.append(run_from_node(node))
        return
    for child in node.children:
        _collect(child, out)


def collect_source_runs(
    document: Document,
    selection: Optional[Sequence[str]] = None,
) -> List[SourceTextRun]:
    """Collect text runs from the selected nodes, in selection order.

    Args:
        document: The loaded document.
        selection: Node ids to use instead of the document's own selection.

    Raises:
        EmptySelectionError: If nothing is selected.
        NoTextFramesError: If the selection holds no live text nodes.
    """
    selected = list(selection) if selection else list(document.model.selection)
    if not selected:
        raise EmptySelectionError("Nothing is selected.")

    index = _index_nodes(document.model)
    runs: List[SourceTextRun] = []
    for node_id in selected:
        node = index.get(node_id)
        if node is None:
            logger.warning("Selected id %r not found in document", node_id)
            continue
        _collect(node, runs)

    if not runs:
        raise NoTextFramesError("No live text frames inside the selection.")
    return runs


# ---------------------------------------------------------------------------
# Output layer and anchor
# ---------------------------------------------------------------------------


def get_or_create_layer(document: Document, name: str) -> OutputContainer:
    """Return the output layer called ``name``, creating it if needed."""
    for container in document.output_layers:
        if container.name == name:
            container.locked = False
            container.visible = True
            return container

    for layer in document.model.layers:
        if layer.name == name:
            layer.locked = False
            layer.visible = True

    container = OutputContainer(name=name)
    document.output_layers.append(container)
    return container


def anchor_for(document: Document, margin_x: float, margin_y: float) -> Tuple[float, float]:
    """Starting cursor position inside the active artboard."""
    artboards = document.model.artboards
    if not artboards:
        return (margin_x, -margin_y)
    active = document.model.active_artboard
    if not 0 <= active < len(artboards):
        active = 0
    left, top, _right, _bottom = artboards[active].rect
    return (left + margin_x, top - margin_y)
