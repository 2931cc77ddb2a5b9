"""Unit tests for the output formatters.

WHY: Formatters are the contract with downstream tools. The JSON output
must always satisfy its schema (and therefore the no-stroke policy), and
the SVG preview must place words where the layout put them.

HOW: A SplitResult is produced from the sample document with the fixed
width host, then rendered by each formatter:
  - Word Units JSON: schema validation, field values, rejection of a bad unit
  - SVG: element structure, coordinates, colors
"""

import json
import xml.etree.ElementTree as ET

import jsonschema
import pytest

from word_splitter.core.document import collect_source_runs, get_or_create_layer, parse_document
from word_splitter.core.ir import (
    CMYKColor,
    GrayColor,
    NoColor,
    OutputGroup,
    RGBColor,
    SpotColor,
    SplitResult,
    StyleAttributes,
    WordUnit,
)
from word_splitter.core.splitter import split_runs
from word_splitter.formatters import FORMATTERS
from word_splitter.formatters.svg import SVGFormatter, css_color
from word_splitter.formatters.word_units import WordUnitsFormatter, _get_schema, result_to_dict

SVG = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def sample_result(sample_document, fixed_host, layout_config):
    document = parse_document(sample_document)
    runs = collect_source_runs(document)
    container = get_or_create_layer(document, layout_config.layer_name)
    return split_runs(runs, fixed_host, container, (40.0, 712.0), layout_config)


class TestRegistry:

    def test_keys(self):
        assert sorted(FORMATTERS) == ["svg", "word_units"]

    def test_suffixes_unique(self):
        suffixes = [cls().suffix for cls in FORMATTERS.values()]
        assert len(set(suffixes)) == len(suffixes)


class TestWordUnitsFormatter:

    def test_schema_validation(self, sample_result):
        outputs = WordUnitsFormatter().format(sample_result)
        assert len(outputs) == 1
        data = json.loads(outputs[0].content)
        jsonschema.validate(instance=data, schema=_get_schema())

    def test_output_suffix_and_media_type(self, sample_result):
        output = WordUnitsFormatter().format(sample_result)[0]
        assert output.suffix == "-words.json"
        assert output.media_type == "application/json"

    def test_totals_and_groups(self, sample_result):
        data = json.loads(WordUnitsFormatter().format(sample_result)[0].content)
        assert data["layer"] == "Split Text"
        assert data["anchor"] == [40.0, 712.0]
        assert data["total_words"] == 5
        assert [g["source"] for g in data["groups"]] == ["Title", "body"]
        assert [u["text"] for u in data["groups"][0]["units"]] == ["Hello", "world", "foo"]

    def test_unit_positions(self, sample_result):
        data = json.loads(WordUnitsFormatter().format(sample_result)[0].content)
        hello, world, foo = data["groups"][0]["units"]
        assert (hello["x"], hello["y"], hello["width"]) == (40.0, 712.0, 50.0)
        assert world["x"] == 110.0
        assert foo["x"] == 40.0
        assert foo["y"] == pytest.approx(700.0)

    def test_stroke_forced_off(self, sample_result):
        data = json.loads(WordUnitsFormatter().format(sample_result)[0].content)
        for group in data["groups"]:
            for unit in group["units"]:
                assert unit["style"]["stroke_color"] == {"model": "none"}
                assert unit["style"]["stroke_weight"] == 0
                assert unit["style"]["overprint_stroke"] is False

    def test_fill_color_preserved(self, sample_result):
        data = json.loads(WordUnitsFormatter().format(sample_result)[0].content)
        style = data["groups"][0]["units"][0]["style"]
        assert style["fill_color"] == {"model": "rgb", "red": 255, "green": 0, "blue": 0}
        assert style["font"] == "Helvetica"

    def test_invalid_unit_rejected(self):
        bad = WordUnit(text="x", x=0, y=0, style=StyleAttributes(), width=0.0)
        result = SplitResult(
            layer_name="Split Text",
            groups=[OutputGroup(name="SplitWords_1", units=[bad])],
            total_words=1,
            anchor=(0.0, 0.0),
        )
        with pytest.raises(jsonschema.ValidationError):
            WordUnitsFormatter().format(result)

    def test_result_to_dict_empty(self):
        result = SplitResult(layer_name="L", groups=[], total_words=0, anchor=(1.0, 2.0))
        assert result_to_dict(result) == {
            "layer": "L",
            "anchor": [1.0, 2.0],
            "total_words": 0,
            "skipped_runs": 0,
            "groups": [],
        }


class TestSVGFormatter:

    def _root(self, result):
        output = SVGFormatter().format(result)[0]
        return ET.fromstring(output.content.split("\n", 1)[1])

    def test_output_suffix_and_media_type(self, sample_result):
        output = SVGFormatter().format(sample_result)[0]
        assert output.suffix == "-words.svg"
        assert output.media_type == "image/svg+xml"
        assert output.content.startswith('<?xml version="1.0"')

    def test_one_text_element_per_unit(self, sample_result):
        root = self._root(sample_result)
        texts = root.findall(".//{}text".format(SVG))
        assert [t.text for t in texts] == ["Hello", "world", "foo", "A", "B"]

    def test_groups_nested_in_layer(self, sample_result):
        root = self._root(sample_result)
        layer = root.find("{}g".format(SVG))
        assert layer.get("id") == "Split Text"
        assert [g.get("id") for g in layer.findall("{}g".format(SVG))] == ["SplitWords_1", "SplitWords_2"]

    def test_y_is_flipped(self, sample_result):
        root = self._root(sample_result)
        hello = root.find(".//{}text".format(SVG))
        assert hello.get("x") == "40"
        assert hello.get("y") == "-712"
        assert hello.get("fill") == "rgb(255,0,0)"
        assert hello.get("font-family") == "Helvetica"
        assert hello.get("stroke") is None

    def test_empty_result(self):
        result = SplitResult(layer_name="L", groups=[], total_words=0, anchor=(0.0, 0.0))
        root = self._root(result)
        assert root.get("viewBox") == "0 0 1 1"


class TestCssColor:

    @pytest.mark.parametrize("color, expected", [
        (None, None),
        (NoColor(), "none"),
        (RGBColor(255, 128, 0), "rgb(255,128,0)"),
        (GrayColor(0), "rgb(255,255,255)"),
        (GrayColor(100), "rgb(0,0,0)"),
        (CMYKColor(0, 0, 0, 100), "rgb(0,0,0)"),
        (CMYKColor(100, 0, 0, 0), "rgb(0,255,255)"),
        (SpotColor("PANTONE 185 C", 50), "rgb(0,0,0)"),
    ])
    def test_conversion(self, color, expected):
        assert css_color(color) == expected
