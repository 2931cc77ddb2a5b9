"""Tests for the FastAPI splitter API.

WHY: Validates that the HTTP endpoints split documents like the CLI does
and map fatal document errors to 400 responses with the same messages.

HOW: FastAPI TestClient for synchronous in-process requests. Requests use
the shared sample document; measurement goes through the app's Pillow host,
so assertions check counts, names, and relative positions only.

RULES:
- Each test is independent (documents are parsed per request)
- Tests cover: happy paths, rendered outputs, 400 and 422 errors
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from word_splitter import __version__
from word_splitter.server.app import app


@pytest.fixture
def client():
    return TestClient(app)


# ---------------------------------------------------------------------------
# POST /split
# ---------------------------------------------------------------------------


class TestSplit:

    def test_split_sample(self, client, sample_document):
        resp = client.post("/split", json={"document": sample_document})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total_words"] == 5
        assert body["layer"] == "Split Text"
        assert body["message"] == "Created 5 word blocks on layer: Split Text"
        assert [g["name"] for g in body["groups"]] == ["SplitWords_1", "SplitWords_2"]
        assert body["outputs"] == []

    def test_unit_positions(self, client, sample_document):
        body = client.post("/split", json={"document": sample_document}).json()
        hello, world, foo = body["groups"][0]["units"]
        assert body["anchor"] == [40.0, 712.0]
        assert (hello["x"], hello["y"]) == (40.0, 712.0)
        assert world["x"] > hello["x"] + hello["width"]
        assert foo["x"] == 40.0
        assert foo["y"] < hello["y"]

    def test_stroke_forced_off(self, client, sample_document):
        body = client.post("/split", json={"document": sample_document}).json()
        for group in body["groups"]:
            for unit in group["units"]:
                assert unit["style"]["stroke_color"] == {"model": "none"}
                assert unit["style"]["stroke_weight"] == 0

    def test_overrides(self, client, sample_document):
        resp = client.post("/split", json={
            "document": sample_document,
            "selection": ["body"],
            "layer_name": "Words",
            "margin_x": 0,
            "margin_y": 0,
        })
        body = resp.json()
        assert body["total_words"] == 2
        assert body["layer"] == "Words"
        assert body["anchor"] == [0.0, 792.0]

    def test_rendered_outputs(self, client, sample_document):
        resp = client.post("/split", json={"document": sample_document, "formats": ["svg", "word_units"]})
        outputs = resp.json()["outputs"]
        assert [o["suffix"] for o in outputs] == ["-words.svg", "-words.json"]
        assert outputs[0]["media_type"] == "image/svg+xml"
        assert outputs[0]["content"].startswith("<?xml")
        assert json.loads(outputs[1]["content"])["total_words"] == 5

    def test_skipped_runs_reported(self, client, sample_document):
        body = client.post("/split", json={"document": sample_document, "selection": ["blank", "body"]}).json()
        assert body["skipped_runs"] == 1
        assert body["total_words"] == 2

    def test_nothing_selected(self, client, sample_document):
        sample_document["selection"] = []
        resp = client.post("/split", json={"document": sample_document})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Nothing is selected."

    def test_no_text_frames(self, client, sample_document):
        resp = client.post("/split", json={"document": sample_document, "selection": ["pinned"]})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No live text frames inside the selection."

    def test_invalid_document(self, client):
        resp = client.post("/split", json={"document": {"layers": "nope"}})
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("No document open")

    @pytest.mark.parametrize("key, value", [
        ("fill_color", "red"),
        ("fill_color", {"model": "lab"}),
        ("size", "big"),
        ("leading", "14"),
    ])
    def test_wrongly_typed_style_attribute_is_400(self, client, sample_document, key, value):
        sample_document["layers"][0]["items"][0]["styles"][0]["attributes"][key] = value
        resp = client.post("/split", json={"document": sample_document})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail.startswith("No document open: invalid document")
        assert "attributes.{}".format(key) in detail

    def test_unknown_format_is_422(self, client, sample_document):
        resp = client.post("/split", json={"document": sample_document, "formats": ["pdf"]})
        assert resp.status_code == 422

    def test_missing_document_is_422(self, client):
        resp = client.post("/split", json={})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# GET /formats and /health
# ---------------------------------------------------------------------------


class TestFormats:

    def test_lists_formats(self, client):
        resp = client.get("/formats")
        assert resp.status_code == 200
        assert resp.json() == [
            {"key": "svg", "name": "SVG Preview", "suffix": "-words.svg"},
            {"key": "word_units", "name": "Word Units JSON", "suffix": "-words.json"},
        ]


class TestHealth:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__}
