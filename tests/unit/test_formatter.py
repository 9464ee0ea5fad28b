"""Tests for output formatting."""

from __future__ import annotations

import json
from io import StringIO
from unittest.mock import patch

import pytest
import yaml
from rich.console import Console

from ignition_scan.models.project import CacheStats, ProjectMetadata
from ignition_scan.models.resource import ResourceOrigin
from ignition_scan.output.formatter import output, output_csv, to_plain


@pytest.fixture
def captured():
    buf = StringIO()
    console = Console(file=buf, force_terminal=False, width=200)
    with patch("ignition_scan.output.formatter.console", console):
        yield buf


class TestToPlain:
    def test_model(self):
        assert to_plain(ProjectMetadata(title="A"))["title"] == "A"

    def test_enum_serialized(self):
        data = to_plain({"origin": ResourceOrigin.INHERITED, "stats": CacheStats()})
        assert data["stats"]["hit_rate"] == 0.0
        assert json.dumps(to_plain(ResourceOrigin.INHERITED)) == '"inherited"'

    def test_nested(self):
        data = {"projects": [ProjectMetadata(title="A")], "count": 1}
        assert to_plain(data) == {
            "projects": [ProjectMetadata(title="A").model_dump(mode="json")],
            "count": 1,
        }


class TestOutputJson:
    def test_dict(self, captured):
        output({"key": "val"}, "json")
        assert json.loads(captured.getvalue()) == {"key": "val"}

    def test_models(self, captured):
        output([CacheStats(entries=2)], "json")
        assert json.loads(captured.getvalue())[0]["entries"] == 2

    def test_empty_list(self, captured):
        output([], "json")
        assert json.loads(captured.getvalue()) == []


class TestOutputYaml:
    def test_dict(self, captured):
        output({"key": "val"}, "yaml")
        assert yaml.safe_load(captured.getvalue()) == {"key": "val"}

    def test_model_list(self, captured):
        output([ProjectMetadata(title="A")], "yaml")
        assert yaml.safe_load(captured.getvalue())[0]["title"] == "A"


class TestOutputCsv:
    def test_csv_output(self, captured):
        output_csv(["Name", "Value"], [["a", "1"], ["b", None]])
        lines = captured.getvalue().splitlines()
        assert lines == ["Name,Value", "a,1", "b,"]

    def test_csv_via_output(self, captured):
        output([], "csv", columns=["A", "B"], rows=[["1", "2"]])
        assert "A,B" in captured.getvalue()

    def test_csv_without_columns_falls_back_to_json(self, captured):
        output({"k": "v"}, "csv")
        assert json.loads(captured.getvalue()) == {"k": "v"}


class TestOutputTable:
    def test_columns_rows(self, captured):
        output([], "table", columns=["A", "B"], rows=[["1", "2"]], title="Test")
        out = captured.getvalue()
        assert "Test" in out
        assert "1" in out

    def test_dict_as_kv(self, captured):
        output({"entries": 3}, "table", title="Cache")
        assert "entries" in captured.getvalue()

    def test_model_as_kv(self, captured):
        output(CacheStats(entries=3), "table")
        assert "cache_hits" in captured.getvalue()

    def test_other(self, captured):
        output("plain text", "table")
        assert "plain text" in captured.getvalue()
