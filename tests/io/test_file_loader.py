"""
Tests for JSON snapshot loading
"""

import json

import pytest

from migrationgraph.core.models import ComponentLoadError
from migrationgraph.io.base import SourceType
from migrationgraph.io.file_loader import JsonFileLoader, read_snapshot


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestReadSnapshot:

    def test_with_organization(self, snapshot_file):
        organization, components = read_snapshot(snapshot_file)

        assert organization.id == "00D000000000001"
        assert organization.org_type == "sandbox"
        assert organization.instance_url == "https://source.example.com"
        assert len(components) == 9
        assert components[0].id == "lwc1"

    def test_bare_list(self, tmp_path):
        path = write_json(tmp_path / "list.json", [
            {"id": "a", "name": "A", "type": "apex", "apiName": "A"},
        ])

        organization, components = read_snapshot(path)

        assert organization is None
        assert [c.id for c in components] == ["a"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ComponentLoadError, match="not found"):
            read_snapshot(tmp_path / "missing.json")

    def test_directory(self, tmp_path):
        with pytest.raises(ComponentLoadError, match="not a file"):
            read_snapshot(tmp_path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ComponentLoadError, match="Invalid JSON"):
            read_snapshot(path)

    @pytest.mark.parametrize("data", [
        {"organization": {"id": "00D1", "name": "x"}},
        {"components": "nope"},
        "just a string",
    ])
    def test_no_component_list(self, tmp_path, data):
        with pytest.raises(ComponentLoadError, match="no component list"):
            read_snapshot(write_json(tmp_path / "bad.json", data))

    def test_invalid_component(self, tmp_path):
        path = write_json(tmp_path / "bad.json", [{"id": "a", "type": "macro"}])

        with pytest.raises(ComponentLoadError, match="#0"):
            read_snapshot(path)

    def test_non_dict_component(self, tmp_path):
        with pytest.raises(ComponentLoadError):
            read_snapshot(write_json(tmp_path / "bad.json", ["a"]))

    def test_invalid_organization(self, tmp_path):
        path = write_json(tmp_path / "bad.json", {
            "organization": {"id": "00D1", "name": "x", "orgType": "trial"},
            "components": [],
        })

        with pytest.raises(ComponentLoadError, match="Invalid organization"):
            read_snapshot(path)


class TestJsonFileLoader:

    def test_load_graph(self, snapshot_file):
        loader = JsonFileLoader(str(snapshot_file))

        graph = loader.load_graph()

        assert loader.get_source_type() == SourceType.FILE
        assert len(graph) == 9
        assert loader.organization.name == "Source Org"

    def test_organization_mismatch(self, snapshot_file):
        loader = JsonFileLoader(str(snapshot_file))

        with pytest.raises(ComponentLoadError, match="belongs to organization"):
            loader.load_components("00DOTHER")

    def test_matching_organization(self, snapshot_file):
        components = JsonFileLoader(str(snapshot_file)).load_components("00D000000000001")

        assert len(components) == 9

    def test_derive_structure(self, tmp_path):
        path = write_json(tmp_path / "org.json", [
            {"id": "obj", "name": "Invoice", "type": "object", "apiName": "Invoice__c"},
            {"id": "total", "name": "Total", "type": "field", "apiName": "Invoice__c.Total__c"},
        ])

        graph = JsonFileLoader(str(path), derive_structure=True).load_graph()

        assert [d.id for d in graph.get("obj").dependencies] == ["total"]
        assert [d.id for d in graph.get("total").dependents] == ["obj"]
