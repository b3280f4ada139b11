"""
Tests for ingestion helpers
"""

from migrationgraph.graph.ingestion import (
    build_graph,
    compute_dependents,
    link_object_fields,
    link_source_references,
)
from helpers import dep, make_component


def edge_ids(edges):
    return [e.id for e in edges]


class TestLinkObjectFields:

    def test_links_objects_and_fields(self):
        components = [
            make_component("obj", "object", api_name="Invoice__c"),
            make_component("total", "field", api_name="Invoice__c.Total__c"),
            make_component("due", "field", api_name="Invoice__c.Due__c"),
            make_component("region", "field", api_name="Account.Region__c"),
        ]

        linked = {c.id: c for c in link_object_fields(components)}

        assert edge_ids(linked["obj"].dependencies) == ["total", "due"]
        assert edge_ids(linked["total"].dependencies) == ["obj"]
        assert edge_ids(linked["region"].dependencies) == []

    def test_existing_edges_not_duplicated(self):
        components = [
            make_component("obj", "object", [dep("total", "field")], api_name="Invoice__c"),
            make_component("total", "field", [dep("obj")], api_name="Invoice__c.Total__c"),
        ]

        linked = link_object_fields(components)

        assert edge_ids(linked[0].dependencies) == ["total"]
        assert edge_ids(linked[1].dependencies) == ["obj"]

    def test_input_untouched(self):
        obj = make_component("obj", "object", api_name="Invoice__c")
        link_object_fields([obj, make_component("total", "field", api_name="Invoice__c.Total__c")])

        assert obj.dependencies == ()


class TestLinkSourceReferences:

    def test_edges_from_source(self):
        components = [
            make_component("lwc", "lwc", api_name="invoiceList",
                           metadata={"source": "import getX from '@salesforce/apex/Ctrl.getX';"}),
            make_component("ctrl", "apex", [dep("obj")], api_name="Ctrl",
                           metadata={"source": "Helper h = new Helper();\nMissing m = null;"}),
            make_component("helper", "apex", api_name="Helper"),
            make_component("obj", "object", api_name="Invoice__c"),
        ]

        linked = {c.id: c for c in link_source_references(components)}

        assert edge_ids(linked["lwc"].dependencies) == ["ctrl"]
        assert edge_ids(linked["ctrl"].dependencies) == ["obj", "helper"]
        assert linked["helper"].dependencies == ()
        assert components[0].dependencies == ()


class TestComputeDependents:

    def test_inverse_edges(self):
        components = [
            make_component("lwc", "lwc", [dep("apex", "apex")]),
            make_component("trg", "trigger", [dep("apex", "apex", required=False), dep("trg", "trigger")]),
            make_component("apex", "apex", [dep("ghost", "apex")]),
        ]

        result = {c.id: c for c in compute_dependents(components)}

        assert edge_ids(result["apex"].dependents) == ["lwc", "trg"]
        assert result["apex"].dependents[1].required is False
        assert result["trg"].dependents == ()
        assert result["lwc"].dependents == ()


class TestBuildGraph:

    def test_plain(self):
        graph = build_graph([make_component("obj", "object", api_name="Invoice__c"),
                             make_component("total", "field", api_name="Invoice__c.Total__c")])

        assert graph.get("obj").dependencies == ()

    def test_derive_structure(self):
        graph = build_graph([make_component("obj", "object", api_name="Invoice__c"),
                             make_component("total", "field", api_name="Invoice__c.Total__c")],
                            derive_structure=True)

        assert edge_ids(graph.get("obj").dependencies) == ["total"]
        assert edge_ids(graph.get("obj").dependents) == ["total"]
        assert edge_ids(graph.get("total").dependents) == ["obj"]

    def test_derive_structure_parses_source(self):
        components = [
            make_component("lwc", "lwc", api_name="invoiceList",
                           metadata={"source": "import getX from '@salesforce/apex/Ctrl.getX';"}),
            make_component("ctrl", "apex", api_name="Ctrl", metadata={"source": "Helper h = new Helper();"}),
            make_component("helper", "apex", api_name="Helper"),
        ]

        graph = build_graph(components, derive_structure=True)

        assert edge_ids(graph.get("lwc").dependencies) == ["ctrl"]
        assert edge_ids(graph.get("ctrl").dependencies) == ["helper"]
        assert edge_ids(graph.get("helper").dependents) == ["ctrl"]
        assert edge_ids(graph.get("ctrl").dependents) == ["lwc"]

        plain = build_graph(components)

        assert plain.get("lwc").dependencies == ()
        assert plain.get("ctrl").dependencies == ()
