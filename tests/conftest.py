"""
Shared test fixtures
"""

import json
import pytest

from migrationgraph.config.config import Config
from migrationgraph.graph.component_graph import ComponentGraph
from helpers import dep, make_component


# ==================== Config Fixtures ====================

@pytest.fixture(autouse=True)
def reset_config(monkeypatch, tmp_path):
    """Fresh configuration per test, writing into tmp_path"""
    monkeypatch.setenv("MIGRATIONGRAPH_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("MIGRATIONGRAPH_OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.setenv("MIGRATIONGRAPH_LOG_DIR", str(tmp_path / "logs"))
    Config.reset_instance()
    yield
    Config.reset_instance()


# ==================== Graph Fixtures ====================

@pytest.fixture
def sample_components():
    """
    Small org:

        invoiceList (lwc) -> InvoiceController (apex) -> Invoice__c (object)
        Invoice__c -> Invoice__c.Total__c, Invoice__c.Account__c (custom fields)
        InvoiceController -> Account (standard) -> Account.Region__c, Account.Name
        InvoiceTrigger (trigger) -> InvoiceController, Invoice__c
    """
    return [
        make_component("lwc1", "lwc", [dep("apex1", "apex")], api_name="invoiceList", name="invoiceList"),
        make_component("apex1", "apex", [dep("obj_invoice"), dep("obj_account")],
                       api_name="InvoiceController", name="InvoiceController"),
        make_component("obj_invoice", "object", [dep("fld_total", "field"), dep("fld_inv_account", "field")],
                       api_name="Invoice__c", name="Invoice"),
        make_component("fld_total", "field", [dep("obj_invoice")],
                       api_name="Invoice__c.Total__c", name="Total"),
        make_component("fld_inv_account", "field", [dep("obj_invoice"), dep("obj_account")],
                       api_name="Invoice__c.Account__c", name="Account Lookup"),
        make_component("obj_account", "object", [dep("fld_region", "field"), dep("fld_name", "field")],
                       api_name="Account", name="Account"),
        make_component("fld_region", "field", [dep("obj_account")],
                       api_name="Account.Region__c", name="Region"),
        make_component("fld_name", "field", [dep("obj_account")],
                       api_name="Account.Name", name="Account Name"),
        make_component("trg1", "trigger", [dep("apex1", "apex"), dep("obj_invoice")],
                       api_name="InvoiceTrigger", name="InvoiceTrigger"),
    ]


@pytest.fixture
def sample_graph(sample_components):
    return ComponentGraph(sample_components)


@pytest.fixture
def snapshot_file(tmp_path, sample_components):
    """Snapshot JSON file with organization block"""
    path = tmp_path / "snapshot.json"
    data = {
        "organization": {
            "id": "00D000000000001",
            "name": "Source Org",
            "instanceUrl": "https://source.example.com",
            "orgType": "sandbox",
            "apiVersion": "59.0",
        },
        "components": [c.to_dict() for c in sample_components],
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
