"""
Tests for the Click CLI
"""

import json
import logging

import pytest
from click.testing import CliRunner

from main import TeeFileHandler, cli, generate_log_filename, read_ids_file, setup_logging
from migrationgraph.io.component_cache import ComponentCache

ORG_ID = "00D000000000001"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop the handlers installed by setup_logging() after each test"""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, TeeFileHandler):
            root.removeHandler(handler)
            handler.close()


class TestAnalyzeCommand:

    def test_analyze_snapshot(self, runner, snapshot_file, tmp_path):
        output_dir = tmp_path / "out"

        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '--snapshot', str(snapshot_file),
            '-c', 'lwc1', '-o', str(output_dir)
        ])

        assert result.exit_code == 0, result.output
        assert "Analysis complete!" in result.output
        assert "Custom dependencies to migrate (2)" in result.output
        assert "Account: Region" in result.output
        data = json.loads((output_dir / "dependency_analysis.json").read_text(encoding="utf-8"))
        assert [c["id"] for c in data["customDependencies"]] == ["apex1", "obj_invoice"]

    def test_analyze_mermaid_only(self, runner, snapshot_file, tmp_path):
        output_dir = tmp_path / "out"

        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '-c', 'lwc1',
            '-o', str(output_dir), '--no-export-json', '--export-mermaid'
        ])

        assert result.exit_code == 0, result.output
        assert (output_dir / "dependency_diagram.md").exists()
        assert not (output_dir / "dependency_analysis.json").exists()

    def test_analyze_ids_file(self, runner, snapshot_file, tmp_path):
        ids_file = tmp_path / "ids.txt"
        ids_file.write_text("# selection\nlwc1\n\ntrg1\n", encoding="utf-8")

        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '--ids-file', str(ids_file),
            '--no-export-json'
        ])

        assert result.exit_code == 0, result.output
        assert "Selected components (2)" in result.output

    def test_analyze_unknown_component(self, runner, snapshot_file):
        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '-c', 'lwc1', '-c', 'ghost',
            '--no-export-json'
        ])

        assert result.exit_code == 1
        assert "Input error" in result.output
        assert "ghost" in result.output

    def test_analyze_allow_partial(self, runner, snapshot_file):
        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '-c', 'lwc1', '-c', 'ghost',
            '--allow-partial', '--no-export-json'
        ])

        assert result.exit_code == 0, result.output
        assert "Selected components (1)" in result.output

    def test_analyze_empty_selection(self, runner, snapshot_file):
        result = runner.invoke(cli, ['--no-auto-log', 'analyze', '-s', str(snapshot_file), '--no-export-json'])

        assert result.exit_code == 1
        assert "Input error" in result.output

    def test_analyze_without_source(self, runner):
        result = runner.invoke(cli, ['--no-auto-log', 'analyze', '-c', 'lwc1'])

        assert result.exit_code == 2
        assert "--snapshot or --org" in result.output

    def test_analyze_selection_limit(self, runner, snapshot_file, monkeypatch):
        monkeypatch.setenv("MIGRATIONGRAPH_MAX_SELECTION_SIZE", "1")

        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '-c', 'lwc1', '-c', 'trg1'
        ])

        assert result.exit_code == 2
        assert "exceeds the limit" in result.output

    def test_dry_run(self, runner, snapshot_file, tmp_path):
        output_dir = tmp_path / "out"

        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '-c', 'lwc1',
            '-o', str(output_dir), '--dry-run'
        ])

        assert result.exit_code == 0, result.output
        assert "DRY-RUN MODE" in result.output
        assert "Validation passed" in result.output
        assert not output_dir.exists()

    def test_dry_run_invalid(self, runner, snapshot_file):
        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '-s', str(snapshot_file), '-c', 'ghost', '--dry-run'
        ])

        assert result.exit_code == 1
        assert "Components not found in graph: ghost" in result.output


class TestSyncCommand:

    def test_sync_then_analyze_from_cache(self, runner, snapshot_file, tmp_path):
        result = runner.invoke(cli, ['--no-auto-log', 'sync', '--snapshot', str(snapshot_file)])

        assert result.exit_code == 0, result.output
        assert f"9 components cached for organization {ORG_ID}" in result.output

        organization = ComponentCache(str(tmp_path / "cache")).get_organization(ORG_ID)
        assert organization.org_type == "sandbox"
        assert organization.last_synced_at is not None

        result = runner.invoke(cli, [
            '--no-auto-log', 'analyze', '--org', ORG_ID, '-c', 'lwc1', '--no-export-json'
        ])

        assert result.exit_code == 0, result.output
        assert "Custom dependencies to migrate (2)" in result.output

    def test_sync_cache_dir(self, runner, snapshot_file, tmp_path):
        cache_dir = tmp_path / "other_cache"

        result = runner.invoke(cli, [
            '--no-auto-log', 'sync', '-s', str(snapshot_file), '--cache-dir', str(cache_dir)
        ])

        assert result.exit_code == 0, result.output
        assert len(ComponentCache(str(cache_dir)).get_components(ORG_ID)) == 9

    def test_sync_organization_mismatch(self, runner, snapshot_file):
        result = runner.invoke(cli, ['--no-auto-log', 'sync', '-s', str(snapshot_file), '--org', '00DOTHER'])

        assert result.exit_code == 1
        assert "belongs to organization" in result.output

    def test_analyze_uncached_org(self, runner):
        result = runner.invoke(cli, ['--no-auto-log', 'analyze', '--org', '00DNONE', '-c', 'lwc1'])

        assert result.exit_code == 1
        assert "Run 'sync' first" in result.output


class TestInspectionCommands:

    def test_graph_info(self, runner, snapshot_file):
        result = runner.invoke(cli, ['--no-auto-log', 'graph-info', '-s', str(snapshot_file)])

        assert result.exit_code == 0, result.output
        assert "Components: 9" in result.output
        assert "Edges: 14" in result.output
        assert "Dangling edges: 0" in result.output
        assert "Ready to migrate: 0" in result.output
        assert "Blocked: 9" in result.output
        assert "Circular dependency groups: 2" in result.output
        assert "obj_invoice, fld_total, fld_inv_account" in result.output
        assert "obj_account, fld_region, fld_name" in result.output

    def test_dependents(self, runner, snapshot_file):
        result = runner.invoke(cli, ['--no-auto-log', 'dependents', 'obj_invoice', '-s', str(snapshot_file)])

        assert result.exit_code == 0, result.output
        assert "5 component(s) depend on Invoice" in result.output
        assert "invoiceList (lwc)" in result.output

    def test_dependents_unknown(self, runner, snapshot_file):
        result = runner.invoke(cli, ['--no-auto-log', 'dependents', 'ghost', '-s', str(snapshot_file)])

        assert result.exit_code == 1
        assert "Component not found: ghost" in result.output

    def test_help_without_command(self, runner):
        result = runner.invoke(cli, ['--no-auto-log'])

        assert result.exit_code == 0
        assert "analyze" in result.output
        assert "sync" in result.output


class TestLoggingHelpers:

    def test_generate_log_filename(self, tmp_path):
        path = generate_log_filename("graph-info", tmp_path)

        assert path.parent == tmp_path
        assert path.name.startswith("graph_info_")
        assert path.suffix == ".log"

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"

        path = setup_logging(log_level="INFO", log_file=str(log_file))
        logging.getLogger("migrationgraph.test").info("hello log")

        assert path == log_file
        assert "hello log" in log_file.read_text(encoding="utf-8")

    def test_setup_logging_auto(self, tmp_path):
        path = setup_logging(auto_log=True, command_name="analyze", log_dir=str(tmp_path))

        assert path.parent == tmp_path
        assert path.exists()

    def test_setup_logging_without_file(self):
        assert setup_logging(log_level="WARNING") is None

    def test_read_ids_file(self, tmp_path):
        ids_file = tmp_path / "ids.txt"
        ids_file.write_text("a\n# comment\n  b  \n\n", encoding="utf-8")

        assert read_ids_file(str(ids_file)) == ["a", "b"]
        assert read_ids_file(None) == []
