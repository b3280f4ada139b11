"""
CLI for MigrationGraph using Click
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional
from datetime import datetime

import click
from tqdm import tqdm

from migrationgraph.analysis.orchestrator import analyze as analyze_selection
from migrationgraph.config import get_config
from migrationgraph.core.dry_mode import DryRunValidator
from migrationgraph.core.models import AnalysisInputError, AnalysisResult, MigrationGraphError
from migrationgraph.export import export_analysis_json, export_mermaid_diagram, visualize_analysis
from migrationgraph.graph.component_graph import ComponentGraph
from migrationgraph.graph.ingestion import build_graph
from migrationgraph.io.base import SourceType
from migrationgraph.io.component_cache import ComponentCache
from migrationgraph.io.factory import create_loader
from migrationgraph.io.file_loader import JsonFileLoader


class TeeFileHandler(logging.Handler):
    """Handler that writes to a file and to stdout at the same time"""

    def __init__(self, file_path: Path):
        super().__init__()
        self.file_path = file_path
        self.file = open(self.file_path, 'a', encoding='utf-8')
        self.stdout = sys.stdout

    def close(self):
        """Close the file when the handler is closed"""
        if self.file:
            self.file.close()
            self.file = None
        super().close()

    def emit(self, record):
        """Write record to file and stdout"""
        try:
            msg = self.format(record) + '\n'
            if self.file:
                self.file.write(msg)
                self.file.flush()
            self.stdout.write(msg)
            self.stdout.flush()
        except (OSError, ValueError):
            self.handleError(record)


def generate_log_filename(command_name: str, log_dir: Path) -> Path:
    """
    Build a log file name from a timestamp and the command

    Args:
        command_name: Command being executed
        log_dir: Directory of the log file

    Returns:
        Full log file path
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    safe_command = command_name.replace('-', '_')
    return log_dir / f"{safe_command}_{timestamp}.log"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    auto_log: bool = False,
    command_name: Optional[str] = None,
    log_dir: Optional[str] = None
) -> Optional[Path]:
    """
    Configure logging, optionally with one log file per command

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Explicit log file (overrides auto-logging)
        auto_log: Create a log file automatically
        command_name: Command name (for auto-logging)
        log_dir: Log directory (for auto-logging)

    Returns:
        Path of the log file, if any
    """
    log_file_path = None

    if log_file:
        log_file_path = Path(log_file)
    elif auto_log and command_name and log_dir:
        log_file_path = generate_log_filename(command_name, Path(log_dir))

    handlers: List[logging.Handler] = []
    if log_file_path:
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(TeeFileHandler(log_file_path))
        except OSError as e:
            click.echo(f"⚠️  Could not create log file {log_file_path}: {e}", err=True)
            log_file_path = None

    if not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    return log_file_path


def load_graph(snapshot: Optional[str], org: Optional[str], derive_structure: bool = False) -> ComponentGraph:
    """
    Load a graph from a snapshot file or from the cache

    Raises:
        click.UsageError: If neither source is given
        MigrationGraphError: If loading fails
    """
    if snapshot:
        return JsonFileLoader(snapshot, derive_structure=derive_structure).load_graph(org)
    if org:
        graph = create_loader(SourceType.CACHE).load_graph(org)
        if derive_structure:
            graph = build_graph(graph, derive_structure=True)
        return graph
    raise click.UsageError("Provide --snapshot or --org")


def read_ids_file(path: Optional[str]) -> List[str]:
    if not path:
        return []
    with open(path, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip() and not line.startswith('#')]


def print_result(result: AnalysisResult) -> None:
    click.echo("\n" + "=" * 60)
    click.echo("DEPENDENCY ANALYSIS")
    click.echo("=" * 60)

    click.echo(f"\nSelected components ({len(result.selected_components)}):")
    for component in result.selected_components:
        click.echo(f"  • {component.name} ({component.type.value})")
        for note in result.analysis_notes.get(component.id, []):
            click.echo(f"      - {note}")

    click.echo(f"\nCustom dependencies to migrate ({len(result.custom_dependencies)}):")
    for component in result.custom_dependencies:
        click.echo(f"  • {component.name} ({component.type.value})")

    click.echo(f"\nStandard objects with custom fields ({len(result.standard_objects_with_fields)}):")
    for group in result.standard_objects_with_fields:
        field_names = ", ".join(f.name for f in group.custom_fields)
        click.echo(f"  • {group.object_name}: {field_names}")


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', is_flag=True, help='Verbose mode (DEBUG)')
@click.option('--log-file', type=click.Path(), help='Log file (overrides auto-logging)')
@click.option('--no-auto-log', is_flag=True, default=False, help='Disable automatic log files')
@click.pass_context
def cli(ctx, verbose, log_file, no_auto_log):
    """MigrationGraph - dependency analysis for component migrations"""
    ctx.ensure_object(dict)
    config = get_config()
    ctx.obj['config'] = config

    command_name = ctx.invoked_subcommand or 'cli'
    use_auto_log = not log_file and not no_auto_log and config.auto_log_enabled

    log_level = "DEBUG" if verbose else config.log_level
    log_file_path = setup_logging(
        log_level=log_level,
        log_file=log_file,
        auto_log=use_auto_log,
        command_name=command_name,
        log_dir=config.log_dir
    )
    ctx.obj['log_file_path'] = log_file_path

    if log_file_path:
        logging.getLogger(__name__).info(f"Execution log saved to: {log_file_path}")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('--snapshot', '-s', type=click.Path(exists=True, dir_okay=False),
              help='Component snapshot JSON file')
@click.option('--org', help='Organization id (loads from cache when no snapshot is given)')
@click.option('--component', '-c', 'component_ids', multiple=True, help='Selected component id (repeatable)')
@click.option('--ids-file', type=click.Path(exists=True, dir_okay=False),
              help='File with one selected component id per line')
@click.option('--allow-partial', is_flag=True, default=False,
              help='Skip component ids missing from the graph')
@click.option('--derive-structure', is_flag=True, default=False,
              help='Add edges parsed from LWC/Apex source and object/field edges before analysing')
@click.option('--output-dir', '-o', type=click.Path(), help='Output directory (default: ./output)')
@click.option('--export-json/--no-export-json', default=True, help='Export JSON (default: True)')
@click.option('--export-mermaid', is_flag=True, default=False, help='Export Mermaid diagram')
@click.option('--export-png', is_flag=True, default=False, help='Export PNG graph')
@click.option('--dry-run', is_flag=True, default=False, help='Validate without analysing')
@click.pass_context
def analyze(ctx, snapshot, org, component_ids, ids_file, allow_partial, derive_structure,
            output_dir, export_json, export_mermaid, export_png, dry_run):
    """Analyze the dependencies of selected components"""
    config = ctx.obj['config']
    logger = logging.getLogger(__name__)

    try:
        selection = list(dict.fromkeys(list(component_ids) + read_ids_file(ids_file)))
        graph = load_graph(snapshot, org, derive_structure)
        allow_partial = allow_partial or config.allow_partial_selection

        if dry_run:
            click.echo("🔍 DRY-RUN MODE: validating without analysing\n")
            validation = DryRunValidator(config).validate_analysis(graph, selection, allow_partial)
            for line in validation.info:
                click.echo(f"ℹ️  {line}")
            for line in validation.warnings:
                click.echo(f"⚠️  {line}")
            for line in validation.errors:
                click.echo(f"❌ {line}", err=True)
            if not validation.is_valid:
                sys.exit(1)
            click.echo("\n✅ Validation passed")
            return

        if len(selection) > config.max_selection_size:
            raise click.UsageError(
                f"Selection of {len(selection)} components exceeds the limit of {config.max_selection_size}"
            )
        if len(graph) > config.max_graph_size:
            raise click.UsageError(
                f"Graph of {len(graph)} components exceeds the limit of {config.max_graph_size}"
            )

        result = analyze_selection(selection, graph, allow_partial=allow_partial)
        print_result(result)

        if export_json or export_mermaid or export_png:
            output_path = Path(output_dir) if output_dir else Path(config.output_dir)
            output_path.mkdir(parents=True, exist_ok=True)

            if export_json:
                json_file = output_path / "dependency_analysis.json"
                export_analysis_json(result, str(json_file), organization_id=org)
                click.echo(f"\n📄 JSON: {json_file}")
            if export_mermaid:
                mermaid_file = output_path / "dependency_diagram.md"
                export_mermaid_diagram(result, graph, str(mermaid_file), max_nodes=config.mermaid_max_nodes)
                click.echo(f"📄 Mermaid: {mermaid_file}")
            if export_png:
                png_file = output_path / "dependency_graph.png"
                visualize_analysis(result, graph, str(png_file))
                click.echo(f"🖼️  PNG: {png_file}")

        click.echo("\n✅ Analysis complete!")

    except AnalysisInputError as e:
        logger.error(f"Input error: {e}")
        click.echo(f"❌ Input error: {e}", err=True)
        sys.exit(1)
    except MigrationGraphError as e:
        logger.exception("Analysis failed")
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option('--snapshot', '-s', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Component snapshot JSON file')
@click.option('--org', help='Organization id (default: the snapshot organization)')
@click.option('--derive-structure', is_flag=True, default=False,
              help='Add source-parsed and object/field edges, then recompute dependents before caching')
@click.option('--cache-dir', type=click.Path(file_okay=False), help='Cache directory (overrides config)')
@click.pass_context
def sync(ctx, snapshot, org, derive_structure, cache_dir):
    """Import a component snapshot into the cache"""
    try:
        loader = JsonFileLoader(snapshot, derive_structure=derive_structure)
        graph = loader.load_graph(org)
        organization = loader.organization
        organization_id = org or (organization.id if organization else None)
        if not organization_id:
            raise click.UsageError("Snapshot declares no organization, pass --org")

        cache = ComponentCache(cache_dir or ctx.obj['config'].cache_dir)
        if organization is not None:
            organization.last_synced_at = datetime.now().isoformat()
            cache.upsert_organization(organization)

        count = cache.upsert_components(
            organization_id,
            tqdm(graph, desc="Caching components", unit="component", total=len(graph))
        )
        click.echo(f"✅ {count} components cached for organization {organization_id}")

    except MigrationGraphError as e:
        logging.getLogger(__name__).exception("Sync failed")
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@cli.command('graph-info')
@click.option('--snapshot', '-s', type=click.Path(exists=True, dir_okay=False),
              help='Component snapshot JSON file')
@click.option('--org', help='Organization id (loads from cache when no snapshot is given)')
def graph_info(snapshot, org):
    """Show graph statistics, migration readiness, cycles and dangling edges"""
    try:
        graph = load_graph(snapshot, org)
        stats = graph.get_statistics()

        click.echo(f"Components: {stats['total_components']}")
        click.echo(f"Edges: {stats['total_edges']}")
        click.echo("\nBy type:")
        for type_name, type_stats in sorted(stats['by_type'].items()):
            click.echo(f"  {type_name}: {type_stats['total']} "
                       f"({type_stats['custom']} custom, {type_stats['completed']} completed)")
        click.echo("\nBy status:")
        for status, count in stats['by_status'].items():
            click.echo(f"  {status}: {count}")

        ready = graph.get_ready_to_migrate()
        click.echo(f"\nReady to migrate: {len(ready)}")
        for component in ready:
            click.echo(f"  {component.name} ({component.type.value})")
        click.echo(f"Blocked: {len(graph.get_blocked_components())}")

        cycles = graph.find_circular_dependencies()
        click.echo(f"\nCircular dependency groups: {len(cycles)}")
        for group in cycles:
            click.echo(f"  {', '.join(group)}")

        dangling = graph.find_dangling_edges()
        click.echo(f"\nDangling edges: {len(dangling)}")
        for source, target in dangling:
            click.echo(f"  {source} -> {target}")

    except MigrationGraphError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('component_id')
@click.option('--snapshot', '-s', type=click.Path(exists=True, dir_okay=False),
              help='Component snapshot JSON file')
@click.option('--org', help='Organization id (loads from cache when no snapshot is given)')
def dependents(component_id, snapshot, org):
    """List components that transitively depend on COMPONENT_ID"""
    try:
        graph = load_graph(snapshot, org)
        if component_id not in graph:
            click.echo(f"❌ Component not found: {component_id}", err=True)
            sys.exit(1)

        impacted = graph.get_all_dependents(component_id)
        click.echo(f"{len(impacted)} component(s) depend on {graph.get(component_id).name}:")
        for component in impacted:
            click.echo(f"  • {component.name} ({component.type.value})")

    except MigrationGraphError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    cli()
