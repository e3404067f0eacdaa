"""Scan a provider and report registration counts without writing files."""

import json

import click

from tfindex.config_runtime import load_runtime_config
from tfindex.indexer.exceptions import PackageLoadError
from tfindex.indexer.provider import GoPackageProvider
from tfindex.indexer.scanner import scan_provider
from tfindex.pipeline.ui import console, print_error, statistics_table
from tfindex.utils.error_handler import handle_exceptions
from tfindex.utils.exit_codes import ExitCodes


@click.command("stats")
@handle_exceptions
@click.option(
    "--scan-path",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Directory holding one subdirectory per service package",
)
@click.option("--package-path", required=True, help="Go import path the service packages live under")
@click.option("--version", "version", default="dev", show_default=True, help="Provider version label")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Worker threads (default: CPU count)")
@click.option("--json", "as_json", is_flag=True, help="Print statistics as JSON")
@click.option("--config-root", default=".", help="Directory containing .tfindex/config.json")
@click.pass_context
def stats(ctx, scan_path, package_path, version, workers, as_json, config_root):
    """Count registrations per category without writing the index.

    \b
    EXAMPLES:
      tfindex stats --scan-path ./internal/services --package-path github.com/org/provider
      tfindex stats --scan-path ./internal/services --package-path github.com/org/provider --json
    """
    config = load_runtime_config(config_root)
    try:
        index = scan_provider(
            scan_path,
            package_path,
            version,
            workers=workers or config["scan"]["workers"] or None,
            provider=GoPackageProvider(include_tests=config["scan"]["include_tests"]),
            resource_types=config["resolver"]["resource_types"],
        )
    except PackageLoadError as e:
        print_error(str(e))
        ctx.exit(ExitCodes.SCAN_FAILED)

    if as_json:
        click.echo(json.dumps(index.statistics.to_dict(), indent=2))
        return

    console.print(statistics_table(index.statistics, version))
