"""Scan a Terraform provider and write its registration index."""

import click

from tfindex.config_runtime import load_runtime_config
from tfindex.indexer.exceptions import EmissionError, PackageLoadError
from tfindex.indexer.provider import GoPackageProvider
from tfindex.indexer.scanner import scan_provider
from tfindex.output.emitter import OutputLayout, write_index
from tfindex.output.storage import FileSystemStorage
from tfindex.pipeline.renderer import RichProgressRenderer
from tfindex.pipeline.ui import console, print_error, print_header, print_success, statistics_table
from tfindex.utils.constants import DEFAULT_OUTPUT_DIR
from tfindex.utils.error_handler import handle_exceptions
from tfindex.utils.exit_codes import ExitCodes
from tfindex.utils.logging import logger


@click.command("scan")
@handle_exceptions
@click.option(
    "--scan-path",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Directory holding one subdirectory per service package",
)
@click.option("--package-path", required=True, help="Go import path the service packages live under")
@click.option("--version", "version", required=True, help="Provider version recorded in the index")
@click.option("--output", default=DEFAULT_OUTPUT_DIR, show_default=True, help="Output directory")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Worker threads (default: CPU count)")
@click.option("--quiet", is_flag=True, help="No live progress display")
@click.option("--config-root", default=".", help="Directory containing .tfindex/config.json")
@click.pass_context
def scan(ctx, scan_path, package_path, version, output, workers, quiet, config_root):
    """Scan provider service packages and write the index.

    Every subdirectory of --scan-path is parsed as a Go package. Registrations
    found through SupportedResources, SupportedDataSources, Resources,
    DataSources and EphemeralResources are collected into one summary file;
    each resource, data source and ephemeral resource also gets its own file.

    \b
    Output:
      <output>/terraform-provider-index.json   # services + statistics
      <output>/resources/<type>.json
      <output>/datasources/<type>.json
      <output>/ephemeral/<type>.json

    \b
    EXAMPLES:
      tfindex scan --scan-path ./internal/services \\
                   --package-path github.com/hashicorp/terraform-provider-azurerm \\
                   --version v4.0.0 --output ./index
    """
    config = load_runtime_config(config_root)
    workers = workers or config["scan"]["workers"] or None
    provider = GoPackageProvider(include_tests=config["scan"]["include_tests"])
    layout = OutputLayout.from_config(output, config)
    storage = FileSystemStorage(indent=config["output"]["indent"])

    logger.debug(f"Scanning {scan_path} as {package_path} ({version})")

    failure: tuple[int, str] | None = None
    index = None
    result = None
    with RichProgressRenderer(quiet=quiet) as renderer:
        try:
            index = scan_provider(
                scan_path,
                package_path,
                version,
                progress_callback=renderer,
                workers=workers,
                provider=provider,
                resource_types=config["resolver"]["resource_types"],
            )
            result = write_index(index, layout, storage=storage, progress_callback=renderer, workers=workers)
        except PackageLoadError as e:
            failure = (ExitCodes.SCAN_FAILED, str(e))
        except EmissionError as e:
            failure = (ExitCodes.WRITE_FAILED, str(e))

    if failure is not None:
        code, message = failure
        print_error(message)
        console.print(f"[dim]{ExitCodes.get_description(code)}[/dim]", highlight=False)
        ctx.exit(code)

    print_header("SCAN RESULTS")
    console.print(statistics_table(index.statistics, version))
    console.print()
    print_success(f"Wrote {result.files_written} files")
    console.print(f"  Index:        [path]{layout.summary_path}[/path]", highlight=False)
    for label, directory in zip(
        ("Resources", "Data sources", "Ephemeral"), layout.directories()[1:]
    ):
        console.print(f"  {label + ':':<13} [path]{directory}[/path]", highlight=False)
