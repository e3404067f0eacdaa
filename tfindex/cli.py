"""tfindex CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from tfindex import __version__
from tfindex.pipeline.ui import console


class VerboseGroup(click.Group):
    """Help output grouped by category, generated from registered commands."""

    def format_commands(self, ctx, formatter):
        """Suppress default command listing (categorized format in format_help)."""
        pass

    COMMAND_CATEGORIES = {
        "INDEXING": {
            "title": "INDEXING",
            "description": "Scan provider service packages and write the index",
            "commands": ["scan", "stats"],
            "command_meta": {
                "scan": {
                    "run_when": "After provider source changes, to regenerate index files",
                },
                "stats": {
                    "use_when": "Need registration counts without writing files",
                },
            },
        },
    }

    def format_help(self, ctx, formatter):
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for category_data in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=12)
            table.add_column("Description", style="white")
            table.add_column("When", style="dim", width=48)

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                cmd = registered[cmd_name]

                first_line = (cmd.help or "").split("\n")[0].strip()
                period_idx = first_line.find(".")
                short_help = first_line[:period_idx] if period_idx > 0 else first_line

                cmd_meta = category_data.get("command_meta", {}).get(cmd_name, {})
                hint = ""
                if "use_when" in cmd_meta:
                    hint = f"USE: {cmd_meta['use_when']}"
                elif "run_when" in cmd_meta:
                    hint = f"RUN: {cmd_meta['run_when']}"

                table.add_row(cmd_name, short_help, hint)

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]tfindex <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="tfindex")
@click.help_option("-h", "--help")
def cli():
    """tfindex - Terraform provider registration indexer.

    Reads the Go source of a Terraform provider, finds every resource, data
    source and ephemeral resource each service package registers, and writes
    a JSON index plus one JSON document per entity.

    \b
    QUICK START:
      tfindex scan --scan-path ./internal/services \\
                   --package-path github.com/org/terraform-provider-x \\
                   --version v1.2.3
    """
    pass


from tfindex.commands.scan import scan
from tfindex.commands.stats import stats

cli.add_command(scan)
cli.add_command(stats)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
