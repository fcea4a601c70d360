"""Root CLI group for deadair."""

from __future__ import annotations

import click

from deadair import __version__
from deadair.utils.progress import set_verbose


@click.group()
@click.version_option(version=__version__, prog_name="deadair")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
def cli(verbose: bool) -> None:
    """deadair — find and cut dead air in recorded demo videos."""
    set_verbose(verbose)


# Import and register subcommands
from deadair.cli.analyze_cmd import analyze_cmd  # noqa: E402
from deadair.cli.check_cmd import check_cmd  # noqa: E402
from deadair.cli.trim_cmd import trim_cmd  # noqa: E402

cli.add_command(analyze_cmd, "analyze")
cli.add_command(trim_cmd, "trim")
cli.add_command(check_cmd, "check")
