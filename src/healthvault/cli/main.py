"""HealthVault CLI entry point"""

import logging

import click

from ..logger import setup_logging
from .commands.service_definition import service_definition
from .commands.shell_url import shell_url
from .util import Group


@click.group(
    name="healthvault",
    cls=Group,
    help="HealthVault - client SDK tools",
)
@click.option("--log-dir", type=click.Path(file_okay=False), default=None, help="Write rotating log files here")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
def main(log_dir: str, verbose: bool):
    """Main CLI entry point"""
    setup_logging(log_dir, logging.DEBUG if verbose else logging.WARNING)


# Register commands
main.add_command(shell_url)
main.add_command(service_definition)


if __name__ == "__main__":
    main()
