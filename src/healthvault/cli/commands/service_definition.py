"""service-definition command implementation"""

import asyncio
from typing import Optional
from uuid import UUID

import click
from rich.console import Console
from rich.table import Table

from ...config import HealthVaultSettings
from ...connection import HealthVaultConnection
from ...exceptions import HealthVaultError
from ...models import ServiceDefinition
from ..util import Command, load_settings

console = Console()


async def fetch_service_definition(settings: HealthVaultSettings) -> ServiceDefinition:
    async with HealthVaultConnection(settings) as connection:
        return await connection.platform_client.get_service_definition()


@click.command(name="service-definition", cls=Command)
@click.option("--app-id", type=click.UUID, default=None, help="Application id")
@click.option("--url", "health_service_url", type=str, default=None, help="Health service URL")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None)
def service_definition(app_id: Optional[UUID], health_service_url: Optional[str], config_file: Optional[str]):
    """show the platform service definition"""
    settings = load_settings(
        config_file,
        application_id=app_id,
        health_service_url=health_service_url,
    )
    try:
        definition = asyncio.run(fetch_service_definition(settings))
    except HealthVaultError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise click.Abort()

    console.print(f"Platform: {definition.platform_url} (version {definition.platform_version})")
    if definition.shell_url:
        console.print(f"Shell: {definition.shell_url}")

    table = Table(title="Instances")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Health service URL")
    for instance in definition.instances:
        table.add_row(instance.instance_id, instance.name, instance.description, instance.health_service_url)
    console.print(table)
