"""shell-url command implementation"""

from typing import Optional, Tuple
from uuid import UUID

import click
from rich.console import Console

from ...exceptions import HealthVaultError
from ...shell import ShellRedirectParameters
from ..util import Command, load_settings, parse_pairs

console = Console()


@click.command(name="shell-url", cls=Command)
@click.option("--target", "target_location", type=str, required=True, help="Shell target, e.g. AppAuth")
@click.option("--app-id", type=click.UUID, default=None, help="Application id (appid)")
@click.option("--return-url", type=str, default=None, help="URL the Shell redirects back to")
@click.option("--signup-code", type=str, default=None)
@click.option("--shell-url", "shell_redirector_url", type=str, default=None,
              help="Base Shell URL; defaults to the configured shell_url")
@click.option("--target-param", multiple=True, metavar="KEY=VALUE", help="Extra target parameter")
@click.option("--action-param", multiple=True, metavar="KEY=VALUE", help="Parameter passed back to the application")
@click.option("--multi-record", is_flag=True, default=False, help="Application supports multiple records")
@click.option("--allow-instance-bounce", is_flag=True, default=False)
@click.option("--trm", "token_redirection_method", type=str, default=None, help="Token redirection method")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None)
def shell_url(
    target_location: str,
    app_id: Optional[UUID],
    return_url: Optional[str],
    signup_code: Optional[str],
    shell_redirector_url: Optional[str],
    target_param: Tuple[str, ...],
    action_param: Tuple[str, ...],
    multi_record: bool,
    allow_instance_bounce: bool,
    token_redirection_method: Optional[str],
    config_file: Optional[str],
):
    """build a Shell redirect URL"""
    settings = load_settings(config_file)
    parameters = ShellRedirectParameters(
        shell_redirector_url=shell_redirector_url,
        target_location=target_location,
        target_parameters=parse_pairs(target_param, "--target-param"),
        action_parameters=parse_pairs(action_param, "--action-param"),
        application_id=app_id or settings.application_id,
        return_url=return_url,
        signup_code=signup_code,
        is_multi_record_application=multi_record,
        allow_instance_bounce=allow_instance_bounce,
        token_redirection_method=token_redirection_method,
    )
    try:
        url = parameters.construct_redirect_url(settings)
    except HealthVaultError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise click.Abort()

    console.print(url, soft_wrap=True, markup=False, highlight=False)
