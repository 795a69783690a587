"""CLI utility functions"""

from typing import Dict, Iterable, Optional

import click
from pydantic import ValidationError

from ..config import HealthVaultSettings


class Group(click.Group):
    def get_help_option(self, ctx):
        help_option = super().get_help_option(ctx)
        if help_option:
            help_option.help = 'show help for this command'
        return help_option


class Command(click.Command):
    def get_help_option(self, ctx):
        help_option = super().get_help_option(ctx)
        if help_option:
            help_option.help = 'show help for this command'
        return help_option


def load_settings(config_file: Optional[str] = None, **overrides) -> HealthVaultSettings:
    """Load settings from the environment and an optional TOML file

    Args:
        config_file: TOML file path, read for this settings object only
        overrides: Values taking precedence over every other source; None
            values are ignored

    Raises:
        click.BadParameter: If the resulting settings are invalid
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        if config_file:
            return HealthVaultSettings.from_config_file(config_file, **values)
        return HealthVaultSettings(**values)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="configuration")


def parse_pairs(pairs: Iterable[str], option: str) -> Dict[str, str]:
    """Parse repeated KEY=VALUE options into a dict, keeping order"""
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
        result[key] = value
    return result
