"""Settings command group."""

import click
import yaml
from pydantic import ValidationError
from rich.console import Console

from devtodo.cli.helpers import get_storage_manager
from devtodo.models.settings import SettingsPatch, UserSettings
from devtodo.services.exceptions import ServiceError
from devtodo.services.task_service import SettingsService

CLEAR_VALUES = ('', 'none', 'null')


def resolve_setting_name(key: str) -> str:
    """Map a snake_case or camelCase key to the settings field name."""
    for name, info in UserSettings.model_fields.items():
        if key in (name, info.alias):
            return name
    raise click.BadParameter(f"Unknown setting: {key}", param_hint='KEY')


@click.group()
def settings():
    """View and change user settings"""
    pass


@settings.command()
@click.pass_context
def show(ctx):
    """Show current settings"""
    service = SettingsService(get_storage_manager())
    service.load_settings()
    if service.error:
        click.echo(f"Error: {service.error}", err=True)
        ctx.exit(1)
    click.echo(yaml.safe_dump(service.settings.to_json_dict(), sort_keys=False), nl=False)


@settings.command(name='set')
@click.argument('key')
@click.argument('value')
@click.pass_context
def set_setting(ctx, key, value):
    """Set KEY to VALUE (use 'none' to clear an optional setting)

    Examples:
        devtodo settings set font_size 16
        devtodo settings set weekStartsOn sunday
    """
    console = Console()
    name = resolve_setting_name(key)
    raw = None if value.strip().lower() in CLEAR_VALUES else value

    try:
        patch = SettingsPatch.model_validate({name: raw})
    except ValidationError as e:
        console.print(f"[red]Invalid value for {name}: {e.errors()[0]['msg']}[/red]")
        ctx.exit(1)

    service = SettingsService(get_storage_manager())
    try:
        updated = service.update_settings(patch)
    except ServiceError as e:
        console.print(f"[red]Error saving settings: {e}[/red]")
        ctx.exit(1)

    console.print(f"[green]{name} = {getattr(updated, name)!r}[/green]")


@settings.command()
@click.confirmation_option(prompt='Reset all settings to defaults?')
@click.pass_context
def reset(ctx):
    """Reset all settings to defaults"""
    console = Console()
    service = SettingsService(get_storage_manager())
    try:
        service.reset_settings()
    except ServiceError as e:
        console.print(f"[red]Error resetting settings: {e}[/red]")
        ctx.exit(1)
    console.print("[green]Settings reset to defaults[/green]")
