"""Configuration management CLI commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

# Common option for JSON output
json_option = click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON for scripting",
)


def output_result(data: dict[str, Any], as_json: bool = False) -> None:
    """Output result as JSON or formatted text.

    Args:
        data: Data to output
        as_json: If True, output as JSON
    """
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
        return
    for key, value in data.items():
        click.echo(f"{key}: {value}")


def error_result(message: str, as_json: bool = False) -> NoReturn:
    """Output error message and exit.

    This function never returns - it either raises ClickException or calls sys.exit.

    Args:
        message: Error message
        as_json: If True, output as JSON
    """
    if as_json:
        click.echo(json.dumps({"error": message}, indent=2), err=True)
        sys.exit(1)
    raise click.ClickException(message)


def get_config_path(ctx: click.Context) -> Path | None:
    """Config file path passed to the top-level command, if any."""
    obj = ctx.find_root().obj or {}
    return obj.get("config_path")


@click.group()
def config() -> None:
    """Manage idpdescriptor configuration."""
    pass


@config.command("init")
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite an existing configuration file.",
)
@json_option
@click.pass_context
def config_init(ctx: click.Context, force: bool, output_json: bool) -> None:
    """Write an example configuration file.

    Examples:

        # Create ~/.idpdescriptor/config.yaml
        idpdescriptor config init

        # Write somewhere else
        idpdescriptor --config ./idp.yaml config init
    """
    from idpdescriptor.core.config import DEFAULT_CONFIG_FILE, get_default_config_yaml

    path = get_config_path(ctx) or DEFAULT_CONFIG_FILE

    if path.exists() and not force:
        if output_json:
            output_result({"status": "exists", "path": str(path)}, as_json=True)
            return
        click.echo(f"Configuration file already exists: {path}")
        click.echo("Use --force to overwrite it.")
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(get_default_config_yaml())

    if output_json:
        output_result({"status": "created", "path": str(path)}, as_json=True)
    else:
        click.echo(f"Configuration written to: {path}")


@config.command("show")
@json_option
@click.pass_context
def config_show(ctx: click.Context, output_json: bool) -> None:
    """Show the effective configuration (file plus environment)."""
    from idpdescriptor.core.config import load_config

    path = get_config_path(ctx)
    if path is not None and not path.exists():
        error_result(f"Config file not found: {path}", as_json=output_json)

    app_config = load_config(path)
    data = app_config.to_dict()

    if output_json:
        output_result(data, as_json=True)
        return

    click.echo(f"Config file: {app_config.config_path or 'none (defaults)'}")
    click.echo("")
    click.echo("Server:")
    click.echo(f"  Bind: {app_config.server.host}:{app_config.server.port}")
    click.echo(f"  Base URL: {app_config.server.public_base_url}")
    click.echo("")
    click.echo("Realm:")
    click.echo(f"  Name: {app_config.realm.name}")
    click.echo(f"  Signing certificate: {app_config.realm.signing_cert_path}")
    click.echo("")
    if not app_config.clients:
        click.echo("No clients configured.")
        return
    click.echo("Clients:")
    for name, client in app_config.clients.items():
        forced = client.name_id_format if client.force_name_id_format else None
        name_id = forced or "defaults"
        click.echo(
            f"  {name}: signed requests={str(client.requires_signed_authn_requests).lower()}, "
            f"NameID format={name_id}"
        )
