"""CLI entry point for idpdescriptor."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import click

from idpdescriptor import __version__
from idpdescriptor.cli import certs as certs_commands
from idpdescriptor.cli import config as config_commands
from idpdescriptor.cli import serve as serve_commands
from idpdescriptor.cli.config import get_config_path, json_option, output_result
from idpdescriptor.core.logging import configure_logging, get_logger

logger = get_logger("cli")


@click.group()
@click.version_option(version=__version__, prog_name="idpdescriptor")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    default=None,
    help="Path to config.yaml (default: ~/.idpdescriptor/config.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level (logs go to stderr)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str) -> None:
    """idpdescriptor - client-tailored SAML IdP metadata."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    configure_logging(log_level)


@cli.command()
@click.option("--client", "-c", "client_name", help="Registered client to tailor the descriptor for")
@click.option("--realm", "-r", help="Realm name (default: from config)")
@click.option("--base-url", help="Server base URL (default: from config)")
@click.option("--entity-id", help="IdP entity ID; use with --sso-url instead of --realm/--base-url")
@click.option("--sso-url", help="HTTP-POST SSO/SLO endpoint; use with --entity-id")
@click.option(
    "--cert",
    "cert_path",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Realm signing certificate, PEM or bare base64 body (default: from config)",
)
@click.option(
    "--signed/--unsigned",
    "signed",
    default=None,
    help="Whether the client must sign AuthnRequests (overrides client settings)",
)
@click.option(
    "--nameid-format",
    "-n",
    help="Advertise only this NameID format (URI or alias such as 'email')",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Write the descriptor to this file instead of stdout",
)
@click.pass_context
def generate(
    ctx: click.Context,
    client_name: str | None,
    realm: str | None,
    base_url: str | None,
    entity_id: str | None,
    sso_url: str | None,
    cert_path: Path | None,
    signed: bool | None,
    nameid_format: str | None,
    output: Path | None,
) -> None:
    """Generate the IdP metadata descriptor for a client.

    Examples:

        # Descriptor for a client registered in config.yaml
        idpdescriptor generate --client my-sp

        # Fully explicit, no config file needed
        idpdescriptor generate --base-url https://idp.example --realm demo \\
            --cert signing.crt --signed --nameid-format email

        # Save as client-tailored-saml-idp-metadata.xml
        idpdescriptor generate --client my-sp -o client-tailored-saml-idp-metadata.xml
    """
    from idpdescriptor.core.config import load_config
    from idpdescriptor.core.crypto import CertificateLoadError, load_certificate_body
    from idpdescriptor.core.errors import ClientNotFoundError, InvalidConfigurationError
    from idpdescriptor.core.resolve import resolve_client, resolve_idp_context
    from idpdescriptor.core.saml import (
        ClientSamlConfig,
        IdpContext,
        SamlIdpDescriptorInstallation,
        validate_idp_context,
    )

    if bool(entity_id) != bool(sso_url):
        raise click.UsageError("--entity-id and --sso-url must be given together")
    if entity_id and (realm or base_url):
        raise click.UsageError("--entity-id/--sso-url cannot be combined with --realm or --base-url")

    app_config = load_config(get_config_path(ctx))

    try:
        client = resolve_client(app_config, client_name) if client_name else ClientSamlConfig()

        overrides: dict[str, object] = {}
        if signed is not None:
            overrides["requires_signed_authn_requests"] = signed
        if nameid_format:
            overrides["force_name_id_format"] = True
            overrides["name_id_format"] = nameid_format
        if overrides:
            client = dataclasses.replace(client, **overrides)

        if entity_id and sso_url:
            idp = IdpContext(
                entity_id=entity_id,
                sso_binding_url=sso_url,
                signing_certificate=load_certificate_body(cert_path or app_config.realm.signing_cert_path),
            )
            validate_idp_context(idp)
        else:
            idp = resolve_idp_context(app_config, realm=realm, base_url=base_url, cert_path=cert_path)
    except (ClientNotFoundError, InvalidConfigurationError, CertificateLoadError) as e:
        logger.error(f"Cannot generate descriptor: {e}")
        raise click.ClickException(str(e)) from None

    installation = SamlIdpDescriptorInstallation()

    if output:
        result = installation.generate_download(client, idp)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.body, encoding="utf-8")
        logger.info(f"Wrote descriptor for {idp.entity_id} to {output}")
        click.echo(f"Descriptor written to: {output}")
    else:
        result = installation.generate_installation(client, idp)
        click.echo(result.body, nl=False)


@cli.command()
@json_option
def formats(output_json: bool) -> None:
    """List known NameID formats and the default advertised set."""
    from idpdescriptor.core.saml import (
        DEFAULT_NAME_ID_FORMATS,
        NameIDFormat,
        get_name_id_format_description,
    )
    from idpdescriptor.core.saml.nameid import NAME_ID_FORMAT_ALIASES

    entries = []
    for name_id_format in NameIDFormat:
        aliases = sorted(alias for alias, target in NAME_ID_FORMAT_ALIASES.items() if target is name_id_format)
        entries.append({
            "uri": name_id_format.value,
            "description": get_name_id_format_description(name_id_format.value),
            "default": name_id_format in DEFAULT_NAME_ID_FORMATS,
            "aliases": aliases,
        })

    if output_json:
        output_result({"formats": entries, "count": len(entries)}, as_json=True)
        return

    for entry in entries:
        marker = "*" if entry["default"] else " "
        alias_text = f" (aliases: {', '.join(entry['aliases'])})" if entry["aliases"] else ""
        click.echo(f"{marker} {entry['uri']}{alias_text}")
        click.echo(f"    {entry['description']}")
    click.echo("")
    click.echo("* advertised when the client does not force a format")


@cli.command()
@json_option
def provider(output_json: bool) -> None:
    """Show details of the descriptor installation provider."""
    from idpdescriptor.core.saml import SamlIdpDescriptorInstallation

    output_result(SamlIdpDescriptorInstallation().describe(), as_json=output_json)


cli.add_command(config_commands.config)
cli.add_command(certs_commands.certs)
cli.add_command(serve_commands.serve)
