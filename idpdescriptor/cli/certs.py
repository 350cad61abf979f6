"""Signing certificate CLI commands."""

from pathlib import Path

import click


@click.group()
def certs() -> None:
    """Manage the realm signing certificate.

    The certificate body is published in every generated descriptor as the
    IdP's signing key.
    """
    pass


@certs.command("generate")
@click.option(
    "--common-name",
    "-cn",
    default=None,
    help="Common Name (CN) for the certificate (default: realm name)",
)
@click.option(
    "--days",
    "-d",
    type=int,
    default=365,
    help="Days the certificate is valid",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),  # type: ignore[type-var]
    help="Output directory for certificate files",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite existing certificate files",
)
@click.pass_context
def certs_generate(
    ctx: click.Context,
    common_name: str | None,
    days: int,
    output: Path | None,
    force: bool,
) -> None:
    """Generate a self-signed realm signing certificate.

    Examples:

        # Generate for the configured realm
        idpdescriptor certs generate

        # Generate to a specific directory
        idpdescriptor certs generate --output /path/to/certs
    """
    from idpdescriptor.cli.config import get_config_path
    from idpdescriptor.core.config import load_config
    from idpdescriptor.core.crypto import (
        generate_private_key,
        generate_signing_certificate,
        get_certificate_info,
        save_certificate,
        save_private_key,
    )

    app_config = load_config(get_config_path(ctx))

    if output:
        cert_path = output / "signing.crt"
    else:
        cert_path = app_config.realm.signing_cert_path
    key_path = cert_path.with_suffix(".key")

    if not force and (cert_path.exists() or key_path.exists()):
        raise click.ClickException(
            f"Certificate files already exist at {cert_path.parent}. Use --force to overwrite."
        )

    if days < 1:
        raise click.ClickException("--days must be at least 1")

    common_name = common_name or app_config.realm.name

    click.echo("Generating signing certificate...")
    click.echo(f"  Common Name: {common_name}")
    click.echo(f"  Valid for: {days} days")
    click.echo("")

    private_key = generate_private_key()
    cert = generate_signing_certificate(private_key, common_name=common_name, days_valid=days)

    save_private_key(private_key, key_path)
    save_certificate(cert, cert_path)

    info = get_certificate_info(cert)

    click.echo("Certificate generated successfully!")
    click.echo("")
    click.echo("Files created:")
    click.echo(f"  Certificate: {cert_path}")
    click.echo(f"  Private key: {key_path}")
    click.echo("")
    click.echo("Certificate details:")
    click.echo(f"  Subject: {info.subject}")
    click.echo(f"  Valid until: {info.not_after.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    click.echo(f"  Fingerprint (SHA-256): {info.fingerprint_sha256}")


@certs.command("show")
@click.argument(
    "cert_path",
    required=False,
    type=click.Path(path_type=Path),  # type: ignore[type-var]
)
@click.option(
    "--body",
    "body_only",
    is_flag=True,
    help="Print only the base64 body as embedded in metadata",
)
@click.pass_context
def certs_show(ctx: click.Context, cert_path: Path | None, body_only: bool) -> None:
    """Show the realm signing certificate.

    Defaults to the certificate configured for the realm.
    """
    from idpdescriptor.cli.config import get_config_path
    from idpdescriptor.core.config import load_config
    from idpdescriptor.core.crypto import (
        CertificateLoadError,
        KeyLoadError,
        get_certificate_body,
        get_certificate_info,
        is_certificate_valid,
        load_certificate,
        load_private_key,
    )

    if cert_path is None:
        cert_path = load_config(get_config_path(ctx)).realm.signing_cert_path

    try:
        cert = load_certificate(cert_path)
    except CertificateLoadError as e:
        raise click.ClickException(str(e)) from None

    if body_only:
        click.echo(get_certificate_body(cert))
        return

    info = get_certificate_info(cert)
    status = "valid" if is_certificate_valid(cert) else "EXPIRED or not yet valid"

    click.echo(f"Certificate: {cert_path}")
    click.echo(f"  Subject: {info.subject}")
    click.echo(f"  Issuer: {info.issuer}")
    click.echo(f"  Serial: {info.serial_number}")
    click.echo(f"  Valid from: {info.not_before.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    click.echo(f"  Valid until: {info.not_after.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    click.echo(f"  Status: {status}")
    click.echo(f"  Key: {info.key_type} {info.key_size}")
    click.echo(f"  Fingerprint (SHA-256): {info.fingerprint_sha256}")

    key_path = cert_path.with_suffix(".key")
    if key_path.exists():
        try:
            key = load_private_key(key_path)
        except KeyLoadError as e:
            click.echo(f"  Private key: {key_path} (unreadable: {e})")
            return
        matches = key.public_key().public_numbers() == cert.public_key().public_numbers()
        click.echo(f"  Private key: {key_path} ({'matches' if matches else 'DOES NOT MATCH'})")
