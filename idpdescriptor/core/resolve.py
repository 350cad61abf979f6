"""Resolve generator inputs from application configuration."""

from __future__ import annotations

from pathlib import Path

from idpdescriptor.core.config import AppConfig
from idpdescriptor.core.crypto.certs import load_certificate_body
from idpdescriptor.core.errors import ClientNotFoundError
from idpdescriptor.core.saml.metadata import ClientSamlConfig, IdpContext, validate_idp_context


def resolve_idp_context(
    config: AppConfig,
    realm: str | None = None,
    base_url: str | None = None,
    cert_path: Path | None = None,
) -> IdpContext:
    """Build and validate the IdpContext for a realm.

    Arguments left as None fall back to the configured values.

    Raises:
        CertificateLoadError: If the signing certificate cannot be loaded.
        InvalidConfigurationError: If the resulting context is unusable.
    """
    idp = IdpContext.for_realm(
        server_base_url=base_url or config.server.public_base_url,
        realm=realm or config.realm.name,
        signing_certificate=load_certificate_body(cert_path or config.realm.signing_cert_path),
    )
    validate_idp_context(idp)
    return idp


def resolve_client(config: AppConfig, name: str) -> ClientSamlConfig:
    """Get the generator settings for a registered client.

    Raises:
        ClientNotFoundError: If the client is not configured.
        InvalidConfigurationError: If its NameID format is malformed.
    """
    client = config.clients.get(name)
    if client is None:
        raise ClientNotFoundError(f"Client not found: {name}")
    return client.to_saml_config()
