"""Client-tailored IdP descriptor routes."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, request

from idpdescriptor.app import APP_CONFIG_KEY
from idpdescriptor.core.config import AppConfig
from idpdescriptor.core.crypto import CertificateLoadError
from idpdescriptor.core.errors import ClientNotFoundError, InvalidConfigurationError
from idpdescriptor.core.logging import get_logger
from idpdescriptor.core.resolve import resolve_client, resolve_idp_context
from idpdescriptor.core.saml import SamlIdpDescriptorInstallation

logger = get_logger("web.descriptor")

descriptor_bp = Blueprint(
    "descriptor",
    __name__,
    url_prefix="/realms",
)

installation = SamlIdpDescriptorInstallation()


def _error(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"error": message}), status


def _is_truthy(value: str | None) -> bool:
    return (value or "").lower() in ("true", "1", "yes", "on")


@descriptor_bp.route(f"/<realm>/clients/<client_id>/installation/{installation.id}")
def client_descriptor(realm: str, client_id: str) -> Response | tuple[Response, int]:
    """Serve the IdP descriptor tailored for one client.

    Returned as text/plain for viewing; with ``?download=true`` as an
    application/xml attachment.
    """
    app_config: AppConfig = current_app.config[APP_CONFIG_KEY]

    if realm != app_config.realm.name:
        return _error(f"Realm not found: {realm}", 404)

    try:
        client = resolve_client(app_config, client_id)
        idp = resolve_idp_context(app_config, realm=realm)
    except ClientNotFoundError as e:
        return _error(str(e), 404)
    except (InvalidConfigurationError, CertificateLoadError) as e:
        logger.error(f"Cannot generate descriptor for client {client_id}: {e}")
        return _error(f"Descriptor unavailable: {e}", 500)

    if _is_truthy(request.args.get("download")):
        result = installation.generate_download(client, idp)
    else:
        result = installation.generate_installation(client, idp)

    response = Response(result.body, mimetype=result.media_type)
    if result.content_disposition:
        response.headers["Content-Disposition"] = result.content_disposition

    logger.info(f"Served descriptor for client {client_id} in realm {realm}")
    return response


@descriptor_bp.route(f"/<realm>/installation/{installation.id}")
def provider_info(realm: str) -> Response | tuple[Response, int]:
    """Describe the installation provider and the clients it can serve."""
    app_config: AppConfig = current_app.config[APP_CONFIG_KEY]

    if realm != app_config.realm.name:
        return _error(f"Realm not found: {realm}", 404)

    details = installation.describe()
    details["clients"] = sorted(app_config.clients)
    return jsonify(details)
