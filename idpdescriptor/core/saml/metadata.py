"""Client-tailored SAML IdP metadata.

Builds an ``EntityDescriptor`` with a single ``IDPSSODescriptor`` describing
the realm's HTTP-POST endpoint and signing key, adjusted to the signing and
NameID requirements registered for one client.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from urllib.parse import quote, urlparse

from lxml import etree

from idpdescriptor.core.errors import InvalidConfigurationError
from idpdescriptor.core.logging import get_logger
from idpdescriptor.core.saml.nameid import DEFAULT_NAME_ID_FORMATS, resolve_name_id_format

logger = get_logger("saml.metadata")

# SAML namespaces
MD_NS = "urn:oasis:names:tc:SAML:2.0:metadata"
DSIG_NS = "http://www.w3.org/2000/09/xmldsig#"

NSMAP = {
    None: MD_NS,
    "dsig": DSIG_NS,
}

PROTOCOL_SAML2 = "urn:oasis:names:tc:SAML:2.0:protocol"
BINDING_HTTP_POST = "urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST"

# Login protocol segment of the realm protocol endpoint
LOGIN_PROTOCOL = "saml"


def _md(tag: str) -> str:
    return f"{{{MD_NS}}}{tag}"


def _dsig(tag: str) -> str:
    return f"{{{DSIG_NS}}}{tag}"


@dataclass(frozen=True)
class ClientSamlConfig:
    """SAML settings registered for one client (Service Provider).

    ``name_id_format`` may be a URI, a short alias such as ``"email"``, or a
    legacy ``<NameIDFormat>`` fragment. When ``force_name_id_format`` is set
    it is stored as the resolved URI; otherwise it is kept as given and never
    read.
    """

    requires_signed_authn_requests: bool = False
    force_name_id_format: bool = False
    name_id_format: str | None = None

    def __post_init__(self) -> None:
        if not self.force_name_id_format or self.name_id_format is None:
            return
        if not isinstance(self.name_id_format, str):
            raise InvalidConfigurationError(
                f"NameID format must be a string, got {type(self.name_id_format).__name__}"
            )
        resolved = None
        if self.name_id_format.strip():
            resolved = resolve_name_id_format(self.name_id_format)
        object.__setattr__(self, "name_id_format", resolved)

    @property
    def forced_name_id_format(self) -> str | None:
        """The single format to advertise, or None to advertise the defaults."""
        if self.force_name_id_format and self.name_id_format:
            return self.name_id_format
        return None


@dataclass(frozen=True)
class IdpContext:
    """Realm values the descriptor is generated from."""

    entity_id: str
    sso_binding_url: str
    signing_certificate: str

    @classmethod
    def for_realm(
        cls,
        server_base_url: str,
        realm: str,
        signing_certificate: str,
    ) -> IdpContext:
        """Build the context for a realm served under ``server_base_url``.

        The entity ID is the realm base URL; SSO and SLO share the realm's
        SAML protocol endpoint.

        Args:
            server_base_url: Public base URL of the server, e.g. "https://idp.example".
            realm: Realm name.
            signing_certificate: Base64 DER body of the realm's active signing certificate.

        Returns:
            IdpContext for the realm.
        """
        realm_url = f"{server_base_url.rstrip('/')}/realms/{quote(realm, safe='')}"
        return cls(
            entity_id=realm_url,
            sso_binding_url=f"{realm_url}/protocol/{LOGIN_PROTOCOL}",
            signing_certificate=signing_certificate,
        )


def _is_absolute_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_idp_context(idp: IdpContext) -> None:
    """Check that an IdpContext can produce usable metadata.

    ``generate`` embeds whatever it is given; callers that accept values
    from users or configuration files run this first.

    Raises:
        InvalidConfigurationError: On an empty or relative URL, or an empty
            or non-base64 certificate.
    """
    if not _is_absolute_http_url(idp.entity_id):
        raise InvalidConfigurationError(
            f"IdP entity ID must be an absolute http(s) URL: {idp.entity_id!r}"
        )
    if not _is_absolute_http_url(idp.sso_binding_url):
        raise InvalidConfigurationError(
            f"SSO binding URL must be an absolute http(s) URL: {idp.sso_binding_url!r}"
        )

    cert_data = "".join(idp.signing_certificate.split())
    if not cert_data:
        raise InvalidConfigurationError("Signing certificate is empty")
    if cert_data.startswith("-----BEGIN"):
        raise InvalidConfigurationError(
            "Signing certificate must be the base64 body without PEM headers"
        )
    try:
        base64.b64decode(cert_data, validate=True)
    except binascii.Error as e:
        raise InvalidConfigurationError(f"Signing certificate is not valid base64: {e}") from e


def build_descriptor(config: ClientSamlConfig, idp: IdpContext) -> etree._Element:
    """Build the EntityDescriptor element tree.

    Args:
        config: Client SAML settings.
        idp: Realm entity ID, endpoint and signing certificate.

    Returns:
        The EntityDescriptor root element.
    """
    root = etree.Element(_md("EntityDescriptor"), nsmap=NSMAP)
    root.set("entityID", idp.entity_id)

    descriptor = etree.SubElement(root, _md("IDPSSODescriptor"))
    descriptor.set(
        "WantAuthnRequestsSigned",
        "true" if config.requires_signed_authn_requests else "false",
    )
    descriptor.set("protocolSupportEnumeration", PROTOCOL_SAML2)

    forced = config.forced_name_id_format
    formats = (forced,) if forced else DEFAULT_NAME_ID_FORMATS
    for name_id_format in formats:
        etree.SubElement(descriptor, _md("NameIDFormat")).text = str(name_id_format)

    # One endpoint handles both; the realm dispatches on message type
    for service in ("SingleSignOnService", "SingleLogoutService"):
        etree.SubElement(
            descriptor,
            _md(service),
            Binding=BINDING_HTTP_POST,
            Location=idp.sso_binding_url,
        )

    key_descriptor = etree.SubElement(descriptor, _md("KeyDescriptor"), use="signing")
    key_info = etree.SubElement(key_descriptor, _dsig("KeyInfo"))
    x509_data = etree.SubElement(key_info, _dsig("X509Data"))
    etree.SubElement(x509_data, _dsig("X509Certificate")).text = idp.signing_certificate

    return root


def generate(config: ClientSamlConfig, idp: IdpContext) -> str:
    """Generate the client-tailored IdP metadata document.

    Deterministic: the same inputs always produce the same string. The
    certificate is embedded as given and is not parsed or re-wrapped.

    Args:
        config: Client SAML settings.
        idp: Realm entity ID, endpoint and signing certificate.

    Returns:
        SAML 2.0 metadata XML, with XML declaration.
    """
    logger.debug(
        f"Generating IdP descriptor for {idp.entity_id} "
        f"(signed requests: {config.requires_signed_authn_requests}, "
        f"NameID format: {config.forced_name_id_format or 'defaults'})"
    )
    root = build_descriptor(config, idp)
    xml_bytes = etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )
    return xml_bytes.decode("utf-8")
