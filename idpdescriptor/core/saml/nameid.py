"""NameID format values advertised in IdP metadata."""

from __future__ import annotations

from enum import StrEnum

from lxml import etree

from idpdescriptor.core.errors import InvalidConfigurationError


class NameIDFormat(StrEnum):
    """Well-known SAML NameID format URIs."""

    PERSISTENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"
    TRANSIENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:transient"
    UNSPECIFIED = "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"
    EMAIL = "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress"
    X509_SUBJECT = "urn:oasis:names:tc:SAML:1.1:nameid-format:X509SubjectName"
    WINDOWS_DOMAIN = "urn:oasis:names:tc:SAML:1.1:nameid-format:WindowsDomainQualifiedName"
    KERBEROS = "urn:oasis:names:tc:SAML:2.0:nameid-format:kerberos"
    ENTITY = "urn:oasis:names:tc:SAML:2.0:nameid-format:entity"


# Advertised, in this order, when a client does not force a format
DEFAULT_NAME_ID_FORMATS: tuple[NameIDFormat, ...] = (
    NameIDFormat.PERSISTENT,
    NameIDFormat.TRANSIENT,
    NameIDFormat.UNSPECIFIED,
    NameIDFormat.EMAIL,
)

# Short names used in client settings
NAME_ID_FORMAT_ALIASES: dict[str, NameIDFormat] = {
    "persistent": NameIDFormat.PERSISTENT,
    "transient": NameIDFormat.TRANSIENT,
    "unspecified": NameIDFormat.UNSPECIFIED,
    "username": NameIDFormat.UNSPECIFIED,
    "email": NameIDFormat.EMAIL,
}

NAME_ID_FORMAT_DESCRIPTIONS: dict[str, str] = {
    NameIDFormat.EMAIL: "Email Address - uses the user's email as identifier",
    NameIDFormat.UNSPECIFIED: "Unspecified - format left to IdP discretion",
    NameIDFormat.PERSISTENT: "Persistent - stable pseudonymous identifier across sessions",
    NameIDFormat.TRANSIENT: "Transient - temporary identifier for this session only",
    NameIDFormat.X509_SUBJECT: "X.509 Subject Name - distinguished name format",
    NameIDFormat.WINDOWS_DOMAIN: "Windows Domain - DOMAIN\\username format",
    NameIDFormat.KERBEROS: "Kerberos Principal - name@REALM format",
    NameIDFormat.ENTITY: "Entity - entityID reference",
}


def _parse_fragment(fragment: str) -> str:
    """Extract the format URI from a pre-rendered <NameIDFormat> element."""
    try:
        elem = etree.fromstring(fragment.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        raise InvalidConfigurationError(f"Invalid NameIDFormat fragment: {e}") from e

    if etree.QName(elem).localname != "NameIDFormat":
        raise InvalidConfigurationError(
            f"Expected a NameIDFormat element, got <{etree.QName(elem).localname}>"
        )
    if len(elem):
        raise InvalidConfigurationError("NameIDFormat element must not have child elements")

    uri = (elem.text or "").strip()
    if not uri:
        raise InvalidConfigurationError("NameIDFormat element is empty")
    return uri


def resolve_name_id_format(value: str) -> str:
    """Resolve a configured NameID format to its URI.

    Accepts a full URI, one of the short aliases in NAME_ID_FORMAT_ALIASES,
    or a pre-rendered ``<NameIDFormat>uri</NameIDFormat>`` fragment as found
    in older client settings. Unknown URIs are passed through unchanged.

    Args:
        value: Configured format.

    Returns:
        The NameID format URI.

    Raises:
        InvalidConfigurationError: If a fragment is malformed or empty.
    """
    value = value.strip()
    if value.startswith("<"):
        return _parse_fragment(value)

    alias = NAME_ID_FORMAT_ALIASES.get(value.lower())
    if alias is not None:
        return alias.value
    return value


def get_name_id_format_description(format_uri: str) -> str:
    """Get human-readable description for a NameID format.

    Args:
        format_uri: The NameID format URI.

    Returns:
        Human-readable description.
    """
    return NAME_ID_FORMAT_DESCRIPTIONS.get(format_uri, f"Custom format: {format_uri}")
