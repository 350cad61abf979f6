"""SAML IdP metadata generation."""

from idpdescriptor.core.saml.installation import (
    InstallationResult,
    SamlIdpDescriptorInstallation,
)
from idpdescriptor.core.saml.metadata import (
    BINDING_HTTP_POST,
    DSIG_NS,
    MD_NS,
    ClientSamlConfig,
    IdpContext,
    build_descriptor,
    generate,
    validate_idp_context,
)
from idpdescriptor.core.saml.nameid import (
    DEFAULT_NAME_ID_FORMATS,
    NameIDFormat,
    get_name_id_format_description,
    resolve_name_id_format,
)

__all__ = [
    # Installation provider
    "InstallationResult",
    "SamlIdpDescriptorInstallation",
    # Metadata
    "BINDING_HTTP_POST",
    "DSIG_NS",
    "MD_NS",
    "ClientSamlConfig",
    "IdpContext",
    "build_descriptor",
    "generate",
    "validate_idp_context",
    # NameID formats
    "DEFAULT_NAME_ID_FORMATS",
    "NameIDFormat",
    "get_name_id_format_description",
    "resolve_name_id_format",
]
