"""Client installation provider for the tailored IdP descriptor.

Hosts (the CLI, the web app) call this to get the descriptor together with
how it should be delivered: shown inline as text, or downloaded as an XML
file.
"""

from __future__ import annotations

from dataclasses import dataclass

from idpdescriptor.core.saml.metadata import (
    LOGIN_PROTOCOL,
    ClientSamlConfig,
    IdpContext,
    generate,
)

MEDIA_TYPE_TEXT = "text/plain"
MEDIA_TYPE_XML = "application/xml"


@dataclass(frozen=True)
class InstallationResult:
    """A generated descriptor and how to deliver it."""

    body: str
    media_type: str
    filename: str | None = None

    @property
    def is_attachment(self) -> bool:
        """Whether the body should be offered as a file download."""
        return self.filename is not None

    @property
    def content_disposition(self) -> str | None:
        """Content-Disposition header value for downloads."""
        if self.filename is None:
            return None
        return f'attachment; filename="{self.filename}"'


class SamlIdpDescriptorInstallation:
    """SAML Metadata IDPSSODescriptor tailored for one client."""

    id = "saml-idp-descriptor"
    protocol = LOGIN_PROTOCOL
    display_type = "SAML Metadata IDPSSODescriptor"
    help_text = (
        "SAML Metadata IDPSSODescriptor tailored for the client. This is special "
        "because not every client may require things like digital signatures"
    )
    filename = "client-tailored-saml-idp-metadata.xml"
    media_type = MEDIA_TYPE_XML
    is_download_only = False

    def generate_installation(self, config: ClientSamlConfig, idp: IdpContext) -> InstallationResult:
        """Generate the descriptor for inline display."""
        return InstallationResult(body=generate(config, idp), media_type=MEDIA_TYPE_TEXT)

    def generate_download(self, config: ClientSamlConfig, idp: IdpContext) -> InstallationResult:
        """Generate the descriptor as a downloadable XML file."""
        return InstallationResult(
            body=generate(config, idp),
            media_type=self.media_type,
            filename=self.filename,
        )

    def describe(self) -> dict[str, object]:
        """Provider details for listings."""
        return {
            "id": self.id,
            "protocol": self.protocol,
            "display_type": self.display_type,
            "help_text": self.help_text,
            "filename": self.filename,
            "media_type": self.media_type,
            "download_only": self.is_download_only,
        }
