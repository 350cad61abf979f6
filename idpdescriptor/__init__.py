"""Client-tailored SAML IdP metadata generation."""

__version__ = "0.1.0"
