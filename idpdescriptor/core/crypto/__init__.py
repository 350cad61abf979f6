"""Signing certificate handling."""

from idpdescriptor.core.crypto.certs import (
    DEFAULT_CERT_DIR,
    DEFAULT_SIGNING_CERT_PATH,
    CertificateError,
    CertificateInfo,
    CertificateLoadError,
    KeyLoadError,
    certificate_body_from_pem,
    generate_private_key,
    generate_signing_certificate,
    get_certificate_body,
    get_certificate_info,
    is_certificate_valid,
    load_certificate,
    load_certificate_body,
    load_certificate_pem,
    load_private_key,
    save_certificate,
    save_private_key,
)

__all__ = [
    "DEFAULT_CERT_DIR",
    "DEFAULT_SIGNING_CERT_PATH",
    "CertificateError",
    "CertificateInfo",
    "CertificateLoadError",
    "KeyLoadError",
    "certificate_body_from_pem",
    "generate_private_key",
    "generate_signing_certificate",
    "get_certificate_body",
    "get_certificate_info",
    "is_certificate_valid",
    "load_certificate",
    "load_certificate_body",
    "load_certificate_pem",
    "load_private_key",
    "save_certificate",
    "save_private_key",
]
