"""Realm signing certificate utilities.

Loads the realm's signing certificate from PEM, reduces it to the base64 DER
body embedded in metadata, and generates self-signed signing certificates
for development realms.
"""

from __future__ import annotations

import base64
import os
import stat
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

# Default location of the realm signing certificate
DEFAULT_CERT_DIR = Path.home() / ".idpdescriptor" / "certs"
DEFAULT_SIGNING_CERT_PATH = DEFAULT_CERT_DIR / "signing.crt"

PEM_BEGIN = "-----BEGIN CERTIFICATE-----"
PEM_END = "-----END CERTIFICATE-----"


class CertificateError(Exception):
    """Base exception for certificate-related errors."""


class CertificateLoadError(CertificateError):
    """Raised when a certificate cannot be loaded."""


class KeyLoadError(CertificateError):
    """Raised when a private key cannot be loaded."""


@dataclass
class CertificateInfo:
    """Information extracted from an X.509 certificate."""

    subject: str
    issuer: str
    serial_number: str
    not_before: datetime
    not_after: datetime
    fingerprint_sha256: str
    is_self_signed: bool
    key_type: str
    key_size: int


def generate_private_key(key_size: int = 2048) -> rsa.RSAPrivateKey:
    """Generate an RSA private key.

    Args:
        key_size: RSA key size in bits. Default 2048.

    Returns:
        RSA private key.
    """
    return rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size,
    )


def generate_signing_certificate(
    private_key: rsa.RSAPrivateKey,
    common_name: str,
    days_valid: int = 365,
) -> x509.Certificate:
    """Generate a self-signed certificate for signing SAML messages.

    Args:
        private_key: RSA private key to sign the certificate.
        common_name: Common Name (CN), conventionally the realm name.
        days_valid: Number of days the certificate is valid.

    Returns:
        Self-signed X.509 certificate.
    """
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])

    now = datetime.now(UTC)

    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=days_valid))
        .add_extension(
            x509.BasicConstraints(ca=False, path_length=None),
            critical=True,
        )
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                key_encipherment=False,
                content_commitment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .sign(private_key, hashes.SHA256())
    )


def save_private_key(private_key: rsa.RSAPrivateKey, path: Path) -> None:
    """Save an unencrypted private key to a PEM file readable only by the owner.

    Args:
        private_key: RSA private key to save.
        path: Path to write the key file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    pem_data = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )

    path.touch(mode=0o600)
    path.write_bytes(pem_data)
    # Ensure permissions are correct even if file existed
    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)


def save_certificate(cert: x509.Certificate, path: Path) -> None:
    """Save a certificate to a PEM file.

    Args:
        cert: X.509 certificate to save.
        path: Path to write the certificate file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))


def load_private_key(path: Path) -> rsa.RSAPrivateKey:
    """Load an unencrypted RSA private key from a PEM file.

    Raises:
        KeyLoadError: If the key cannot be loaded.
    """
    if not path.exists():
        raise KeyLoadError(f"Private key file not found: {path}")

    try:
        key = serialization.load_pem_private_key(path.read_bytes(), password=None)
    except (ValueError, TypeError) as e:
        raise KeyLoadError(f"Failed to load private key from {path}: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyLoadError(f"Expected RSA private key, got {type(key).__name__}")
    return key


def load_certificate_pem(pem: str) -> x509.Certificate:
    """Parse a PEM-encoded certificate.

    Args:
        pem: PEM text, with headers.

    Returns:
        X.509 certificate.

    Raises:
        CertificateLoadError: If the text is not a PEM certificate.
    """
    try:
        return x509.load_pem_x509_certificate(pem.encode("utf-8"))
    except ValueError as e:
        raise CertificateLoadError(f"Failed to parse certificate: {e}") from e


def load_certificate(path: Path) -> x509.Certificate:
    """Load a certificate from a PEM file.

    Args:
        path: Path to the certificate file.

    Returns:
        X.509 certificate.

    Raises:
        CertificateLoadError: If the certificate cannot be loaded.
    """
    if not path.exists():
        raise CertificateLoadError(f"Certificate file not found: {path}")

    try:
        pem_data = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise CertificateLoadError(f"Failed to read certificate from {path}: {e}") from e

    try:
        return load_certificate_pem(pem_data)
    except CertificateLoadError as e:
        raise CertificateLoadError(f"Failed to load certificate from {path}: {e}") from e


def get_certificate_body(cert: x509.Certificate) -> str:
    """Get the certificate as a single line of base64 DER.

    This is the form embedded in ``<dsig:X509Certificate>``.
    """
    der = cert.public_bytes(serialization.Encoding.DER)
    return base64.b64encode(der).decode("ascii")


def certificate_body_from_pem(pem: str) -> str:
    """Strip PEM armour and whitespace from certificate text.

    Text without headers is returned with whitespace removed. The content is
    not parsed.

    Args:
        pem: PEM certificate text, or a bare base64 body.

    Returns:
        Base64 body on a single line.
    """
    body = pem.replace(PEM_BEGIN, "").replace(PEM_END, "")
    return "".join(body.split())


def load_certificate_body(path: Path) -> str:
    """Load the metadata body of a signing certificate file.

    PEM files are parsed and re-encoded. Files holding only the base64 body,
    as copied from an admin console, are returned with whitespace removed.

    Raises:
        CertificateLoadError: If the file cannot be read or the PEM is invalid.
    """
    if not path.exists():
        raise CertificateLoadError(f"Certificate file not found: {path}")

    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise CertificateLoadError(f"Failed to read certificate from {path}: {e}") from e

    if PEM_BEGIN not in text:
        return certificate_body_from_pem(text)
    return get_certificate_body(load_certificate(path))


def get_certificate_info(cert: x509.Certificate) -> CertificateInfo:
    """Extract information from an X.509 certificate.

    Args:
        cert: X.509 certificate.

    Returns:
        CertificateInfo with extracted details.
    """
    public_key = cert.public_key()
    if isinstance(public_key, rsa.RSAPublicKey):
        key_type = "RSA"
        key_size = public_key.key_size
    else:
        key_type = type(public_key).__name__
        key_size = 0

    return CertificateInfo(
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        serial_number=format(cert.serial_number, "x"),
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc,
        fingerprint_sha256=cert.fingerprint(hashes.SHA256()).hex(),
        is_self_signed=cert.subject == cert.issuer,
        key_type=key_type,
        key_size=key_size,
    )


def is_certificate_valid(cert: x509.Certificate) -> bool:
    """Check if a certificate is currently valid (not expired)."""
    now = datetime.now(UTC)
    return cert.not_valid_before_utc <= now <= cert.not_valid_after_utc
