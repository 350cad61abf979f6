"""Tests for signing certificate utilities."""

import base64
import stat
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from idpdescriptor.core.crypto import (
    CertificateLoadError,
    KeyLoadError,
    certificate_body_from_pem,
    get_certificate_body,
    get_certificate_info,
    is_certificate_valid,
    load_certificate,
    load_certificate_body,
    load_certificate_pem,
    load_private_key,
    save_private_key,
)


class TestCertificateBody:
    """The base64 DER form embedded in metadata."""

    def test_body_is_der(self, signing_cert: x509.Certificate) -> None:
        body = get_certificate_body(signing_cert)
        assert base64.b64decode(body) == signing_cert.public_bytes(serialization.Encoding.DER)

    def test_body_single_line(self, signing_cert: x509.Certificate) -> None:
        body = get_certificate_body(signing_cert)
        assert "\n" not in body
        assert not body.startswith("-----")

    def test_body_from_pem(self, signing_cert: x509.Certificate) -> None:
        pem = signing_cert.public_bytes(serialization.Encoding.PEM).decode("utf-8")
        assert certificate_body_from_pem(pem) == get_certificate_body(signing_cert)

    def test_body_from_bare_base64(self) -> None:
        assert certificate_body_from_pem("  MIIB\nAQAB  \n") == "MIIBAQAB"

    def test_load_body_from_pem_file(self, cert_file: Path, signing_cert: x509.Certificate) -> None:
        assert load_certificate_body(cert_file) == get_certificate_body(signing_cert)

    def test_load_body_from_bare_file(self, tmp_path: Path) -> None:
        path = tmp_path / "signing.b64"
        path.write_text("MIIB\nAQAB\n")
        assert load_certificate_body(path) == "MIIBAQAB"

    def test_load_body_missing(self, tmp_path: Path) -> None:
        with pytest.raises(CertificateLoadError, match="not found"):
            load_certificate_body(tmp_path / "missing.crt")

    def test_load_body_invalid_pem(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.crt"
        path.write_text("-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n")
        with pytest.raises(CertificateLoadError, match="Failed to load certificate"):
            load_certificate_body(path)


class TestLoading:
    """Loading certificates and keys from disk."""

    def test_load_certificate(self, cert_file: Path, signing_cert: x509.Certificate) -> None:
        assert load_certificate(cert_file) == signing_cert

    def test_load_missing_certificate(self, tmp_path: Path) -> None:
        with pytest.raises(CertificateLoadError, match="not found"):
            load_certificate(tmp_path / "missing.crt")

    def test_load_invalid_certificate(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.crt"
        path.write_text("not a certificate")
        with pytest.raises(CertificateLoadError, match="Failed to load certificate"):
            load_certificate(path)

    def test_load_certificate_pem_invalid(self) -> None:
        with pytest.raises(CertificateLoadError):
            load_certificate_pem("-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n")

    def test_private_key_round_trip(self, tmp_path: Path, signing_key: rsa.RSAPrivateKey) -> None:
        path = tmp_path / "keys" / "signing.key"
        save_private_key(signing_key, path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        loaded = load_private_key(path)
        assert loaded.private_numbers() == signing_key.private_numbers()

    def test_load_missing_key(self, tmp_path: Path) -> None:
        with pytest.raises(KeyLoadError, match="not found"):
            load_private_key(tmp_path / "missing.key")

    def test_load_invalid_key(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.key"
        path.write_text("garbage")
        with pytest.raises(KeyLoadError):
            load_private_key(path)


class TestCertificateInfo:
    """Inspection of the generated signing certificate."""

    def test_info(self, signing_cert: x509.Certificate) -> None:
        info = get_certificate_info(signing_cert)
        assert info.subject == "CN=demo"
        assert info.is_self_signed
        assert info.key_type == "RSA"
        assert info.key_size == 2048
        assert len(info.fingerprint_sha256) == 64

    def test_valid(self, signing_cert: x509.Certificate) -> None:
        assert is_certificate_valid(signing_cert)
