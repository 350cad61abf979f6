"""Pytest configuration and fixtures."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from flask import Flask
from flask.testing import FlaskClient

from idpdescriptor.app import create_app
from idpdescriptor.core.config import AppConfig, ClientSettings, RealmSettings, ServerSettings
from idpdescriptor.core.crypto import (
    generate_private_key,
    generate_signing_certificate,
    save_certificate,
    save_private_key,
)

BASE_URL = "https://idp.example"
REALM = "demo"


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Drop handlers installed by configure_logging between tests."""
    yield
    pkg_logger = logging.getLogger("idpdescriptor")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    """RSA key shared by all tests (key generation is slow)."""
    return generate_private_key()


@pytest.fixture(scope="session")
def signing_cert(signing_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Self-signed realm signing certificate."""
    return generate_signing_certificate(signing_key, common_name=REALM)


@pytest.fixture
def cert_file(tmp_path: Path, signing_key: rsa.RSAPrivateKey, signing_cert: x509.Certificate) -> Path:
    """Signing certificate and key written as PEM files."""
    cert_path = tmp_path / "certs" / "signing.crt"
    save_certificate(signing_cert, cert_path)
    save_private_key(signing_key, cert_path.with_suffix(".key"))
    return cert_path


@pytest.fixture
def app_config(cert_file: Path) -> AppConfig:
    """Configuration for the demo realm with a few registered clients."""
    return AppConfig(
        server=ServerSettings(base_url=BASE_URL),
        realm=RealmSettings(name=REALM, signing_cert_path=cert_file),
        clients={
            "signed-sp": ClientSettings(requires_signed_authn_requests=True),
            "email-sp": ClientSettings(force_name_id_format=True, name_id_format="email"),
            "legacy-sp": ClientSettings(
                force_name_id_format=True,
                name_id_format=(
                    "<NameIDFormat>urn:oasis:names:tc:SAML:2.0:nameid-format:transient</NameIDFormat>"
                ),
            ),
        },
    )


@pytest.fixture
def config_file(tmp_path: Path, app_config: AppConfig) -> Path:
    """The app_config fixture saved as YAML."""
    path = tmp_path / "config.yaml"
    app_config.save(path)
    return path


@pytest.fixture
def app(app_config: AppConfig) -> Generator[Flask, None, None]:
    """Create application for testing."""
    app = create_app({"TESTING": True}, app_config=app_config)
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create test client."""
    return app.test_client()
