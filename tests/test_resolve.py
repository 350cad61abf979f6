"""Tests for resolving generator inputs from configuration."""

from pathlib import Path

import pytest
from cryptography import x509

from idpdescriptor.core.config import AppConfig, ClientSettings
from idpdescriptor.core.crypto import CertificateLoadError, get_certificate_body
from idpdescriptor.core.errors import ClientNotFoundError, InvalidConfigurationError
from idpdescriptor.core.resolve import resolve_client, resolve_idp_context
from idpdescriptor.core.saml import NameIDFormat


class TestResolveIdpContext:
    """Tests for resolve_idp_context."""

    def test_from_config(self, app_config: AppConfig, signing_cert: x509.Certificate) -> None:
        idp = resolve_idp_context(app_config)
        assert idp.entity_id == "https://idp.example/realms/demo"
        assert idp.sso_binding_url == "https://idp.example/realms/demo/protocol/saml"
        assert idp.signing_certificate == get_certificate_body(signing_cert)

    def test_overrides(self, app_config: AppConfig) -> None:
        idp = resolve_idp_context(app_config, realm="other", base_url="https://sso.example.org/")
        assert idp.entity_id == "https://sso.example.org/realms/other"

    def test_missing_certificate(self, app_config: AppConfig, tmp_path: Path) -> None:
        with pytest.raises(CertificateLoadError):
            resolve_idp_context(app_config, cert_path=tmp_path / "missing.crt")

    def test_relative_base_url_rejected(self, app_config: AppConfig) -> None:
        with pytest.raises(InvalidConfigurationError):
            resolve_idp_context(app_config, base_url="idp.example")


class TestResolveClient:
    """Tests for resolve_client."""

    def test_signed_client(self, app_config: AppConfig) -> None:
        client = resolve_client(app_config, "signed-sp")
        assert client.requires_signed_authn_requests is True
        assert client.forced_name_id_format is None

    def test_alias_client(self, app_config: AppConfig) -> None:
        assert resolve_client(app_config, "email-sp").forced_name_id_format == NameIDFormat.EMAIL.value

    def test_legacy_fragment_client(self, app_config: AppConfig) -> None:
        client = resolve_client(app_config, "legacy-sp")
        assert client.forced_name_id_format == NameIDFormat.TRANSIENT.value

    def test_unknown_client(self, app_config: AppConfig) -> None:
        with pytest.raises(ClientNotFoundError, match="nope"):
            resolve_client(app_config, "nope")

    def test_malformed_client(self, app_config: AppConfig) -> None:
        app_config.clients["broken"] = ClientSettings(force_name_id_format=True, name_id_format="<oops")
        with pytest.raises(InvalidConfigurationError):
            resolve_client(app_config, "broken")
