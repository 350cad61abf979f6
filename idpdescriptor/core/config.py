"""Application configuration management.

Loads configuration from config.yaml files and environment variables.
Environment variables take precedence over config file settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from idpdescriptor.core.crypto.certs import DEFAULT_SIGNING_CERT_PATH
from idpdescriptor.core.logging import get_logger
from idpdescriptor.core.saml.metadata import ClientSamlConfig

logger = get_logger("config")

# Default config locations
DEFAULT_CONFIG_DIR = Path.home() / ".idpdescriptor"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

# Environment variable prefix
ENV_PREFIX = "IDPDESC_"


@dataclass
class ServerSettings:
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    # Public URL realms are published under; derived from host/port if unset
    base_url: str | None = None

    @property
    def public_base_url(self) -> str:
        """Base URL used for entity IDs and endpoints."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServerSettings:
        """Create ServerSettings from a dictionary."""
        return cls(
            host=data.get("host", "127.0.0.1"),
            port=data.get("port", 8080),
            debug=_as_bool(data.get("debug"), False),
            base_url=data.get("base_url"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "base_url": self.base_url,
        }


@dataclass
class RealmSettings:
    """The realm whose metadata is published."""

    name: str = "master"
    signing_cert_path: Path = DEFAULT_SIGNING_CERT_PATH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RealmSettings:
        """Create RealmSettings from a dictionary."""
        cert_path = data.get("signing_cert_path")
        return cls(
            name=data.get("name", "master"),
            signing_cert_path=Path(cert_path).expanduser() if cert_path else DEFAULT_SIGNING_CERT_PATH,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "signing_cert_path": str(self.signing_cert_path),
        }


@dataclass
class ClientSettings:
    """SAML settings stored for one registered client."""

    requires_signed_authn_requests: bool = False
    force_name_id_format: bool = False
    name_id_format: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientSettings:
        """Create ClientSettings from a dictionary."""
        return cls(
            requires_signed_authn_requests=_as_bool(data.get("requires_signed_authn_requests"), False),
            force_name_id_format=_as_bool(data.get("force_name_id_format"), False),
            name_id_format=data.get("name_id_format"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "requires_signed_authn_requests": self.requires_signed_authn_requests,
            "force_name_id_format": self.force_name_id_format,
            "name_id_format": self.name_id_format,
        }

    def to_saml_config(self) -> ClientSamlConfig:
        """Build the generator input for this client.

        Raises:
            InvalidConfigurationError: If a forced name_id_format is a malformed
                fragment or not a string.
        """
        return ClientSamlConfig(
            requires_signed_authn_requests=self.requires_signed_authn_requests,
            force_name_id_format=self.force_name_id_format,
            name_id_format=self.name_id_format,
        )


@dataclass
class AppConfig:
    """Main application configuration."""

    server: ServerSettings = field(default_factory=ServerSettings)
    realm: RealmSettings = field(default_factory=RealmSettings)
    clients: dict[str, ClientSettings] = field(default_factory=dict)
    log_level: str = "INFO"
    config_path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], config_path: Path | None = None) -> AppConfig:
        """Create AppConfig from a dictionary."""
        server_data = data.get("server") or {}
        realm_data = data.get("realm") or {}
        clients_data = data.get("clients") or {}
        return cls(
            server=ServerSettings.from_dict(server_data),
            realm=RealmSettings.from_dict(realm_data),
            clients={
                str(name): ClientSettings.from_dict(settings or {})
                for name, settings in clients_data.items()
            },
            log_level=data.get("log_level", "INFO"),
            config_path=config_path,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "server": self.server.to_dict(),
            "realm": self.realm.to_dict(),
            "clients": {name: client.to_dict() for name, client in self.clients.items()},
            "log_level": self.log_level,
        }

    def save(self, path: Path | None = None) -> None:
        """Save configuration to a YAML file.

        Args:
            path: Path to save to. Uses config_path or default if not specified.
        """
        save_path = path or self.config_path or DEFAULT_CONFIG_FILE
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _as_bool(value: Any, default: bool) -> bool:
    """Interpret a config value as a boolean.

    Strings count as true only for "true", "1", "yes" or "on", so a quoted
    "false" in YAML stays false.
    """
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _get_env_bool(key: str, default: bool) -> bool:
    """Get a boolean from environment variable."""
    return _as_bool(os.environ.get(key), default)


def _get_env_int(key: str, default: int) -> int:
    """Get an integer from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load application configuration.

    Configuration is loaded in this order (later values override earlier):
    1. Default values
    2. config.yaml file (if exists)
    3. Environment variables

    Args:
        config_path: Path to config file. Uses default if not specified.

    Returns:
        AppConfig with merged settings.
    """
    config = AppConfig()

    file_path = config_path or DEFAULT_CONFIG_FILE
    if file_path.exists():
        try:
            with open(file_path) as f:
                data = yaml.safe_load(f) or {}
            config = AppConfig.from_dict(data, config_path=file_path)
        except (OSError, yaml.YAMLError, AttributeError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {file_path}: {e}")

    # Server settings
    if os.environ.get(f"{ENV_PREFIX}HOST"):
        config.server.host = os.environ[f"{ENV_PREFIX}HOST"]

    if os.environ.get(f"{ENV_PREFIX}PORT"):
        config.server.port = _get_env_int(f"{ENV_PREFIX}PORT", config.server.port)

    config.server.debug = _get_env_bool(f"{ENV_PREFIX}DEBUG", config.server.debug)

    if os.environ.get(f"{ENV_PREFIX}BASE_URL"):
        config.server.base_url = os.environ[f"{ENV_PREFIX}BASE_URL"]

    # Realm settings
    if os.environ.get(f"{ENV_PREFIX}REALM"):
        config.realm.name = os.environ[f"{ENV_PREFIX}REALM"]

    if os.environ.get(f"{ENV_PREFIX}SIGNING_CERT"):
        config.realm.signing_cert_path = Path(os.environ[f"{ENV_PREFIX}SIGNING_CERT"])

    if os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.environ[f"{ENV_PREFIX}LOG_LEVEL"]

    return config


def get_default_config_yaml() -> str:
    """Get the default config.yaml content as a string.

    Useful for generating example configuration files.
    """
    return """\
# idpdescriptor configuration file
# Environment variables override these settings (prefix: IDPDESC_)

server:
  # Server bind address
  host: "127.0.0.1"

  # Server port
  port: 8080

  # Enable debug mode (not recommended for production)
  debug: false

  # Public base URL; realm entity IDs are <base_url>/realms/<realm>
  # base_url: "https://idp.example.com"

realm:
  # Realm name
  name: "master"

  # PEM certificate of the realm's active signing key
  # signing_cert_path: ~/.idpdescriptor/certs/signing.crt

# Registered clients and their SAML settings
clients:
  example-sp:
    requires_signed_authn_requests: true
    force_name_id_format: false
    # URI or alias (persistent, transient, unspecified, username, email)
    # name_id_format: email

log_level: "INFO"
"""
