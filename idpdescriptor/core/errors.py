"""Exceptions raised while preparing metadata inputs."""


class InvalidConfigurationError(ValueError):
    """Raised when client or IdP settings cannot produce usable metadata."""


class ClientNotFoundError(LookupError):
    """Raised when no client is registered under the requested name."""
