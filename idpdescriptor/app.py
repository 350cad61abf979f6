"""Flask application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask

if TYPE_CHECKING:
    from idpdescriptor.core.config import AppConfig

# Key in app.config holding the loaded AppConfig
APP_CONFIG_KEY = "IDPDESCRIPTOR_CONFIG"


def create_app(
    config: dict | None = None,
    app_config: AppConfig | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Optional Flask configuration overrides.
        app_config: Realm and client configuration. Loads from file/env if not provided.

    Returns:
        Configured Flask application instance.
    """
    from idpdescriptor.core.config import load_config

    app = Flask(__name__)

    if app_config is None:
        app_config = load_config()

    app.config.from_mapping({APP_CONFIG_KEY: app_config})

    if config:
        app.config.from_mapping(config)

    from idpdescriptor.web import routes

    routes.init_app(app)

    return app


def run_server(
    app_config: AppConfig | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Run the Flask development server.

    Args:
        app_config: Application configuration. Loads from file/env if not provided.
        host: Override host from config.
        port: Override port from config.
    """
    from idpdescriptor.core.config import load_config
    from idpdescriptor.core.logging import configure_logging

    if app_config is None:
        app_config = load_config()

    configure_logging(app_config.log_level)

    server_host = host or app_config.server.host
    server_port = port or app_config.server.port

    app = create_app(app_config=app_config)
    app.debug = app_config.server.debug

    print("Starting idpdescriptor server...")
    print(f"  URL: http://{server_host}:{server_port}")
    print(f"  Realm: {app_config.realm.name} ({app_config.server.public_base_url}/realms/{app_config.realm.name})")
    print(f"  Clients: {', '.join(app_config.clients) or 'none configured'}")
    print("")

    app.run(host=server_host, port=server_port)
