"""Server CLI commands."""

import click


@click.command()
@click.option(
    "--host",
    "-h",
    default=None,
    help="Host to bind to (default: from config or 127.0.0.1)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (default: from config or 8080)",
)
@click.option(
    "--base-url",
    default=None,
    help="Public base URL used in entity IDs (default: from config)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode",
)
@click.pass_context
def serve(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    base_url: str | None,
    debug: bool,
) -> None:
    """Serve client-tailored descriptors over HTTP.

    Descriptors are available at
    /realms/<realm>/clients/<client>/installation/saml-idp-descriptor;
    add ?download=true to receive an XML file attachment.

    Examples:

        # Start with settings from config.yaml
        idpdescriptor serve

        # Publish under the external hostname
        idpdescriptor serve --base-url https://idp.example.com
    """
    from idpdescriptor.app import run_server
    from idpdescriptor.cli.config import get_config_path
    from idpdescriptor.core.config import load_config

    config = load_config(get_config_path(ctx))

    if base_url:
        config.server.base_url = base_url

    if debug:
        config.server.debug = True

    run_server(app_config=config, host=host, port=port)
