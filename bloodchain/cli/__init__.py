"""
BloodChain CLI Tool

Command-line entry point for running the API server and checking the
configuration it would start with.
"""

import click

from bloodchain import __version__
from bloodchain.config.settings import get_settings


@click.group()
def cli():
    """BloodChain server management tool"""


@cli.command()
@click.option('--host', default=None, help='Bind address (defaults to BLOODCHAIN_API_HOST)')
@click.option('--port', default=None, type=int, help='Bind port (defaults to BLOODCHAIN_API_PORT)')
@click.option('--log-level', default=None,
              type=click.Choice(['debug', 'info', 'warning', 'error', 'critical'], case_sensitive=False),
              help='Log level for the server')
def serve(host, port, log_level):
    """Run the API server"""
    settings = get_settings()
    errors = settings.validate_config()
    if errors:
        for error in errors:
            click.echo(f"Configuration error: {error}", err=True)
        raise SystemExit(1)

    # Imported here so `check-config` and `version` don't build the app
    from bloodchain.api.server import run_server

    click.echo(f"Starting BloodChain API {__version__} on {host or settings.API_HOST}:{port or settings.API_PORT}")
    run_server(host=host, port=port, log_level=log_level)


@cli.command('check-config')
def check_config():
    """Validate the configuration read from the environment"""
    settings = get_settings()
    errors = settings.validate_config()
    if errors:
        for error in errors:
            click.echo(f"Configuration error: {error}", err=True)
        raise SystemExit(1)

    for key, value in {**settings.get_api_config(), **settings.get_storage_config()}.items():
        click.echo(f"{key}: {value}")
    click.echo("Configuration OK")


@cli.command()
def version():
    """Show the BloodChain version"""
    click.echo(__version__)


if __name__ == '__main__':
    cli()
