# cli.py
import json
import logging

import click

from media_repo.adapters.storage import create_storage_backend
from media_repo.config.settings import get_settings
from media_repo.errors import MediaRepoError
from media_repo.main import configure_logging
from media_repo.schemas import Category

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for running and inspecting the media repository"""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST setting)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT setting)")
@click.option("--reload", is_flag=True, help="Restart on code changes (development only)")
def serve(host, port, reload):
    """Run the HTTP server with uvicorn"""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    host = host or settings.host
    port = port or settings.port
    logger.info(f"Starting server on {host}:{port} with {settings.storage_backend} storage")
    uvicorn.run(
        "media_repo.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    for name, value in settings.get_display_dict().items():
        click.echo(f"  {name}: {value}")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the listing as JSON")
def list_files(as_json):
    """List stored files straight from the configured backend"""
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        storage = create_storage_backend(settings)
        listing = {
            category.listing_key: [entry.model_dump() for entry in storage.list(category)]
            for category in Category
        }
    except MediaRepoError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(listing, indent=2))
        return

    for key, entries in listing.items():
        click.echo(f"{key} ({len(entries)}):")
        for entry in entries:
            click.echo(f"  {entry['name']}  {entry['url']}")


if __name__ == "__main__":
    cli()
