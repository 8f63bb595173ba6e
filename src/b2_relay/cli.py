# cli.py
import click
import logging

from b2_relay.config.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the B2 relay"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    for key, value in settings.as_display_dict().items():
        click.echo(f"  {key}: {value}")


@cli.command()
def serve():
    """Run the relay on the configured host and port"""
    import uvicorn
    from b2_relay.main import create_app

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting B2 relay on http://{settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    cli()
