import json
import logging
import logging.config
import os
from importlib import metadata

import click
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

load_dotenv(find_dotenv())

try:
    VERSION = metadata.version("gke-cluster-notifications")
except metadata.PackageNotFoundError:
    VERSION = os.environ.get("GKE_NOTIFICATIONS_VERSION", "unknown")

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
    },
    "handlers": {
        "default": {
            "level": "DEBUG",
            "formatter": "standard",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        }
    },
    "loggers": {
        "": {  # root logger
            "handlers": ["default"],
            "level": "WARNING",
            "propagate": False,
        }
    },
}
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", count=True, help="Enable verbose output.")
@click.version_option(version=VERSION)
def cli(verbose: int):
    """Relay GKE cluster notifications from Pub/Sub to Slack."""
    if verbose == 1:
        logging_config["loggers"][""]["level"] = "INFO"
    elif verbose > 1:
        logging_config["loggers"][""]["level"] = "DEBUG"
    logging.config.dictConfig(logging_config)


@cli.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="The port to run the API on (defaults to PORT or 8080)",
)
@click.option(
    "--host",
    "-h",
    type=str,
    default=None,
    help="The host to run the API on (defaults to HOST or 0.0.0.0)",
)
def api(port: int, host: str):
    """Start the API."""
    from gke_notifications.api import api

    if port:
        api.PORT = port
    if host:
        api.HOST = host

    app = api.get_app()
    api.run(app)


@cli.command()
@click.argument("envelope", type=click.File("r"), default="-")
@click.option(
    "--project-name",
    envvar="GCP_PROJECT",
    default=None,
    help="Project name shown instead of the project id",
)
def render(envelope, project_name: str):
    """Render a Pub/Sub push envelope read from a file (or stdin)."""
    from gke_notifications.api.bl import render_bl
    from gke_notifications.api.models.pubsub import decode_push_envelope

    try:
        message = decode_push_envelope(envelope.read()).message
    except ValidationError as e:
        raise click.ClickException(f"Failed to decode envelope: {e}")
    logger.debug(
        "Envelope decoded",
        extra={"type_url": message.attributes.type_url},
    )

    if project_name:
        message = message.with_project_name(project_name)

    click.echo(click.style("Log entry", bold=True))
    click.echo(render_bl.log_entry(message))
    click.echo(click.style("Plain text", bold=True))
    click.echo(render_bl.plain_text(message))
    click.echo(click.style("Slack message", bold=True))
    click.echo(json.dumps(render_bl.webhook_message(message), indent=4))


if __name__ == "__main__":
    cli()
