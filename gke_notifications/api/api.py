import logging
from importlib import metadata
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import gke_notifications.api.logging
from gke_notifications.api import consts
from gke_notifications.api.core.config import config
from gke_notifications.api.logging import CONFIG as logging_config
from gke_notifications.api.middlewares import LoggingMiddleware
from gke_notifications.api.routes import healthcheck, notifications

gke_notifications.api.logging.setup_logging()
logger = logging.getLogger(__name__)

HOST = consts.HOST
PORT = consts.PORT

try:
    VERSION = metadata.version("gke-cluster-notifications")
except metadata.PackageNotFoundError:
    VERSION = config("GKE_NOTIFICATIONS_VERSION", default="unknown")


def get_app(
    project_name: Optional[str] = None,
    slack_webhook: Optional[str] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        project_name (str, optional): overrides GCP_PROJECT.
        slack_webhook (str, optional): overrides SLACK_WEBHOOK.
    """
    app = FastAPI(
        title="GKE Cluster Notifications",
        description="Relays GKE cluster notifications from Pub/Sub to Slack",
        version=VERSION,
    )
    app.state.project_name = project_name or consts.get_project_name()
    app.state.slack_webhook = slack_webhook or consts.get_slack_webhook()

    logger.info(
        "Starting GKE cluster notifications",
        extra={
            "version": VERSION,
            "project_name": app.state.project_name,
            "slack_enabled": bool(app.state.slack_webhook),
        },
    )

    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(healthcheck.router, tags=["healthcheck"])

    @app.exception_handler(Exception)
    async def catch_exception(request: Request, exc: Exception):
        logger.exception(
            f"An unhandled exception occurred: {exc}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={
                "message": "An internal server error occurred.",
                "error_msg": str(exc),
            },
        )

    app.add_middleware(LoggingMiddleware)

    return app


def run(app: FastAPI):
    logger.info(
        "Starting the uvicorn server",
        extra={"listen_addr": f"{HOST}:{PORT}"},
    )
    uvicorn.run(app, host=HOST, port=PORT, log_config=logging_config)
