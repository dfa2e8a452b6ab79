import os

from dotenv import find_dotenv, load_dotenv

from gke_notifications.api.core.config import config

load_dotenv(find_dotenv())
RUNNING_IN_CLOUD_RUN = os.environ.get("K_SERVICE") is not None

HOST = config("HOST", default="0.0.0.0")
PORT = config("PORT", default=8080, cast=int)


def get_project_name():
    """Human readable project name shown instead of the numeric project id."""
    return config("GCP_PROJECT", default=None)


def get_slack_webhook():
    """Slack Incoming Webhook; notifications are only logged when unset."""
    return config("SLACK_WEBHOOK", default=None)
