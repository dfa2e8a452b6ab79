"""
Slack provider posts rendered cluster notifications to a Slack Incoming Webhook.
"""

import dataclasses

import pydantic
import requests

from gke_notifications.exceptions.provider_config_exception import (
    ProviderConfigException,
)
from gke_notifications.exceptions.provider_exception import ProviderException
from gke_notifications.providers.base.base_provider import BaseProvider
from gke_notifications.providers.models.provider_config import ProviderConfig


@pydantic.dataclasses.dataclass
class SlackProviderAuthConfig:
    """Slack authentication configuration."""

    webhook_url: str = dataclasses.field(
        metadata={
            "required": True,
            "description": "Slack Webhook Url",
            "sensitive": True,
        },
        default="",
    )


class SlackProvider(BaseProvider):
    """Send cluster notifications to Slack."""

    PROVIDER_DISPLAY_NAME = "Slack"

    def __init__(self, provider_id: str, config: ProviderConfig):
        super().__init__(provider_id, config)

    def validate_config(self):
        self.authentication_config = SlackProviderAuthConfig(
            **(self.config.authentication or {})
        )
        if not self.authentication_config.webhook_url:
            raise ProviderConfigException(
                "Slack webhook url is required", provider_id=self.provider_id
            )

    def dispose(self):
        """
        No need to dispose of anything, so just do nothing.
        """
        pass

    def _notify(self, webhook_message: dict = None, **kwargs: dict) -> str:
        """
        Post a message to the Slack Incoming Webhook API, once.
        https://api.slack.com/messaging/webhooks

        Args:
            webhook_message (dict): body with "text" and "blocks".

        Returns:
            str: the response body Slack sent back ("ok").

        Raises:
            ProviderException: transport failure or a non 2xx response, carrying
                the response body when there is one.
        """
        if not webhook_message:
            raise ProviderException("Message is required")

        self.logger.info(
            f"Notifying message to {self.PROVIDER_DISPLAY_NAME} using webhook",
            extra={"slack_message": webhook_message.get("text")},
        )
        try:
            response = requests.post(
                self.authentication_config.webhook_url,
                json=webhook_message,
            )
        except requests.exceptions.RequestException as e:
            raise ProviderException(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise ProviderException(response.text, status_code=response.status_code)

        self.logger.info(f"Message notified to {self.PROVIDER_DISPLAY_NAME}")
        return response.text
