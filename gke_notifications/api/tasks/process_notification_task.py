import dataclasses
import json
import logging
from typing import Optional

from gke_notifications.api.bl import render_bl
from gke_notifications.api.models.pubsub import PubSubPushEnvelope
from gke_notifications.exceptions.provider_exception import ProviderException
from gke_notifications.providers.models.provider_config import ProviderConfig
from gke_notifications.providers.slack_provider.slack_provider import SlackProvider

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class NotificationResult:
    log_entry: str
    slack_message: Optional[str] = None
    slack_response: Optional[str] = None
    delivered: bool = False


def process_notification(
    envelope: PubSubPushEnvelope,
    project_name: Optional[str] = None,
    slack_webhook: Optional[str] = None,
) -> NotificationResult:
    """
    Render a decoded cluster notification, log it and optionally post it to Slack.

    Delivery is attempted once; a failure is logged together with the message
    that was attempted and never raised.

    Args:
        envelope (PubSubPushEnvelope): the decoded push request.
        project_name (str, optional): shown instead of the project id.
        slack_webhook (str, optional): Slack Incoming Webhook url.

    Returns:
        NotificationResult: what was logged and sent.
    """
    message = envelope.message
    if project_name:
        message = message.with_project_name(project_name)

    subscription = envelope.subscription
    result = NotificationResult(log_entry=render_bl.log_entry(message))

    if message.is_invalid():
        logger.error(
            result.log_entry,
            extra={"message_dump": repr(message), "subscription": subscription},
        )
        return result

    # GKE sends an UpgradeAvailableEvent for every node pool in a cluster,
    # those are logged but not sent to Slack
    if slack_webhook and not message.attributes.is_node_pool_upgrade_available_event():
        webhook_message = render_bl.webhook_message(message)
        result.slack_message = json.dumps(webhook_message)
        provider = SlackProvider(
            provider_id="slack",
            config=ProviderConfig(authentication={"webhook_url": slack_webhook}),
        )
        try:
            result.slack_response = provider.notify(webhook_message=webhook_message)
            result.delivered = True
        except ProviderException as e:
            result.slack_response = str(e)
            logger.error(
                f"post to webhook failed: {e}",
                extra={
                    "message_dump": repr(message),
                    "subscription": subscription,
                    "slack_message": result.slack_message,
                },
            )
        finally:
            provider.dispose()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            result.log_entry,
            extra={
                "message_dump": repr(message),
                "subscription": subscription,
                "slack_message": result.slack_message,
                "slack_response": result.slack_response,
            },
        )
    else:
        logger.info(result.log_entry)

    return result
