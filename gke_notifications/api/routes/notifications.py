from fastapi import APIRouter, Request, Response

from gke_notifications.api.models.pubsub import PubSubPushEnvelope
from gke_notifications.api.tasks.process_notification_task import (
    process_notification,
)

router = APIRouter()


@router.post("/", description="Receive a GKE cluster notification pushed by Pub/Sub")
def receive_notification(envelope: PubSubPushEnvelope, request: Request) -> Response:
    """
    Handles GKE cluster notifications pushed by Cloud Pub/Sub.

    Supported type_url values:
        - type.googleapis.com/google.container.v1beta1.SecurityBulletinEvent
        - type.googleapis.com/google.container.v1beta1.UpgradeAvailableEvent
        - type.googleapis.com/google.container.v1beta1.UpgradeEvent

    Any other type_url is still logged (and sent to Slack) using the message
    data and type_url. The response is always an empty 200 once the body has
    been decoded so Pub/Sub doesn't redeliver it.
    """
    process_notification(
        envelope,
        project_name=request.app.state.project_name,
        slack_webhook=request.app.state.slack_webhook,
    )
    return Response(status_code=200)
