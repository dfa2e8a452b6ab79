import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from gke_notifications.api.models.payload import (
    Payload,
    ResourceType,
    SecurityBulletinEvent,
    UnknownEvent,
    UpgradeAvailableEvent,
    UpgradeEvent,
    decode_payload,
)
from gke_notifications.exceptions.message_exception import (
    InvalidPayloadError,
    UnknownMessageTypeError,
)

CONSOLE_URL = "https://console.cloud.google.com/kubernetes"
NODE_POOLS_SEGMENT = "nodePools/"
STRING_ATTRIBUTES = ("project_id", "cluster_name", "cluster_location", "type_url")


class Attributes(BaseModel):
    """
    Cluster identity and the typed event of a GKE cluster notification.

    `project_name` is never part of the Pub/Sub message; it is overlaid after
    decoding with `with_project_name` to show a human readable project.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    project_id: str = ""
    project_name: Optional[str] = None
    cluster_name: str = ""
    cluster_location: str = ""
    type_url: str = ""
    payload: Payload = None

    @model_validator(mode="before")
    @classmethod
    def decode_attributes(cls, data):
        # pubsub attributes are a flat string map, the payload is decoded
        # in a second pass once type_url is known
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # only ever set through with_project_name
        data.pop("project_name", None)
        for name in STRING_ATTRIBUTES:
            if data.get(name) is None:
                data[name] = ""
        raw_payload = data.get("payload")
        if isinstance(raw_payload, dict):
            raw_payload = json.dumps(raw_payload)
        if raw_payload is None or isinstance(raw_payload, str):
            data["payload"] = decode_payload(data["type_url"], raw_payload or "")
        return data

    def with_project_name(self, project_name: str) -> "Attributes":
        return self.model_copy(update={"project_name": project_name})

    def effective_project_name(self) -> str:
        return self.project_name or self.project_id

    def _payload_resource(self) -> Optional[str]:
        if isinstance(self.payload, (UpgradeAvailableEvent, UpgradeEvent)):
            return self.payload.resource
        return None

    def node_pool_name(self) -> Optional[str]:
        resource = self._payload_resource()
        if not resource or NODE_POOLS_SEGMENT not in resource:
            return None
        return resource.split(NODE_POOLS_SEGMENT, 1)[1] or None

    def resource_uri(self) -> str:
        resource = self._payload_resource()
        if resource and self.payload.resource_type_kind == ResourceType.NODE_POOL:
            return resource
        return (
            f"projects/{self.effective_project_name()}"
            f"/locations/{self.cluster_location}"
            f"/clusters/{self.cluster_name}"
        )

    def resource_url(self) -> str:
        project = self.effective_project_name()
        node_pool = self.node_pool_name()
        if node_pool:
            return (
                f"{CONSOLE_URL}/nodepool/{self.cluster_location}"
                f"/{self.cluster_name}/{node_pool}?project={project}"
            )
        return (
            f"{CONSOLE_URL}/clusters/details/{self.cluster_location}"
            f"/{self.cluster_name}/details?project={project}"
        )

    def is_node_pool_upgrade_available_event(self) -> bool:
        return (
            isinstance(self.payload, UpgradeAvailableEvent)
            and self.payload.resource_type_kind == ResourceType.NODE_POOL
        )

    def log_message(self) -> str:
        """
        One line summary of the event, identifying the resource by its URI.

        Raises:
            UnknownMessageTypeError: the type_url is not one we can decode.
            InvalidPayloadError: there was no payload to describe.
        """
        payload = self.payload
        resource_uri = self.resource_uri()

        if isinstance(payload, SecurityBulletinEvent):
            return (
                f"Security bulletin {payload.bulletin_id} with {payload.severity} "
                f"severity issued for {resource_uri}"
            )
        if isinstance(payload, UpgradeAvailableEvent):
            kind = payload.resource_type_kind
            if kind == ResourceType.CONTROL_PLANE:
                return f"Control plane {resource_uri} has an upgrade available to version {payload.version}"
            if kind == ResourceType.NODE_POOL:
                return f"Node pool {resource_uri} has an upgrade available to version {payload.version}"
            return unknown_resource_type(payload.resource_type)
        if isinstance(payload, UpgradeEvent):
            kind = payload.resource_type_kind
            versions = f"from version {payload.current_version} to {payload.target_version}"
            if kind == ResourceType.CONTROL_PLANE:
                return f"Control plane {resource_uri} is upgrading {versions}"
            if kind == ResourceType.NODE_POOL:
                return f"Node pool {resource_uri} is upgrading {versions}"
            return unknown_resource_type(payload.resource_type)
        if isinstance(payload, UnknownEvent):
            raise UnknownMessageTypeError(self.type_url)
        raise InvalidPayloadError()


def unknown_resource_type(resource_type: str) -> str:
    return f"Unknown resource type `{resource_type}` encountered"
