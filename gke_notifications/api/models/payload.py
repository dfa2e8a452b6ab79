"""
Event payloads carried by GKE cluster notifications.

The `payload` attribute of a notification is a JSON document encoded as a
string; its schema is selected by the sibling `type_url` attribute.
See https://cloud.google.com/kubernetes-engine/docs/concepts/cluster-notifications
"""

import enum
import logging
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from gke_notifications.exceptions.message_exception import PayloadDecodeError

logger = logging.getLogger(__name__)

TYPE_URL_PREFIX = "type.googleapis.com/google.container.v1beta1."
SECURITY_BULLETIN_EVENT = TYPE_URL_PREFIX + "SecurityBulletinEvent"
UPGRADE_AVAILABLE_EVENT = TYPE_URL_PREFIX + "UpgradeAvailableEvent"
UPGRADE_EVENT = TYPE_URL_PREFIX + "UpgradeEvent"

UNSPECIFIED_RESOURCE_TYPE = "UPGRADE_RESOURCE_TYPE_UNSPECIFIED"


class ResourceType(str, enum.Enum):
    """Resource types GKE reports for upgrade notifications."""

    CONTROL_PLANE = "MASTER"
    NODE_POOL = "NODE_POOL"

    @classmethod
    def from_wire(cls, value: str) -> Optional["ResourceType"]:
        """Return the matching member, or None for a type we don't know."""
        try:
            return cls(value)
        except ValueError:
            return None


class ReleaseChannel(str, enum.Enum):
    UNSPECIFIED = "UNSPECIFIED"
    RAPID = "RAPID"
    REGULAR = "REGULAR"
    STABLE = "STABLE"

    def __str__(self):
        return self.value


class EventModel(BaseModel):
    # every field is optional on the wire and defaulted on the model,
    # unknown fields are ignored so new producer fields don't break decoding
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class SecurityBulletinEvent(EventModel):
    """
    Sent when a security bulletin has been posted that the cluster is
    vulnerable to.
    """

    # GKE minor versions affected by this vulnerability
    affected_supported_minors: list[str] = Field(default_factory=list)
    brief_description: str = ""
    bulletin_id: str = ""
    bulletin_uri: str = ""
    cve_ids: list[str] = Field(default_factory=list)
    # set when the user must take manual steps to make the cluster safe
    manual_steps_required: bool = False
    patched_versions: list[str] = Field(default_factory=list)
    # node or control plane; one notification is sent per affected type
    resource_type_affected: str = ""
    severity: str = ""
    # a version from patched_versions that is available in the cluster's location
    suggested_upgrade_target: str = ""


class UpgradeEventBase(EventModel):
    # relative path of the resource, e.g. the node pool path
    resource: Optional[str] = None
    resource_type: str = UNSPECIFIED_RESOURCE_TYPE

    @property
    def resource_type_kind(self) -> Optional[ResourceType]:
        return ResourceType.from_wire(self.resource_type)


class UpgradeAvailableEvent(UpgradeEventBase):
    """Sent when a new version is available for the cluster or a node pool."""

    release_channel: ReleaseChannel = ReleaseChannel.UNSPECIFIED
    version: str = ""

    @field_validator("release_channel", mode="before")
    @classmethod
    def parse_release_channel(cls, value):
        # the channel is wrapped in an object: {"channel": "REGULAR"}
        if isinstance(value, ReleaseChannel):
            return value
        if isinstance(value, dict):
            value = value.get("channel")
        try:
            return ReleaseChannel(value)
        except ValueError:
            return ReleaseChannel.UNSPECIFIED


class UpgradeEvent(UpgradeEventBase):
    """Sent when the cluster or a node pool starts upgrading."""

    current_version: str = ""
    operation: str = ""
    operation_start_time: str = ""
    target_version: str = ""


class UnknownEvent(BaseModel):
    """A payload whose type_url we don't recognise, kept verbatim."""

    model_config = ConfigDict(frozen=True)

    raw: str


Payload = Union[
    SecurityBulletinEvent, UpgradeAvailableEvent, UpgradeEvent, UnknownEvent, None
]

EVENT_TYPES: dict[str, type[EventModel]] = {
    SECURITY_BULLETIN_EVENT: SecurityBulletinEvent,
    UPGRADE_AVAILABLE_EVENT: UpgradeAvailableEvent,
    UPGRADE_EVENT: UpgradeEvent,
}


def decode_payload(type_url: str, payload: str) -> Payload:
    """
    Decode the embedded payload according to its type_url.

    Args:
        type_url (str): discriminator attribute of the notification.
        payload (str): JSON document encoded as a string, possibly empty.

    Returns:
        Payload: the typed event, an UnknownEvent holding the raw payload,
            or None when there is no payload at all.

    Raises:
        PayloadDecodeError: type_url is known but the payload doesn't fit its schema.
    """
    event_type = EVENT_TYPES.get(type_url)
    if event_type is None:
        if not payload:
            return None
        logger.debug("Unknown type_url, keeping raw payload", extra={"type_url": type_url})
        return UnknownEvent(raw=payload)

    try:
        return event_type.model_validate_json(payload or "{}")
    except ValidationError as e:
        raise PayloadDecodeError(type_url, str(e)) from e
