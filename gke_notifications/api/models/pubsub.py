"""
Pub/Sub push envelope carrying a GKE cluster notification.

A push subscription POSTs:

    {
        "message": {
            "attributes": {"project_id": ..., "cluster_name": ..., ...},
            "data": "<base64>",
            "messageId": "...",
            "publishTime": "..."
        },
        "subscription": "projects/<project>/subscriptions/<name>"
    }

Missing fields decode to defaults so a notification we can't act on is
still accepted; only a corrupt body (bad base64 or UTF-8) or a known event
whose payload violates its schema fails decoding.
"""

import base64
import binascii
from typing import Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from gke_notifications.api.models.attributes import Attributes


class Message(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    attributes: Attributes = Field(default_factory=Attributes)
    message_id: str = Field(
        default="", validation_alias=AliasChoices("messageId", "message_id")
    )
    publish_time: str = Field(
        default="", validation_alias=AliasChoices("publishTime", "publish_time")
    )
    data: str = ""

    @field_validator("attributes", mode="before")
    @classmethod
    def default_attributes(cls, value):
        return {} if value is None else value

    @field_validator("data", mode="before")
    @classmethod
    def decode_data(cls, value):
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("data must be a base64 encoded string")
        try:
            return base64.b64decode(value, validate=True).decode("utf-8")
        except binascii.Error as e:
            raise ValueError(f"data is not valid base64: {e}") from e
        except UnicodeDecodeError as e:
            raise ValueError(f"data is not valid UTF-8: {e}") from e

    def with_project_name(self, project_name: str) -> "Message":
        return self.model_copy(
            update={"attributes": self.attributes.with_project_name(project_name)}
        )

    def is_invalid(self) -> bool:
        """True when there was no payload to describe, e.g. an empty delivery."""
        return self.attributes.payload is None


class PubSubPushEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: Message = Field(default_factory=Message)
    subscription: str = ""


def decode_push_envelope(raw: Union[bytes, str]) -> PubSubPushEnvelope:
    """
    Decode a raw push request body.

    Raises:
        pydantic.ValidationError: the body is not JSON, the data is corrupt, or
            a known event type carries a payload that doesn't fit its schema.
    """
    return PubSubPushEnvelope.model_validate_json(raw)
