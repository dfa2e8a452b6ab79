"""
Renders a decoded cluster notification as a log line, a plain text summary
and a Slack Block Kit message.

All functions are pure; anything environment dependent (such as the project
name override) has to be applied to the message beforehand.
"""

from gke_notifications.api.models.attributes import unknown_resource_type
from gke_notifications.api.models.payload import (
    ResourceType,
    SecurityBulletinEvent,
    UnknownEvent,
    UpgradeAvailableEvent,
    UpgradeEvent,
)
from gke_notifications.api.models.pubsub import Message
from gke_notifications.exceptions.message_exception import MessageError

HEADER_EMOJI = ":gear:"


def log_entry(message: Message) -> str:
    """Always returns a line, even for a message we can't make sense of."""
    try:
        return message.attributes.log_message()
    except MessageError as e:
        if message.data:
            return f"{e}: {message.data}"
        return str(e)


def plain_text(message: Message) -> str:
    return _summary(message, message.attributes.cluster_name)


def markdown(message: Message) -> str:
    attributes = message.attributes
    cluster_link = f"<{attributes.resource_url()}|{attributes.cluster_name}>"
    return _summary(message, cluster_link)


def _summary(message: Message, cluster: str) -> str:
    attributes = message.attributes
    payload = attributes.payload

    if isinstance(payload, SecurityBulletinEvent):
        return f"Security bulletin {payload.bulletin_id} issued for cluster {cluster}"

    if isinstance(payload, UpgradeAvailableEvent):
        kind = payload.resource_type_kind
        if kind == ResourceType.CONTROL_PLANE:
            return f"Control plane upgrade to version {payload.version} available for cluster {cluster}"
        if kind == ResourceType.NODE_POOL:
            return f"{_node_pool(message)} upgrade to version {payload.version} available for cluster {cluster}"
        return f"{unknown_resource_type(payload.resource_type)} for cluster {cluster}"

    if isinstance(payload, UpgradeEvent):
        kind = payload.resource_type_kind
        if kind == ResourceType.CONTROL_PLANE:
            return f"Control plane of cluster {cluster} is upgrading to version {payload.target_version}"
        if kind == ResourceType.NODE_POOL:
            return f"{_node_pool(message)} of cluster {cluster} is upgrading to version {payload.target_version}"
        return f"{unknown_resource_type(payload.resource_type)} for cluster {cluster}"

    if isinstance(payload, UnknownEvent):
        return f"Received event of unknown type `{attributes.type_url}` for cluster {cluster}"

    return f"Received empty or invalid payload for cluster {cluster}"


def _node_pool(message: Message) -> str:
    name = message.attributes.node_pool_name()
    return f"Node pool {name}" if name else "Node pool"


def _mrkdwn(text: str) -> dict:
    return {"type": "mrkdwn", "text": text}


def _section(text: str) -> dict:
    return {"type": "section", "text": _mrkdwn(text)}


def _fields(*texts: str) -> dict:
    return {"type": "section", "fields": [_mrkdwn(text) for text in texts]}


def _context(text: str) -> dict:
    return {"type": "context", "elements": [_mrkdwn(text)]}


def blocks(message: Message) -> list[dict]:
    """
    Block Kit layout: a header, variant specific details and the resource URI
    as trailing context. Preview with https://app.slack.com/block-kit-builder/
    """
    attributes = message.attributes
    payload = attributes.payload
    project = attributes.effective_project_name()
    resource_link = f"*Resource*\n<{attributes.resource_url()}|View in Console>"

    result = [_section(f"{HEADER_EMOJI} {markdown(message)}")]

    if isinstance(payload, SecurityBulletinEvent):
        result.append(_section(f"*Brief Description*\n{payload.brief_description}"))
        result.append(
            _fields(
                f"*Affected Resource Type*\n{payload.resource_type_affected}",
                f"*Manual Steps Required*\n{'Yes' if payload.manual_steps_required else 'No'}",
            )
        )
        result.append(_fields(f"*Project*\n{project}", f"*Severity*\n{payload.severity}"))
        # empty optional sections are left out rather than rendered blank
        if payload.patched_versions or payload.suggested_upgrade_target:
            result.append(
                _fields(
                    "*Patched Versions*\n" + "\n".join(payload.patched_versions),
                    f"*Suggested Upgrade Target*\n{payload.suggested_upgrade_target}",
                )
            )
        result.append(
            _fields(
                f"*Cluster*\n<{attributes.resource_url()}|{attributes.cluster_name}>",
                f"*Security Bulletin*\n<{payload.bulletin_uri}|View Details>",
            )
        )
    elif isinstance(payload, UpgradeAvailableEvent):
        result.append(_fields(f"*Project*\n{project}", f"*Version*\n{payload.version}"))
        result.append(
            _fields(resource_link, f"*Release Channel*\n{payload.release_channel}")
        )
    elif isinstance(payload, UpgradeEvent):
        result.append(
            _fields(f"*Project*\n{project}", f"*Current Version*\n{payload.current_version}")
        )
        result.append(
            _fields(resource_link, f"*Target Version*\n{payload.target_version}")
        )
    else:
        result.append(_fields(f"*Project*\n{project}", f"*Message*\n{message.data}"))
        result.append(_fields(resource_link, f"*TypeUrl*\n{attributes.type_url}"))

    result.append(_context(attributes.resource_uri()))
    return result


def webhook_message(message: Message) -> dict:
    """The body posted to a Slack incoming webhook."""
    return {
        "text": f"{HEADER_EMOJI} {plain_text(message)}",
        "blocks": blocks(message),
    }
