import base64
import json
from unittest.mock import MagicMock

import pytest

PROJECT_ID = "0123456789"
CLUSTER_NAME = "test-cluster"
CLUSTER_LOCATION = "us-central1"
NODE_POOL_RESOURCE = (
    "projects/0123456789/locations/us-central1/clusters/test-cluster/nodePools/default-pool"
)

SECURITY_BULLETIN_TYPE = (
    "type.googleapis.com/google.container.v1beta1.SecurityBulletinEvent"
)
UPGRADE_AVAILABLE_TYPE = (
    "type.googleapis.com/google.container.v1beta1.UpgradeAvailableEvent"
)
UPGRADE_TYPE = "type.googleapis.com/google.container.v1beta1.UpgradeEvent"

SECURITY_BULLETIN_PAYLOAD = {
    "resourceTypeAffected": "RESOURCE_TYPE_CONTROLPLANE",
    "bulletinId": "GCP-2022-001",
    "cveIds": ["CVE-2022-0185"],
    "severity": "HIGH",
    "bulletinUri": "https://cloud.google.com/kubernetes-engine/docs/security-bulletins#gcp-2022-001",
    "briefDescription": "A vulnerability was found in the Linux kernel.",
    "affectedSupportedMinors": ["1.21", "1.22"],
    "patchedVersions": ["1.21.9-gke.1002", "1.22.6-gke.1000"],
    "suggestedUpgradeTarget": "1.22.6-gke.1000",
    "manualStepsRequired": False,
}

CONTROL_PLANE_UPGRADE_AVAILABLE_PAYLOAD = {
    "version": "1.22.6-gke.300",
    "resourceType": "MASTER",
    "releaseChannel": {"channel": "REGULAR"},
}

NODE_POOL_UPGRADE_AVAILABLE_PAYLOAD = {
    "version": "1.22.6-gke.300",
    "resourceType": "NODE_POOL",
    "releaseChannel": {"channel": "REGULAR"},
    "resource": NODE_POOL_RESOURCE,
}

CONTROL_PLANE_UPGRADE_PAYLOAD = {
    "currentVersion": "1.22.4-gke.1501",
    "resourceType": "MASTER",
    "targetVersion": "1.22.6-gke.300",
}

NODE_POOL_UPGRADE_PAYLOAD = {
    "currentVersion": "1.22.4-gke.1501",
    "operation": "operation-1646344245342-0ba4e5c5",
    "operationStartTime": "2022-03-03T21:50:45.342254058Z",
    "resourceType": "NODE_POOL",
    "resource": NODE_POOL_RESOURCE,
    "targetVersion": "1.22.6-gke.300",
}


def encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def make_message(type_url, payload, data="", **attributes) -> dict:
    """A Pub/Sub message as it appears inside a push envelope."""
    if isinstance(payload, dict):
        payload = json.dumps(payload)
    return {
        "attributes": {
            "project_id": PROJECT_ID,
            "cluster_name": CLUSTER_NAME,
            "cluster_location": CLUSTER_LOCATION,
            "type_url": type_url,
            "payload": payload,
            **attributes,
        },
        "messageId": "4156329553838459",
        "publishTime": "2022-03-03T21:50:46.127Z",
        "data": encode(data),
    }


def make_envelope(message: dict) -> dict:
    return {
        "message": message,
        "subscription": "projects/test-project/subscriptions/gke-cluster-notifications",
    }


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a developer's shell configuration out of the tests."""
    monkeypatch.delenv("GCP_PROJECT", raising=False)
    monkeypatch.delenv("SLACK_WEBHOOK", raising=False)


@pytest.fixture
def security_bulletin_message():
    return make_message(
        SECURITY_BULLETIN_TYPE,
        SECURITY_BULLETIN_PAYLOAD,
        data="A security bulletin has been published.",
    )


@pytest.fixture
def control_plane_upgrade_available_message():
    return make_message(
        UPGRADE_AVAILABLE_TYPE,
        CONTROL_PLANE_UPGRADE_AVAILABLE_PAYLOAD,
        data="New master version 1.22.6-gke.300 is available for upgrade.",
    )


@pytest.fixture
def node_pool_upgrade_available_message():
    return make_message(
        UPGRADE_AVAILABLE_TYPE,
        NODE_POOL_UPGRADE_AVAILABLE_PAYLOAD,
        data="New node version 1.22.6-gke.300 is available for upgrade.",
    )


@pytest.fixture
def control_plane_upgrade_message():
    return make_message(
        UPGRADE_TYPE, CONTROL_PLANE_UPGRADE_PAYLOAD, data="Master is upgrading."
    )


@pytest.fixture
def node_pool_upgrade_message():
    return make_message(
        UPGRADE_TYPE, NODE_POOL_UPGRADE_PAYLOAD, data="Node pool is upgrading."
    )


@pytest.fixture
def unknown_type_message():
    return make_message(
        "type.googleapis.com/google.container.v1beta1.SomeNewEvent",
        {"foo": "bar"},
        data="Something new happened.",
    )


@pytest.fixture
def mock_response():
    """Create a mock response for requests.post"""
    response = MagicMock()
    response.status_code = 200
    response.ok = True
    response.text = "ok"
    return response
