"""Shared fixtures for unit tests."""

from typing import Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from addon_operator.ocm import OCMClient, OCMClientHolder
from addon_operator.resources import Addon
from addon_operator.types.models import (
    AddonInstallType,
    AddonInstallOLMOwnNamespace,
    AddonInstallOLMAllNamespaces,
    AddonInstallSpec,
    AddonUpgradePolicy,
    AddonSpec,
    AddonStatus,
    AddonUpgradePolicyStatus,
    UpgradePolicyGetResponse,
    UpgradePolicyPatchResponse,
)

ADDON_UID = "3c9d3a4e-0a51-4c6e-9d0f-3f3f1d8c2e11"
CATALOG_IMAGE = (
    "quay.io/osd-addons/test:sha256:"
    "04864220677b2ed6244f2e0d421166df908986700647595ffdb6fd9ca4e5098a"
)


def _make_addon(
    install_type: Optional[str] = AddonInstallType.OLM_OWN_NAMESPACE,
    namespace: Optional[str] = "addon-system",
    with_sub_config: bool = True,
    version: Optional[str] = "1.2.0",
    upgrade_policy_id: Optional[str] = "policy-1",
    upgrade_policy_status: Optional[AddonUpgradePolicyStatus] = None,
    conditions: Optional[List[Dict]] = None,
) -> Addon:
    own_namespace = all_namespaces = None
    if with_sub_config and install_type == AddonInstallType.OLM_OWN_NAMESPACE:
        own_namespace = AddonInstallOLMOwnNamespace(
            namespace=namespace,
            catalog_source_image=CATALOG_IMAGE,
            channel="alpha",
            package_name="addon-1",
        )
    if with_sub_config and install_type == AddonInstallType.OLM_ALL_NAMESPACES:
        all_namespaces = AddonInstallOLMAllNamespaces(
            namespace=namespace,
            catalog_source_image=CATALOG_IMAGE,
            channel="alpha",
            package_name="addon-1",
        )
    return Addon(
        name="addon-1",
        uid=ADDON_UID,
        generation=2,
        spec=AddonSpec(
            display_name="Addon 1",
            version=version,
            install=AddonInstallSpec(
                type=install_type,
                olm_own_namespace=own_namespace,
                olm_all_namespaces=all_namespaces,
            ),
            upgrade_policy=(
                AddonUpgradePolicy(id=upgrade_policy_id) if upgrade_policy_id else None
            ),
        ),
        status=AddonStatus(
            conditions=conditions or [],
            upgrade_policy=upgrade_policy_status,
            observed_generation=None,
            phase=None,
        ),
    )


def _available_condition(status: str = "True") -> Dict:
    return {
        "type": "Available",
        "status": status,
        "reason": "FullyReconciled" if status == "True" else "UnreadyCSV",
        "message": "",
        "lastTransitionTime": "2024-01-01T00:00:00+00:00",
    }


@pytest.fixture
def ocm_client():
    client = Mock(spec=OCMClient)
    client.get_upgrade_policy = AsyncMock(
        return_value=UpgradePolicyGetResponse(
            id="policy-1", value="started", description=None
        )
    )
    client.patch_upgrade_policy = AsyncMock(
        return_value=UpgradePolicyPatchResponse(
            id="policy-1", value="started", description=None
        )
    )
    return client


@pytest.fixture
def holder(ocm_client):
    return OCMClientHolder(ocm_client)


@pytest.fixture
def addon_uid():
    return ADDON_UID


@pytest.fixture
def make_addon():
    """Factory for Addons; keyword arguments override the defaults."""
    return _make_addon


@pytest.fixture
def available_condition():
    return _available_condition
