"""Client for the OCM upgrade policy API."""
from typing import Any
from yarl import URL

from addon_operator.types.models import (
    UpgradePolicyGetRequest,
    UpgradePolicyGetResponse,
    UpgradePolicyPatchRequest,
    UpgradePolicyPatchResponse,
)
from addon_operator.types.schemas import (
    UpgradePolicyGetResponseSchema,
    UpgradePolicyPatchResponseSchema,
)
from .session import SessionManager

UPGRADE_POLICY_STATE_PATH = (
    "/api/clusters_mgmt/v1/clusters/{cluster_id}/upgrade_policies/{policy_id}/state"
)


class OCMClient(SessionManager):
    """Client for the upgrade-tracking service of a single cluster."""

    def __init__(
        self, endpoint: str, cluster_id: str, access_token: str, **kwargs: Any
    ) -> None:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"AccessToken {cluster_id}:{access_token}"
        super().__init__(headers=headers, **kwargs)
        self.endpoint = URL(endpoint)
        self.cluster_id = cluster_id

    def upgrade_policy_state_url(self, policy_id: str) -> URL:
        return self.endpoint.with_path(
            UPGRADE_POLICY_STATE_PATH.format(
                cluster_id=self.cluster_id, policy_id=policy_id
            )
        )

    async def get_upgrade_policy(
        self, req: UpgradePolicyGetRequest
    ) -> UpgradePolicyGetResponse:
        """Fetch the current state of an upgrade policy."""
        return await self.get(
            self.upgrade_policy_state_url(req.id),
            schema=UpgradePolicyGetResponseSchema(),
        )

    async def patch_upgrade_policy(
        self, req: UpgradePolicyPatchRequest
    ) -> UpgradePolicyPatchResponse:
        """Set the state of an upgrade policy."""
        return await self.patch(
            self.upgrade_policy_state_url(req.id),
            data={"value": req.value, "description": req.description},
            schema=UpgradePolicyPatchResponseSchema(),
        )

    def __repr__(self) -> str:
        return f"OCMClient<{self.endpoint}, cluster={self.cluster_id}>"
