import base64
import json
import kopf
from typing import Optional

from addon_operator.ocm import OCMClient
from addon_operator.resources.base import BaseResource
from addon_operator.types.models import AddonOperatorOCM
from addon_operator.types.settings import Settings


class AddonOperator(BaseResource):
    """Operator-wide configuration resource."""

    KIND = "AddonOperator"
    GROUP_NAME = "addons.managed.openshift.io"
    GROUP_VERSION = "v1alpha1"
    PLURAL_NAME = "addonoperators"

    PULL_SECRET_KEY = ".dockerconfigjson"
    PULL_SECRET_REGISTRY = "cloud.openshift.com"

    CLUSTER_VERSION_GROUP = "config.openshift.io"
    CLUSTER_VERSION_VERSION = "v1"
    CLUSTER_VERSION_PLURAL = "clusterversions"
    CLUSTER_VERSION_NAME = "version"

    async def fetch_access_token(self, ocm: AddonOperatorOCM) -> str:
        """Read the OCM access token from the referenced pull secret."""
        secret = await self.fetch_secret(ocm.secret.name, ocm.secret.namespace)
        raw = (secret.data or {}).get(self.PULL_SECRET_KEY)
        if not raw:
            raise kopf.PermanentError(
                f"Secret {ocm.secret.namespace}/{ocm.secret.name} has no "
                f"{self.PULL_SECRET_KEY} key"
            )
        try:
            auths = json.loads(base64.b64decode(raw))["auths"]
            return auths[self.PULL_SECRET_REGISTRY]["auth"]
        except (ValueError, KeyError, TypeError) as e:
            raise kopf.PermanentError(
                f"Secret {ocm.secret.namespace}/{ocm.secret.name} holds no "
                f"{self.PULL_SECRET_REGISTRY} token: {e}"
            ) from e

    async def fetch_cluster_id(self) -> Optional[str]:
        cluster_version = await self.get_cluster_custom_object(
            self.CLUSTER_VERSION_GROUP,
            self.CLUSTER_VERSION_VERSION,
            self.CLUSTER_VERSION_PLURAL,
            self.CLUSTER_VERSION_NAME,
        )
        if cluster_version is None:
            return None
        return (cluster_version.get("spec") or {}).get("clusterID")

    async def build_ocm_client(self, ocm: AddonOperatorOCM, conf: Settings) -> OCMClient:
        """Create an OCM client for the given configuration."""
        cluster_id = conf.cluster_id or await self.fetch_cluster_id()
        if not cluster_id:
            raise kopf.TemporaryError("cluster ID is not known yet", delay=30)
        access_token = await self.fetch_access_token(ocm)
        self.logger.info(f"Creating OCM client for {ocm.endpoint} (cluster {cluster_id})")
        return OCMClient(
            endpoint=ocm.endpoint,
            cluster_id=cluster_id,
            access_token=access_token,
            timeout=conf.ocm_request_timeout_seconds,
        )
