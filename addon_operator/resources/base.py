import enum
import logging
from logging import Logger
from typing import Any, Dict, Optional
from kubernetes_asyncio.client import ApiException, CoreV1Api, CustomObjectsApi, V1Secret
from kubernetes_asyncio.client.api_client import ApiClient

from addon_operator.sensors import OperatorSensor


class PhaseResult(enum.Enum):
    """Outcome of a reconciliation phase."""

    #: Proceed with the next phase of this pass.
    CONTINUE = "continue"
    #: Halt the remaining phases of this pass.
    STOP = "stop"


def is_owned_by(obj: Dict[str, Any], owner_uid: str) -> bool:
    """Return True if `obj` carries an owner reference to the given uid."""
    refs = (obj.get("metadata") or {}).get("ownerReferences") or []
    return any(ref.get("uid") == owner_uid for ref in refs)


class BaseResource:
    """Base resource model."""

    ADDON_OPERATOR_NAME = "addon-operator"

    #: Shared across all resources; set on operator startup.
    shared_api_client: ApiClient = None
    sensor: OperatorSensor = OperatorSensor()

    def __init__(
        self,
        api_client: Optional[ApiClient] = None,
        sensor: Optional[OperatorSensor] = None,
        logger: Optional[Logger] = None,
    ):
        self._api_client = api_client
        self._custom_objects_api = None
        self._core_v1_api = None
        if sensor is not None:
            self.sensor = sensor
        self.logger = logger or logging.getLogger(__name__)

    @property
    def api_client(self) -> Optional[ApiClient]:
        return self._api_client or self.shared_api_client

    @property
    def custom_objects_api(self) -> CustomObjectsApi:
        if self._custom_objects_api is None:
            self._custom_objects_api = CustomObjectsApi(self.api_client)
        return self._custom_objects_api

    @property
    def core_v1_api(self) -> CoreV1Api:
        if self._core_v1_api is None:
            self._core_v1_api = CoreV1Api(self.api_client)
        return self._core_v1_api

    async def get_custom_object(
        self,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
    ) -> Optional[Dict[str, Any]]:
        """Fetch a namespaced custom object; None if it does not exist."""
        try:
            return await self.custom_objects_api.get_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except ApiException as ex:
            if ex.status == 404:
                return None
            raise

    async def get_cluster_custom_object(
        self, group: str, version: str, plural: str, name: str
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self.custom_objects_api.get_cluster_custom_object(
                group=group, version=version, plural=plural, name=name
            )
        except ApiException as ex:
            if ex.status == 404:
                return None
            raise

    async def create_custom_object(
        self,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        body: Dict[str, Any],
    ) -> Dict[str, Any]:
        return await self.custom_objects_api.create_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            body=body,
        )

    async def replace_custom_object(
        self,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        body: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Update a custom object in place.

        `body` carries the resourceVersion it was read at, so a concurrent
        write surfaces as a 409 conflict.
        """
        return await self.custom_objects_api.replace_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
            body=body,
        )

    async def fetch_secret(self, name: str, namespace: str) -> V1Secret:
        return await self.core_v1_api.read_namespaced_secret(
            name=name, namespace=namespace
        )
