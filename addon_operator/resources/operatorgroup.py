import copy
import kopf
from logging import Logger
from typing import Any, Dict, List, Optional, Tuple
from kubernetes_asyncio.client.api_client import ApiClient

from addon_operator.resources.addon import Addon
from addon_operator.resources.base import BaseResource, PhaseResult, is_owned_by
from addon_operator.sensors import OperatorSensor
from addon_operator.types.models import AddonInstallType, AddonStatus
from addon_operator.utils.helpers import deep_compare_dict


class InstallConfigError(Exception):
    """The Addon's install configuration does not match its declared type."""


class OperatorGroup(BaseResource):
    """Ensures the OperatorGroup an Addon's operator is installed into."""

    KIND = "OperatorGroup"
    GROUP_NAME = "operators.coreos.com"
    GROUP_VERSION = "v1"
    PLURAL_NAME = "operatorgroups"
    RESOURCE_TYPE = "operator_group"

    DEFAULT_NAME = "redhat-layered-product-og"

    def __init__(
        self,
        api_client: Optional[ApiClient] = None,
        sensor: Optional[OperatorSensor] = None,
        logger: Optional[Logger] = None,
    ):
        super().__init__(api_client=api_client, sensor=sensor, logger=logger)

    @classmethod
    def parse_install_config(cls, addon: Addon) -> Tuple[str, List[str]]:
        """Return (target namespace, target namespaces) for the Addon.

        An empty list of target namespaces selects all namespaces.

        Raises:
            InstallConfigError: the install type is unsupported or its
                sub-config is missing or has no namespace.
        """
        install = addon.spec.install
        if install.type == AddonInstallType.OLM_OWN_NAMESPACE:
            cfg = install.olm_own_namespace
            if cfg is None or not cfg.namespace:
                raise InstallConfigError(
                    ".spec.install.olmOwnNamespace.namespace is required when "
                    f".spec.install.type = {AddonInstallType.OLM_OWN_NAMESPACE}"
                )
            return cfg.namespace, [cfg.namespace]

        if install.type == AddonInstallType.OLM_ALL_NAMESPACES:
            cfg = install.olm_all_namespaces
            if cfg is None or not cfg.namespace:
                raise InstallConfigError(
                    ".spec.install.olmAllNamespaces.namespace is required when "
                    f".spec.install.type = {AddonInstallType.OLM_ALL_NAMESPACES}"
                )
            return cfg.namespace, []

        raise InstallConfigError(f"unsupported install type {install.type!r}")

    def prepare_operator_group(self, addon: Addon) -> Dict[str, Any]:
        """Build the desired OperatorGroup for the Addon."""
        target_namespace, target_namespaces = self.parse_install_config(addon)
        spec = {}
        if target_namespaces:
            spec["targetNamespaces"] = list(target_namespaces)
        operator_group = {
            "apiVersion": f"{self.GROUP_NAME}/{self.GROUP_VERSION}",
            "kind": self.KIND,
            "metadata": {
                "name": self.DEFAULT_NAME,
                "namespace": target_namespace,
                "labels": addon.common_labels,
            },
            "spec": spec,
        }
        self.ensure_owned_by(operator_group, addon)
        return operator_group

    def ensure_owned_by(self, operator_group: Dict[str, Any], addon: Addon) -> None:
        """Make `addon` the sole controller of `operator_group`.

        Owner references of other controllers are dropped; non-controller
        references are kept. Applying this to an already owned object is a
        no-op.
        """
        meta = operator_group.setdefault("metadata", {})
        refs = meta.get("ownerReferences") or []
        foreign = [
            ref for ref in refs if ref.get("controller") and ref.get("uid") != addon.uid
        ]
        if foreign:
            self.logger.warning(
                f"OperatorGroup {meta.get('namespace')}/{meta.get('name')} is controlled by "
                f"{[ref.get('name') for ref in foreign]}; taking over for Addon {addon.name}"
            )
            refs = [ref for ref in refs if ref not in foreign]
        meta["ownerReferences"] = refs
        kopf.append_owner_reference(operator_group, owner=addon.body)

    async def ensure(self, addon: Addon) -> Tuple[AddonStatus, PhaseResult]:
        """Make sure the Addon's OperatorGroup exists and is up to date.

        Returns the Addon status to persist and whether the pass may continue.
        An invalid install config is reported through the status, not raised.
        """
        try:
            desired = self.prepare_operator_group(addon)
        except InstallConfigError as e:
            self.logger.error(f"Invalid install configuration: {e}")
            return addon.configuration_error_status(f"Configuration error: {e}"), PhaseResult.STOP

        name = desired["metadata"]["name"]
        namespace = desired["metadata"]["namespace"]
        existing = await self.get_custom_object(
            namespace,
            self.GROUP_NAME,
            self.GROUP_VERSION,
            self.PLURAL_NAME,
            name,
        )
        if existing is None:
            self.logger.info(f"Creating OperatorGroup {namespace}/{name}")
            await self._write(addon, desired, "create")
            return addon.status, PhaseResult.CONTINUE

        await self.reconcile(addon, existing)
        return addon.status, PhaseResult.CONTINUE

    async def reconcile(
        self, addon: Addon, existing: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Converge an already fetched OperatorGroup to the Addon's desired state.

        Spec and ownership are merged into a copy of `existing`; an update is
        issued only if the merge changed anything. Returns the converged object.
        """
        desired = self.prepare_operator_group(addon)
        merged = copy.deepcopy(existing)
        # Fields the API server defaults (e.g. upgradeStrategy) are left alone.
        spec = dict(merged.get("spec") or {})
        spec.pop("targetNamespaces", None)
        spec.update(desired["spec"])
        merged["spec"] = spec
        meta = merged.setdefault("metadata", {})
        meta["labels"] = {**(meta.get("labels") or {}), **desired["metadata"]["labels"]}
        self.ensure_owned_by(merged, addon)

        drift_fields = [
            field
            for field, actual, wanted in (
                ("spec", existing.get("spec") or {}, merged["spec"]),
                (
                    "labels",
                    (existing.get("metadata") or {}).get("labels") or {},
                    meta["labels"],
                ),
                (
                    "ownerReferences",
                    (existing.get("metadata") or {}).get("ownerReferences") or [],
                    meta["ownerReferences"],
                ),
            )
            if not deep_compare_dict(actual, wanted)
        ]
        if not drift_fields:
            return existing

        if not is_owned_by(existing, addon.uid):
            self.logger.info(
                f"Adopting OperatorGroup {meta.get('namespace')}/{meta.get('name')}"
            )
        self.sensor.on_resource_drift_detected(
            addon.name, meta.get("name"), meta.get("namespace"), self.RESOURCE_TYPE, drift_fields
        )
        return await self._write(addon, merged, "update")

    async def _write(
        self, addon: Addon, operator_group: Dict[str, Any], operation: str
    ) -> Dict[str, Any]:
        meta = operator_group["metadata"]
        sensor_state = self.sensor.on_resource_sync_start(
            addon.name, meta["name"], meta["namespace"], self.RESOURCE_TYPE
        )
        success, error = True, None
        try:
            if operation == "create":
                return await self.create_custom_object(
                    meta["namespace"],
                    self.GROUP_NAME,
                    self.GROUP_VERSION,
                    self.PLURAL_NAME,
                    operator_group,
                )
            return await self.replace_custom_object(
                meta["namespace"],
                self.GROUP_NAME,
                self.GROUP_VERSION,
                self.PLURAL_NAME,
                meta["name"],
                operator_group,
            )
        except Exception as e:
            success, error = False, e
            raise
        finally:
            self.sensor.on_resource_sync_complete(
                addon.name,
                meta["name"],
                meta["namespace"],
                self.RESOURCE_TYPE,
                sensor_state,
                operation,
                success,
                error,
            )
