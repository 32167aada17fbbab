import copy
from typing import Any, Dict, Mapping, Optional

from addon_operator.types.models import (
    AddonSpec,
    AddonStatus,
    AddonUpgradePolicyStatus,
    AddonUpgradePolicyValue,
)
from addon_operator.types.schemas import (
    AddonSpecSchema,
    AddonStatusSchema,
    AddonUpgradePolicyStatusSchema,
)
from addon_operator.utils.helpers import find_condition, upsert_condition


class Addon:
    """An Addon as seen by a single reconciliation pass.

    Holds the parsed spec and the status as it was read. Operations that
    change the status return a new `AddonStatus` rather than mutating this
    object; the handler persists whatever status it ends up with.
    """

    KIND = "Addon"
    GROUP_NAME = "addons.managed.openshift.io"
    GROUP_VERSION = "v1alpha1"
    PLURAL_NAME = "addons"

    COMMON_INSTANCE_LABEL = "addons.managed.openshift.io/instance"
    COMMON_MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"

    AVAILABLE = "Available"
    REASON_CONFIG_ERROR = "ConfigurationError"
    PHASE_ERROR = "Error"

    name: str
    uid: str
    generation: Optional[int]
    spec: AddonSpec
    status: AddonStatus

    def __init__(
        self,
        name: str,
        uid: str,
        spec: AddonSpec,
        status: AddonStatus,
        generation: Optional[int] = None,
    ):
        self.name = name
        self.uid = uid
        self.spec = spec
        self.status = status
        self.generation = generation

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "Addon":
        """Build an Addon from the raw object delivered by kopf."""
        meta = body.get("metadata") or {}
        return Addon(
            name=meta.get("name"),
            uid=meta.get("uid"),
            generation=meta.get("generation"),
            spec=AddonSpecSchema().load(dict(body.get("spec") or {})),
            status=AddonStatusSchema().load(dict(body.get("status") or {})),
        )

    @property
    def api_version(self) -> str:
        return f"{self.GROUP_NAME}/{self.GROUP_VERSION}"

    @property
    def body(self) -> Dict[str, Any]:
        """Minimal body usable as an owner for kopf's hierarchy helpers."""
        return {
            "apiVersion": self.api_version,
            "kind": self.KIND,
            "metadata": {"name": self.name, "uid": self.uid},
        }

    @property
    def common_labels(self) -> Dict[str, str]:
        return {
            self.COMMON_INSTANCE_LABEL: self.name,
            self.COMMON_MANAGED_BY_LABEL: "addon-operator",
        }

    def with_status(self, status: AddonStatus) -> "Addon":
        addon = copy.copy(self)
        addon.status = status
        return addon

    def is_available(self) -> bool:
        cond = find_condition(self.status.conditions, self.AVAILABLE)
        return cond is not None and cond.get("status") == "True"

    def upgrade_complete_for_current_version(self) -> bool:
        policy = self.status.upgrade_policy
        return (
            policy is not None
            and policy.value == AddonUpgradePolicyValue.COMPLETED
            and policy.version == self.spec.version
        )

    def configuration_error_status(self, message: str) -> AddonStatus:
        """Status marking the Addon unavailable because its spec is invalid."""
        conds = upsert_condition(
            self.status.conditions,
            {
                "type": self.AVAILABLE,
                "status": "False",
                "reason": self.REASON_CONFIG_ERROR,
                "message": message,
                "observedGeneration": self.generation,
            },
        )
        status = self.status.with_conditions(conds)
        status.phase = self.PHASE_ERROR
        status.observed_generation = self.generation
        return status

    def clear_configuration_error_status(self) -> AddonStatus:
        """Status without a configuration error left by an earlier pass.

        Returns `self.status` itself if there is nothing to clear.
        """
        cond = find_condition(self.status.conditions, self.AVAILABLE)
        stale_cond = cond is not None and cond.get("reason") == self.REASON_CONFIG_ERROR
        stale_phase = self.status.phase == self.PHASE_ERROR
        if not stale_cond and not stale_phase:
            return self.status

        status = self.status.with_conditions(
            [c for c in self.status.conditions if not (stale_cond and c is cond)]
        )
        if stale_phase:
            status.phase = None
        status.observed_generation = self.generation
        return status

    def upgrade_policy_status(self, value: str) -> AddonStatus:
        """Status recording `value` for the currently declared version."""
        return self.status.with_upgrade_policy(
            AddonUpgradePolicyStatus(
                id=self.spec.upgrade_policy.id if self.spec.upgrade_policy else None,
                value=value,
                version=self.spec.version,
                observed_generation=self.generation,
            )
        )

    @staticmethod
    def status_patch(status: AddonStatus) -> Dict[str, Any]:
        """Status fields owned by the reconciliation core, in wire format."""
        # A None phase removes a previously written one.
        patch = {"conditions": status.conditions, "phase": status.phase}
        if status.observed_generation is not None:
            patch["observedGeneration"] = status.observed_generation
        if status.upgrade_policy is not None:
            patch["upgradePolicy"] = AddonUpgradePolicyStatusSchema().dump(
                status.upgrade_policy
            )
        return patch
