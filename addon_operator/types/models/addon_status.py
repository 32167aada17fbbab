import copy
from typing import Dict, List, Optional
from addon_operator.types.base import BaseModel


class AddonUpgradePolicyValue:
    """Values recorded locally in `status.upgradePolicy.value`."""

    STARTED = "started"
    COMPLETED = "completed"


class AddonUpgradePolicyStatus(BaseModel):
    """Last upgrade state reported to the upgrade-tracking service."""

    id: str
    value: str
    version: Optional[str]
    observed_generation: Optional[int]


class AddonStatus(BaseModel):
    """Status sub-resource of an Addon.

    Instances are treated as values: the `with_*` methods return an updated
    copy and leave the receiver untouched.
    """

    conditions: List[Dict]
    upgrade_policy: Optional[AddonUpgradePolicyStatus]
    observed_generation: Optional[int]
    phase: Optional[str]

    def copy(self) -> "AddonStatus":
        return copy.deepcopy(self)

    def with_conditions(self, conditions: List[Dict]) -> "AddonStatus":
        status = self.copy()
        status.conditions = conditions
        return status

    def with_upgrade_policy(
        self, upgrade_policy: AddonUpgradePolicyStatus
    ) -> "AddonStatus":
        status = self.copy()
        status.upgrade_policy = upgrade_policy
        return status
