from .addon_spec import (
    AddonInstallType,
    AddonInstallOLMCommon,
    AddonInstallOLMOwnNamespace,
    AddonInstallOLMAllNamespaces,
    AddonInstallSpec,
    AddonUpgradePolicy,
    AddonSpec,
)
from .addon_status import (
    AddonUpgradePolicyValue,
    AddonUpgradePolicyStatus,
    AddonStatus,
)
from .addonoperator_spec import (
    ClusterSecretReference,
    AddonOperatorOCM,
    AddonOperatorSpec,
)
from .upgrade_policy import (
    UpgradePolicyValue,
    UpgradePolicyGetRequest,
    UpgradePolicyGetResponse,
    UpgradePolicyPatchRequest,
    UpgradePolicyPatchResponse,
)

__all__ = [
    "AddonInstallType",
    "AddonInstallOLMCommon",
    "AddonInstallOLMOwnNamespace",
    "AddonInstallOLMAllNamespaces",
    "AddonInstallSpec",
    "AddonUpgradePolicy",
    "AddonSpec",
    "AddonUpgradePolicyValue",
    "AddonUpgradePolicyStatus",
    "AddonStatus",
    "ClusterSecretReference",
    "AddonOperatorOCM",
    "AddonOperatorSpec",
    "UpgradePolicyValue",
    "UpgradePolicyGetRequest",
    "UpgradePolicyGetResponse",
    "UpgradePolicyPatchRequest",
    "UpgradePolicyPatchResponse",
]
