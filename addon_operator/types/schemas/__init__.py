from .addon_spec import (
    AddonInstallOLMOwnNamespaceSchema,
    AddonInstallOLMAllNamespacesSchema,
    AddonInstallSpecSchema,
    AddonUpgradePolicySchema,
    AddonSpecSchema,
)
from .addon_status import AddonUpgradePolicyStatusSchema, AddonStatusSchema
from .addonoperator_spec import (
    ClusterSecretReferenceSchema,
    AddonOperatorOCMSchema,
    AddonOperatorSpecSchema,
)
from .upgrade_policy import (
    UpgradePolicyGetResponseSchema,
    UpgradePolicyPatchResponseSchema,
)

__all__ = [
    "AddonInstallOLMOwnNamespaceSchema",
    "AddonInstallOLMAllNamespacesSchema",
    "AddonInstallSpecSchema",
    "AddonUpgradePolicySchema",
    "AddonSpecSchema",
    "AddonUpgradePolicyStatusSchema",
    "AddonStatusSchema",
    "ClusterSecretReferenceSchema",
    "AddonOperatorOCMSchema",
    "AddonOperatorSpecSchema",
    "UpgradePolicyGetResponseSchema",
    "UpgradePolicyPatchResponseSchema",
]
