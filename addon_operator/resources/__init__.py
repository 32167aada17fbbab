from .base import BaseResource, PhaseResult, is_owned_by
from .addon import Addon
from .operatorgroup import OperatorGroup, InstallConfigError
from .addonoperator import AddonOperator

__all__ = [
    "BaseResource",
    "PhaseResult",
    "is_owned_by",
    "Addon",
    "OperatorGroup",
    "InstallConfigError",
    "AddonOperator",
]
