from typing import Optional
from addon_operator.types.base import BaseModel


class UpgradePolicyValue:
    """Upgrade policy states as understood by the upgrade-tracking service."""

    NOT_STARTED = "pending"
    STARTED = "started"
    COMPLETED = "completed"


class UpgradePolicyGetRequest(BaseModel):
    id: str


class UpgradePolicyGetResponse(BaseModel):
    id: Optional[str]
    value: str
    description: Optional[str]


class UpgradePolicyPatchRequest(BaseModel):
    id: str
    value: str
    description: str


class UpgradePolicyPatchResponse(BaseModel):
    id: Optional[str]
    value: Optional[str]
    description: Optional[str]
