from marshmallow import fields
from addon_operator.types.base import BaseSchema
from addon_operator.types.models import (
    UpgradePolicyGetResponse,
    UpgradePolicyPatchResponse,
)


class UpgradePolicyGetResponseSchema(BaseSchema):
    __model__ = UpgradePolicyGetResponse

    id = fields.Str(data_key="id", allow_none=True, load_default=None)
    value = fields.Str(data_key="value", required=True)
    description = fields.Str(
        data_key="description", allow_none=True, load_default=None
    )


class UpgradePolicyPatchResponseSchema(BaseSchema):
    __model__ = UpgradePolicyPatchResponse

    id = fields.Str(data_key="id", allow_none=True, load_default=None)
    value = fields.Str(data_key="value", allow_none=True, load_default=None)
    description = fields.Str(
        data_key="description", allow_none=True, load_default=None
    )
