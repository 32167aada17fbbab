from marshmallow import fields
from addon_operator.types.base import BaseSchema
from addon_operator.types.models import AddonUpgradePolicyStatus, AddonStatus


class AddonUpgradePolicyStatusSchema(BaseSchema):
    __model__ = AddonUpgradePolicyStatus

    id = fields.Str(data_key="id", allow_none=True, load_default=None)
    value = fields.Str(data_key="value", allow_none=True, load_default=None)
    # Older status records carry no version.
    version = fields.Str(data_key="version", allow_none=True, load_default="")
    observed_generation = fields.Int(
        data_key="observedGeneration", allow_none=True, load_default=None
    )


class AddonStatusSchema(BaseSchema):
    __model__ = AddonStatus

    conditions = fields.List(
        fields.Dict(), data_key="conditions", allow_none=False, load_default=list
    )
    upgrade_policy = fields.Nested(
        AddonUpgradePolicyStatusSchema(),
        data_key="upgradePolicy",
        allow_none=True,
        load_default=None,
    )
    observed_generation = fields.Int(
        data_key="observedGeneration", allow_none=True, load_default=None
    )
    phase = fields.Str(data_key="phase", allow_none=True, load_default=None)
