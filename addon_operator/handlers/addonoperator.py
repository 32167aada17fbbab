import kopf
from logging import Logger
from kubernetes_asyncio.client import ApiException

from addon_operator.resources import AddonOperator
from addon_operator.types.schemas import AddonOperatorSpecSchema
from addon_operator.utils.errors import convert_api_exception

ADDON_OPERATOR_RESOURCE = (
    AddonOperator.GROUP_NAME,
    AddonOperator.GROUP_VERSION,
    AddonOperator.PLURAL_NAME,
)


async def swap_ocm_client(memo: kopf.Memo, client) -> None:
    previous = await memo.ocm_client_holder.replace(client)
    if previous is not None:
        await previous.close()


@kopf.on.resume(*ADDON_OPERATOR_RESOURCE)
@kopf.on.create(*ADDON_OPERATOR_RESOURCE)
@kopf.on.update(*ADDON_OPERATOR_RESOURCE, field="spec.ocm")
async def configure_ocm_client(spec, name, memo: kopf.Memo, logger: Logger, **kwargs):
    """(Re)create the OCM client from the AddonOperator configuration."""
    if name != memo.conf.addon_operator_name:
        logger.info(f"Ignoring AddonOperator {name!r}")
        return

    spec_model = AddonOperatorSpecSchema().load(dict(spec))
    if spec_model.ocm is None:
        logger.info("OCM reporting is not configured; clearing OCM client")
        await swap_ocm_client(memo, None)
        return

    try:
        client = await AddonOperator(logger=logger).build_ocm_client(
            spec_model.ocm, memo.conf
        )
    except ApiException as e:
        logger.error(f"Failed to configure OCM client: {e}")
        convert_api_exception(e, permanent=False)
    await swap_ocm_client(memo, client)


@kopf.on.delete(*ADDON_OPERATOR_RESOURCE)
async def on_delete(name, memo: kopf.Memo, logger: Logger, **kwargs):
    """Drop the OCM client when its configuration is removed."""
    if name == memo.conf.addon_operator_name:
        logger.info("AddonOperator deleted; clearing OCM client")
        await swap_ocm_client(memo, None)
