import kopf
from logging import Logger
from kubernetes_asyncio.client import ApiException

from addon_operator.resources import Addon, OperatorGroup, PhaseResult
from addon_operator.types.models import AddonStatus
from addon_operator.types.settings import Settings
from addon_operator.upgradepolicy import UpgradePolicyReportingError
from addon_operator.utils.errors import convert_api_exception

ADDON_RESOURCE = (Addon.GROUP_NAME, Addon.GROUP_VERSION, Addon.PLURAL_NAME)


async def run_phases(addon: Addon, memo: kopf.Memo, logger: Logger) -> AddonStatus:
    """Run the OperatorGroup phase, then upgrade policy reporting."""
    status, result = await OperatorGroup(sensor=memo.sensor, logger=logger).ensure(addon)
    if result is PhaseResult.STOP:
        return status
    addon = addon.with_status(status)
    addon = addon.with_status(addon.clear_configuration_error_status())
    return await memo.reporter.handle_reporting(addon, logger)


async def reconcile(body, patch, memo: kopf.Memo, logger: Logger, trigger_source: str):
    addon = Addon.from_body(body)
    sensor_state = memo.sensor.on_reconcile_start(
        addon.name, addon.generation, trigger_source
    )
    success, error = True, None
    try:
        status = await run_phases(addon, memo, logger)
    except ApiException as e:
        success, error = False, e
        logger.error(f"Failed to reconcile Addon: {e}")
        convert_api_exception(e, permanent=False)
    except UpgradePolicyReportingError as e:
        success, error = False, e
        logger.error(f"Failed to report upgrade policy status: {e}")
        raise kopf.TemporaryError(str(e), delay=30) from e
    except Exception as e:
        success, error = False, e
        raise
    finally:
        memo.sensor.on_reconcile_complete(addon.name, sensor_state, success, error)

    patch.status.update(Addon.status_patch(status))


@kopf.on.resume(*ADDON_RESOURCE)
@kopf.on.create(*ADDON_RESOURCE)
@kopf.on.update(*ADDON_RESOURCE)
async def on_addon_change(body, patch, memo, logger: Logger, reason, **kwargs):
    """Reconcile an Addon after it was created, changed or the operator restarted."""
    trigger_source = getattr(reason, "value", str(reason))
    await reconcile(body, patch, memo, logger, trigger_source=trigger_source)


@kopf.timer(
    *ADDON_RESOURCE,
    initial_delay=5.0,
    interval=Settings.addon_reconcile_interval_seconds,
    backoff=10.0,
)
async def periodic_reconciliation(body, patch, memo, logger: Logger, **kwargs):
    """Reconcile an Addon periodically."""
    await reconcile(body, patch, memo, logger, trigger_source="timer")
