"""Reporting of Addon upgrade progress to the OCM upgrade policy API.

Each reconciliation pass calls `UpgradePolicyReporter.handle_reporting` once
availability is known. The reporter compares the declared version with the
last state recorded in `status.upgradePolicy` and reports "started" or
"completed" as needed. The local record is only updated after the service
accepted the report, so a failed report is simply retried on the next pass.
"""
import asyncio
import logging
import time
from logging import Logger
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp
from marshmallow import ValidationError

from addon_operator.ocm import OCMClient, OCMClientHolder, OCMError
from addon_operator.resources.addon import Addon
from addon_operator.sensors import OperatorSensor
from addon_operator.types.models import (
    AddonStatus,
    AddonUpgradePolicyValue,
    UpgradePolicyGetRequest,
    UpgradePolicyGetResponse,
    UpgradePolicyPatchRequest,
    UpgradePolicyValue,
)

T = TypeVar("T")

module_logger = logging.getLogger(__name__)


class UpgradePolicyReportingError(Exception):
    """A request to the upgrade policy API failed."""

    def __init__(self, operation: str, policy_id: str, version: str, reason: str):
        self.operation = operation
        self.policy_id = policy_id
        self.version = version
        super().__init__(
            f"{operation} UpgradePolicy {policy_id!r} at version {version!r}: {reason}"
        )


def requires_reporting(addon: Addon) -> bool:
    return (
        bool(addon.spec.version)
        and addon.spec.upgrade_policy is not None
        and not addon.upgrade_complete_for_current_version()
    )


class UpgradePolicyReporter:
    """Upgrade policy status reporting for Addons.

    Args:
        holder: Shared handle to the OCM client.
        sensor: Receives the latency of every OCM request; optional.
    """

    def __init__(
        self,
        holder: OCMClientHolder,
        sensor: Optional[OperatorSensor] = None,
    ):
        self.holder = holder
        self.sensor = sensor

    async def handle_reporting(
        self, addon: Addon, logger: Optional[Logger] = None
    ) -> AddonStatus:
        """Report the Addon's upgrade progress if needed.

        Returns the status to persist, which is `addon.status` itself when
        nothing was reported.

        Raises:
            UpgradePolicyReportingError: a request to the OCM API failed.
        """
        logger = logger or module_logger
        if not requires_reporting(addon):
            return addon.status

        async with self.holder.borrow() as client:
            if client is None:
                # Either the AddonOperator resource has not been reconciled yet or
                # it is not configured for OCM reporting. Retried on a later pass.
                logger.info(
                    "delaying Addon status reporting to UpgradePolicy endpoint "
                    "until OCM client is initialized"
                )
                return addon.status
            return await self._report(client, addon, logger)

    async def _report(self, client: OCMClient, addon: Addon, logger: Logger) -> AddonStatus:
        policy = addon.status.upgrade_policy
        version = addon.spec.version

        if policy is None:
            logger.info("UpgradePolicy status unknown; reporting upgrade as started")
            return await self.report_upgrade_started(client, addon)

        if not policy.version:
            logger.info("previous upgrade version unknown; retrieving status from OCM")
            status = await self.handle_unknown_previous_version(client, addon, logger)
            if status is not None:
                return status
            # Not completed upstream: continue with the local record as read.

        if policy.version != version:
            logger.info(
                f"version {policy.version!r} from UpgradePolicy status is stale; "
                f"reporting upgrade for version {version!r} as started"
            )
            return await self.report_upgrade_started(client, addon)

        if addon.is_available():
            logger.info("reporting upgrade as completed")
            return await self.report_upgrade_completed(client, addon)

        return addon.status

    async def handle_unknown_previous_version(
        self, client: OCMClient, addon: Addon, logger: Logger
    ) -> Optional[AddonStatus]:
        """Resolve a status record that predates version tracking.

        Returns a completed status if OCM already considers the policy
        completed, None otherwise.
        """
        policy_id = addon.spec.upgrade_policy.id
        res: UpgradePolicyGetResponse = await self._call(
            "get_upgrade_policy",
            lambda: client.get_upgrade_policy(UpgradePolicyGetRequest(id=policy_id)),
            addon,
        )
        if res.value == UpgradePolicyValue.COMPLETED:
            logger.info("previous upgrade completed; setting UpgradePolicy status to complete")
            return addon.upgrade_policy_status(AddonUpgradePolicyValue.COMPLETED)

        logger.info(f"found current upgrade with state {res.value!r}")
        return None

    async def report_upgrade_started(self, client: OCMClient, addon: Addon) -> AddonStatus:
        return await self._patch(
            client,
            addon,
            UpgradePolicyValue.STARTED,
            AddonUpgradePolicyValue.STARTED,
            f'Upgrading addon to version "{addon.spec.version}".',
        )

    async def report_upgrade_completed(self, client: OCMClient, addon: Addon) -> AddonStatus:
        return await self._patch(
            client,
            addon,
            UpgradePolicyValue.COMPLETED,
            AddonUpgradePolicyValue.COMPLETED,
            f'Addon was healthy at least once at version "{addon.spec.version}".',
        )

    async def _patch(
        self,
        client: OCMClient,
        addon: Addon,
        value: str,
        local_value: str,
        description: str,
    ) -> AddonStatus:
        req = UpgradePolicyPatchRequest(
            id=addon.spec.upgrade_policy.id, value=value, description=description
        )
        await self._call(
            "patch_upgrade_policy", lambda: client.patch_upgrade_policy(req), addon
        )
        if self.sensor is not None:
            self.sensor.on_upgrade_policy_reported(
                addon.name, addon.spec.version, local_value
            )
        return addon.upgrade_policy_status(local_value)

    async def _call(
        self, operation: str, request: Callable[[], Awaitable[T]], addon: Addon
    ) -> T:
        try:
            return await self.record_ocm_request_duration(operation, request)
        except asyncio.TimeoutError:
            raise
        except (OCMError, aiohttp.ClientError, ValidationError) as e:
            raise UpgradePolicyReportingError(
                operation, addon.spec.upgrade_policy.id, addon.spec.version, str(e)
            ) from e

    async def record_ocm_request_duration(
        self, operation: str, request: Callable[[], Awaitable[T]]
    ) -> T:
        """Await `request`, feeding its latency in microseconds to the sensor."""
        if self.sensor is None:
            return await request()

        start = time.perf_counter()
        success = False
        try:
            result = await request()
            success = True
            return result
        finally:
            duration_us = (time.perf_counter() - start) * 1_000_000
            try:
                self.sensor.on_ocm_api_request(operation, duration_us, success)
            except Exception as e:
                module_logger.error(
                    f"Error recording OCM request duration: {e}", exc_info=True
                )
