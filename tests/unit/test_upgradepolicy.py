"""Unit tests for upgrade policy reporting."""

import asyncio

import aiohttp
import pytest
from unittest.mock import Mock
from marshmallow import ValidationError

from addon_operator.ocm import NotFoundError, OCMClientHolder, RequestError
from addon_operator.sensors import OperatorSensor
from addon_operator.types.models import (
    AddonUpgradePolicyStatus,
    UpgradePolicyGetResponse,
)
from addon_operator.upgradepolicy import (
    UpgradePolicyReporter,
    UpgradePolicyReportingError,
    requires_reporting,
)


def policy_status(value, version):
    return AddonUpgradePolicyStatus(
        id="policy-1", value=value, version=version, observed_generation=1
    )


def patched(ocm_client):
    return ocm_client.patch_upgrade_policy.await_args.args[0]


class TestRequiresReporting:
    def test_no_upgrade_policy_ref(self, make_addon):
        assert not requires_reporting(make_addon(upgrade_policy_id=None))

    def test_no_version(self, make_addon):
        assert not requires_reporting(make_addon(version=""))

    def test_completed_for_current_version(self, make_addon):
        addon = make_addon(upgrade_policy_status=policy_status("completed", "1.2.0"))
        assert not requires_reporting(addon)

    def test_completed_for_older_version(self, make_addon):
        addon = make_addon(upgrade_policy_status=policy_status("completed", "1.1.0"))
        assert requires_reporting(addon)


class TestHandleReporting:
    @pytest.mark.asyncio
    async def test_unknown_status_reports_started(self, holder, ocm_client, make_addon):
        addon = make_addon(version="1.2.0")

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        ocm_client.get_upgrade_policy.assert_not_awaited()
        ocm_client.patch_upgrade_policy.assert_awaited_once()
        req = patched(ocm_client)
        assert req.id == "policy-1"
        assert req.value == "started"
        assert req.description == 'Upgrading addon to version "1.2.0".'
        assert status.upgrade_policy.id == "policy-1"
        assert status.upgrade_policy.value == "started"
        assert status.upgrade_policy.version == "1.2.0"
        assert status.upgrade_policy.observed_generation == addon.generation
        assert addon.status.upgrade_policy is None

    @pytest.mark.asyncio
    async def test_legacy_record_completed_upstream(
        self, holder, ocm_client, make_addon
    ):
        ocm_client.get_upgrade_policy.return_value = UpgradePolicyGetResponse(
            id="policy-1", value="completed", description=None
        )
        addon = make_addon(upgrade_policy_status=policy_status("started", ""))

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        ocm_client.get_upgrade_policy.assert_awaited_once()
        assert ocm_client.get_upgrade_policy.await_args.args[0].id == "policy-1"
        ocm_client.patch_upgrade_policy.assert_not_awaited()
        assert status.upgrade_policy.value == "completed"
        assert status.upgrade_policy.version == "1.2.0"

    @pytest.mark.asyncio
    async def test_legacy_record_not_completed_upstream(
        self, holder, ocm_client, make_addon
    ):
        addon = make_addon(upgrade_policy_status=policy_status("started", ""))

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        ocm_client.get_upgrade_policy.assert_awaited_once()
        ocm_client.patch_upgrade_policy.assert_awaited_once()
        assert patched(ocm_client).value == "started"
        assert status.upgrade_policy.value == "started"
        assert status.upgrade_policy.version == "1.2.0"

    @pytest.mark.asyncio
    async def test_stale_version_reports_started(self, holder, ocm_client, make_addon):
        addon = make_addon(
            version="1.1.0",
            upgrade_policy_status=policy_status("completed", "1.0.0"),
        )

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        assert patched(ocm_client).value == "started"
        assert patched(ocm_client).description == 'Upgrading addon to version "1.1.0".'
        assert status.upgrade_policy.value == "started"
        assert status.upgrade_policy.version == "1.1.0"

    @pytest.mark.asyncio
    async def test_available_reports_completed(
        self, holder, ocm_client, make_addon, available_condition
    ):
        addon = make_addon(
            upgrade_policy_status=policy_status("started", "1.2.0"),
            conditions=[available_condition("True")],
        )

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        req = patched(ocm_client)
        assert req.value == "completed"
        assert req.description == 'Addon was healthy at least once at version "1.2.0".'
        assert status.upgrade_policy.value == "completed"
        assert status.upgrade_policy.version == "1.2.0"
        assert status.conditions == addon.status.conditions

    @pytest.mark.asyncio
    async def test_unavailable_waits(
        self, holder, ocm_client, make_addon, available_condition
    ):
        addon = make_addon(
            upgrade_policy_status=policy_status("started", "1.2.0"),
            conditions=[available_condition("False")],
        )

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        ocm_client.get_upgrade_policy.assert_not_awaited()
        ocm_client.patch_upgrade_policy.assert_not_awaited()
        assert status is addon.status

    @pytest.mark.asyncio
    async def test_complete_for_current_version_is_noop(
        self, holder, ocm_client, make_addon, available_condition
    ):
        addon = make_addon(
            upgrade_policy_status=policy_status("completed", "1.2.0"),
            conditions=[available_condition("True")],
        )

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        ocm_client.patch_upgrade_policy.assert_not_awaited()
        assert status is addon.status

    @pytest.mark.asyncio
    async def test_no_upgrade_policy_ref(self, holder, ocm_client, make_addon):
        addon = make_addon(upgrade_policy_id=None)

        status = await UpgradePolicyReporter(holder).handle_reporting(addon)

        ocm_client.get_upgrade_policy.assert_not_awaited()
        ocm_client.patch_upgrade_policy.assert_not_awaited()
        assert status is addon.status

    @pytest.mark.asyncio
    async def test_no_client_configured(self, make_addon):
        addon = make_addon()

        status = await UpgradePolicyReporter(OCMClientHolder()).handle_reporting(addon)

        assert status is addon.status
        assert status.upgrade_policy is None


class TestReportingFailures:
    @pytest.mark.parametrize(
        "error",
        [
            RequestError(500, "boom"),
            NotFoundError("Not found"),
            aiohttp.ClientConnectionError("connection refused"),
        ],
    )
    @pytest.mark.asyncio
    async def test_failed_patch_leaves_status_untouched(
        self, holder, ocm_client, make_addon, error
    ):
        ocm_client.patch_upgrade_policy.side_effect = error
        addon = make_addon(
            version="1.1.0",
            upgrade_policy_status=policy_status("completed", "1.0.0"),
        )

        with pytest.raises(UpgradePolicyReportingError) as exc_info:
            await UpgradePolicyReporter(holder).handle_reporting(addon)

        assert exc_info.value.__cause__ is error
        assert exc_info.value.operation == "patch_upgrade_policy"
        assert exc_info.value.policy_id == "policy-1"
        assert exc_info.value.version == "1.1.0"
        assert addon.status.upgrade_policy.value == "completed"
        assert addon.status.upgrade_policy.version == "1.0.0"

    @pytest.mark.asyncio
    async def test_failed_get_is_reported(self, holder, ocm_client, make_addon):
        ocm_client.get_upgrade_policy.side_effect = RequestError(503, "unavailable")
        addon = make_addon(upgrade_policy_status=policy_status("started", ""))

        with pytest.raises(UpgradePolicyReportingError):
            await UpgradePolicyReporter(holder).handle_reporting(addon)
        ocm_client.patch_upgrade_policy.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_response_is_reported(self, holder, ocm_client, make_addon):
        error = ValidationError({"value": ["Missing data for required field."]})
        ocm_client.get_upgrade_policy.side_effect = error
        addon = make_addon(upgrade_policy_status=policy_status("started", ""))

        with pytest.raises(UpgradePolicyReportingError) as exc_info:
            await UpgradePolicyReporter(holder).handle_reporting(addon)

        assert exc_info.value.__cause__ is error
        assert exc_info.value.operation == "get_upgrade_policy"
        assert exc_info.value.policy_id == "policy-1"
        assert exc_info.value.version == "1.2.0"
        assert addon.status.upgrade_policy.version == ""

    @pytest.mark.asyncio
    async def test_timeout_is_not_wrapped(self, holder, ocm_client, make_addon):
        ocm_client.patch_upgrade_policy.side_effect = asyncio.TimeoutError()

        with pytest.raises(asyncio.TimeoutError):
            await UpgradePolicyReporter(holder).handle_reporting(make_addon())

    @pytest.mark.asyncio
    async def test_cancellation_is_not_wrapped(self, holder, ocm_client, make_addon):
        ocm_client.patch_upgrade_policy.side_effect = asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await UpgradePolicyReporter(holder).handle_reporting(make_addon())


class TestRequestDurations:
    @pytest.mark.asyncio
    async def test_sensor_receives_microseconds(self, holder, ocm_client, make_addon):
        sensor = Mock(spec=OperatorSensor)

        await UpgradePolicyReporter(holder, sensor=sensor).handle_reporting(
            make_addon()
        )

        sensor.on_ocm_api_request.assert_called_once()
        operation, duration_us, success = sensor.on_ocm_api_request.call_args.args
        assert operation == "patch_upgrade_policy"
        assert duration_us >= 0
        assert success is True
        sensor.on_upgrade_policy_reported.assert_called_once_with(
            "addon-1", "1.2.0", "started"
        )

    @pytest.mark.asyncio
    async def test_failure_is_recorded(self, holder, ocm_client, make_addon):
        sensor = Mock(spec=OperatorSensor)
        ocm_client.patch_upgrade_policy.side_effect = RequestError(500, "boom")

        with pytest.raises(UpgradePolicyReportingError):
            await UpgradePolicyReporter(holder, sensor=sensor).handle_reporting(
                make_addon()
            )

        assert sensor.on_ocm_api_request.call_args.args[2] is False
        sensor.on_upgrade_policy_reported.assert_not_called()

    @pytest.mark.asyncio
    async def test_raising_sensor_does_not_change_outcome(
        self, holder, ocm_client, make_addon
    ):
        sensor = Mock(spec=OperatorSensor)
        sensor.on_ocm_api_request.side_effect = RuntimeError("sensor broken")
        reporter = UpgradePolicyReporter(holder, sensor=sensor)

        async def request():
            return "result"

        assert await reporter.record_ocm_request_duration("op", request) == "result"

    @pytest.mark.asyncio
    async def test_without_sensor(self, holder):
        reporter = UpgradePolicyReporter(holder)

        async def request():
            return 42

        assert await reporter.record_ocm_request_duration("op", request) == 42
