"""Sensor delegation for fan-out pattern.

SensorDelegate routes every sensor event to a set of monitoring backends.
A failing backend is logged and skipped, so instrumentation never changes
the outcome of the operation being measured.
"""

from typing import Set, Dict, List, Optional, Any
import logging

from addon_operator.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Example:
        delegate = SensorDelegate()
        delegate.add(PrometheusMonitor())

        state = delegate.on_reconcile_start("my-addon", 3, "timer")
        delegate.on_reconcile_complete("my-addon", state, True)
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: OperatorSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def clear(self) -> None:
        logger.info(f"Clearing {len(self._sensors)} sensors")
        self._sensors.clear()

    def _emit(self, hook: str, *args: Any) -> Optional[Dict[OperatorSensor, Any]]:
        states = {}
        for sensor in self._sensors:
            try:
                state = getattr(sensor, hook)(*args)
                if state is not None:
                    states[sensor] = state
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )
        return states if states else None

    def _emit_with_state(
        self,
        hook: str,
        state: Optional[Dict[OperatorSensor, Any]],
        before: tuple,
        after: tuple,
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                getattr(sensor, hook)(*before, sensor_state, *after)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    # =============================================================================
    # Reconciliation Lifecycle Hooks
    # =============================================================================

    def on_reconcile_start(
        self, addon_name: str, generation: int, trigger_source: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        """Delegate reconcile_start to all sensors.

        Returns:
            Dict mapping each sensor to its returned state, or None if no sensors
        """
        return self._emit("on_reconcile_start", addon_name, generation, trigger_source)

    def on_reconcile_complete(
        self,
        addon_name: str,
        state: Optional[Dict[OperatorSensor, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        self._emit_with_state(
            "on_reconcile_complete", state, (addon_name,), (success, error)
        )

    # =============================================================================
    # Resource Operation Hooks
    # =============================================================================

    def on_resource_sync_start(
        self, addon_name: str, resource_name: str, namespace: str, resource_type: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        return self._emit(
            "on_resource_sync_start", addon_name, resource_name, namespace, resource_type
        )

    def on_resource_sync_complete(
        self,
        addon_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        state: Optional[Dict[OperatorSensor, Any]],
        operation: str,
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        self._emit_with_state(
            "on_resource_sync_complete",
            state,
            (addon_name, resource_name, namespace, resource_type),
            (operation, success, error),
        )

    def on_resource_drift_detected(
        self,
        addon_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        drift_fields: List[str],
    ) -> None:
        self._emit(
            "on_resource_drift_detected",
            addon_name,
            resource_name,
            namespace,
            resource_type,
            drift_fields,
        )

    # =============================================================================
    # Upgrade-Tracking Service Hooks
    # =============================================================================

    def on_ocm_api_request(
        self, operation: str, duration_us: float, success: bool
    ) -> None:
        self._emit("on_ocm_api_request", operation, duration_us, success)

    def on_upgrade_policy_reported(
        self, addon_name: str, version: str, value: str
    ) -> None:
        self._emit("on_upgrade_policy_reported", addon_name, version, value)
