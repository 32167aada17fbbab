"""Prometheus monitoring backend for the addon operator.

PrometheusMonitor collects operator lifecycle events and exposes them as
Prometheus metrics:

1. Addon reconciliation - duration, throughput, errors
2. OperatorGroup sync - write counts and latency, drift detection
3. Upgrade-tracking service - request latency (microseconds) and reports
"""

from typing import Dict, List, Optional, Any
import time
import logging

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, Summary

from addon_operator.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor.

    Metrics are registered on `registry` (the process-wide default registry
    unless one is given) and served by the metrics server.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        self.reconcile_duration = Histogram(
            'addon_operator_reconcile_duration_seconds',
            'Time spent in an Addon reconciliation pass',
            labelnames=['addon_name', 'trigger_source', 'result'],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=registry,
        )

        self.reconcile_total = Counter(
            'addon_operator_reconcile_total',
            'Total number of Addon reconciliation passes',
            labelnames=['addon_name', 'trigger_source', 'result'],
            registry=registry,
        )

        self.reconcile_errors = Counter(
            'addon_operator_reconcile_errors_total',
            'Total number of Addon reconciliation errors',
            labelnames=['addon_name', 'error_type'],
            registry=registry,
        )

        self.resource_sync_duration = Histogram(
            'addon_operator_resource_sync_duration_seconds',
            'Time spent writing Kubernetes resources',
            labelnames=['addon_name', 'namespace', 'resource_type', 'operation', 'result'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

        self.resource_sync_errors = Counter(
            'addon_operator_resource_sync_errors_total',
            'Total number of Kubernetes resource write errors',
            labelnames=['addon_name', 'namespace', 'resource_type', 'error_type'],
            registry=registry,
        )

        self.resource_drift_detected = Counter(
            'addon_operator_resource_drift_detected_total',
            'Total number of resource drift detections',
            labelnames=['addon_name', 'namespace', 'resource_type', 'drift_field'],
            registry=registry,
        )

        self.ocm_api_requests = Summary(
            'addon_operator_ocm_api_requests_durations',
            'OCM API request latencies in microseconds',
            labelnames=['operation', 'result'],
            registry=registry,
        )

        self.upgrade_policy_reports = Counter(
            'addon_operator_upgrade_policy_reports_total',
            'Total number of upgrade policy states recorded',
            labelnames=['addon_name', 'value'],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    def on_reconcile_start(
        self, addon_name: str, generation: int, trigger_source: str
    ) -> Optional[Dict[str, Any]]:
        """Record reconciliation start time."""
        return {
            'start_time': time.time(),
            'trigger_source': trigger_source,
        }

    def on_reconcile_complete(
        self,
        addon_name: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Record reconciliation duration and result."""
        if not state:
            return
        duration = time.time() - state['start_time']
        result = 'success' if success else 'failure'
        labels = dict(
            addon_name=addon_name,
            trigger_source=state['trigger_source'],
            result=result,
        )
        self.reconcile_duration.labels(**labels).observe(duration)
        self.reconcile_total.labels(**labels).inc()
        if error:
            self.reconcile_errors.labels(
                addon_name=addon_name,
                error_type=error.__class__.__name__,
            ).inc()

    def on_resource_sync_start(
        self, addon_name: str, resource_name: str, namespace: str, resource_type: str
    ) -> Optional[Dict[str, Any]]:
        """Record resource sync start time."""
        return {'start_time': time.time()}

    def on_resource_sync_complete(
        self,
        addon_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        state: Optional[Dict[str, Any]],
        operation: str,
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Record resource sync duration and result."""
        if state:
            self.resource_sync_duration.labels(
                addon_name=addon_name,
                namespace=namespace,
                resource_type=resource_type,
                operation=operation,
                result='success' if success else 'failure',
            ).observe(time.time() - state['start_time'])
        if error:
            self.resource_sync_errors.labels(
                addon_name=addon_name,
                namespace=namespace,
                resource_type=resource_type,
                error_type=error.__class__.__name__,
            ).inc()

    def on_resource_drift_detected(
        self,
        addon_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        drift_fields: List[str],
    ) -> None:
        for field in drift_fields:
            self.resource_drift_detected.labels(
                addon_name=addon_name,
                namespace=namespace,
                resource_type=resource_type,
                drift_field=field,
            ).inc()

    def on_ocm_api_request(
        self, operation: str, duration_us: float, success: bool
    ) -> None:
        self.ocm_api_requests.labels(
            operation=operation,
            result='success' if success else 'failure',
        ).observe(duration_us)

    def on_upgrade_policy_reported(
        self, addon_name: str, version: str, value: str
    ) -> None:
        self.upgrade_policy_reports.labels(addon_name=addon_name, value=value).inc()
