"""Addon Operator Sensor Framework.

Non-invasive instrumentation of operator events through a hook-based
pattern, inspired by Faust's sensor architecture.

Key components:
- OperatorSensor: Base class defining lifecycle hooks
- SensorDelegate: Fan-out of events to multiple sensor backends
- PrometheusMonitor: Prometheus metrics exporter

Usage:
    from addon_operator.sensors import SensorDelegate, PrometheusMonitor

    delegate = SensorDelegate()
    delegate.add(PrometheusMonitor())
"""

from addon_operator.sensors.base import OperatorSensor
from addon_operator.sensors.delegate import SensorDelegate
from addon_operator.sensors.prometheus import PrometheusMonitor
from addon_operator.sensors.server import init_metrics_server

__all__ = [
    'OperatorSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
