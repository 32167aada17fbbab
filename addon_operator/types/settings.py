import os
from typing import Any, Optional

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: Name of the cluster-scoped AddonOperator resource holding operator-wide config
ADDON_OPERATOR_NAME = str(_getenv("ADDON_OPERATOR_NAME", "addon-operator"))

#: Timeout in seconds for each request to the OCM API
OCM_REQUEST_TIMEOUT_SECONDS = float(_getenv("OCM_REQUEST_TIMEOUT_SECONDS", 10.0))

#: Cluster ID used in OCM API paths; resolved from the ClusterVersion when unset
CLUSTER_ID = os.environ.get("CLUSTER_ID")

#: Seconds between periodic Addon reconciliation passes
ADDON_RECONCILE_INTERVAL_SECONDS = float(
    _getenv("ADDON_RECONCILE_INTERVAL_SECONDS", 30.0)
)

#: Port of the Prometheus metrics server
METRICS_PORT = int(_getenv("METRICS_PORT", 8000))


class Settings:
    """Operator settings"""

    addon_operator_name: str = ADDON_OPERATOR_NAME
    ocm_request_timeout_seconds: float = OCM_REQUEST_TIMEOUT_SECONDS
    cluster_id: Optional[str] = CLUSTER_ID
    addon_reconcile_interval_seconds: float = ADDON_RECONCILE_INTERVAL_SECONDS
    metrics_port: int = METRICS_PORT

    def __init__(
        self,
        *args,
        addon_operator_name: str = None,
        ocm_request_timeout_seconds: float = None,
        cluster_id: str = None,
        addon_reconcile_interval_seconds: float = None,
        metrics_port: int = None,
        **kwargs,
    ):
        if addon_operator_name is not None:
            self.addon_operator_name = addon_operator_name

        if ocm_request_timeout_seconds is not None:
            self.ocm_request_timeout_seconds = ocm_request_timeout_seconds

        if cluster_id is not None:
            self.cluster_id = cluster_id

        if addon_reconcile_interval_seconds is not None:
            self.addon_reconcile_interval_seconds = addon_reconcile_interval_seconds

        if metrics_port is not None:
            self.metrics_port = metrics_port
