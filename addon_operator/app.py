import kopf
import logging
from kubernetes_asyncio import config
from kubernetes_asyncio.client.api_client import ApiClient

import addon_operator.handlers.addon as addon
import addon_operator.handlers.addonoperator as addonoperator
import addon_operator.handlers.probes as probes
from addon_operator.ocm import OCMClientHolder
from addon_operator.resources import BaseResource
from addon_operator.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from addon_operator.types.settings import Settings
from addon_operator.upgradepolicy import UpgradePolicyReporter


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    memo.conf = Settings()

    # Create a shared ApiClient for all resources to prevent connection leaks
    BaseResource.shared_api_client = ApiClient()
    logger.info("Shared Kubernetes API client initialized")

    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    memo.sensor = sensor_delegate
    BaseResource.sensor = sensor_delegate
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    # Populated by the AddonOperator handler once OCM reporting is configured
    memo.ocm_client_holder = OCMClientHolder()
    memo.reporter = UpgradePolicyReporter(memo.ocm_client_holder, sensor=sensor_delegate)

    try:
        init_metrics_server(memo.conf.metrics_port)
    except Exception as e:
        logger.error(f"Failed to start metrics server: {e}")
        logger.warning("Continuing without metrics server")

    settings.posting.enabled = True
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
async def cleanup(memo: kopf.Memo, logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    holder = getattr(memo, "ocm_client_holder", None)
    if holder is not None:
        await holder.close()
        logger.info("OCM client closed")

    if BaseResource.shared_api_client:
        await BaseResource.shared_api_client.close()
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")


__all__ = [
    "addon",
    "addonoperator",
    "probes",
]
