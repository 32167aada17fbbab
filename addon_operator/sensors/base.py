"""Base sensor classes for operator monitoring.

This module defines the base OperatorSensor class that provides lifecycle hooks
for monitoring operator events. All hooks are no-ops by default, allowing
subclasses to override only the events they care about.

The hook pattern follows Faust's sensor design:
- Hooks come in pairs: on_X_start() and on_X_complete()
- Start hooks return an optional state dict for tracking multi-phase operations
- Complete hooks receive the state dict from their corresponding start hook
- Single-shot hooks (e.g. on_ocm_api_request) receive already measured values
"""

from typing import Dict, List, Optional, Any


class OperatorSensor:
    """Base sensor class for addon operator monitoring.

    Hooks fall into three categories:
    1. Addon reconciliation lifecycle
    2. Kubernetes resource operations (OperatorGroup sync)
    3. Upgrade-tracking service calls and reports

    Example:
        class LoggingSensor(OperatorSensor):
            def on_ocm_api_request(self, operation, duration_us, success):
                logger.info(f"{operation} took {duration_us}us")
    """

    # =============================================================================
    # Reconciliation Lifecycle Hooks
    # =============================================================================

    def on_reconcile_start(
        self,
        addon_name: str,
        generation: int,
        trigger_source: str,
    ) -> Optional[Dict[str, Any]]:
        """Called when an Addon reconciliation pass begins.

        Args:
            addon_name: Addon resource name
            generation: Resource generation number
            trigger_source: What triggered reconciliation (create, update, resume, timer)

        Returns:
            Optional state dict passed to on_reconcile_complete
        """
        pass

    def on_reconcile_complete(
        self,
        addon_name: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Called when an Addon reconciliation pass completes.

        Args:
            addon_name: Addon resource name
            state: State dict returned from on_reconcile_start
            success: Whether reconciliation succeeded
            error: Exception if reconciliation failed
        """
        pass

    # =============================================================================
    # Resource Operation Hooks
    # =============================================================================

    def on_resource_sync_start(
        self,
        addon_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
    ) -> Optional[Dict[str, Any]]:
        """Called when a Kubernetes resource write begins.

        Returns:
            Optional state dict passed to on_resource_sync_complete
        """
        pass

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
        """Called when a Kubernetes resource write completes.

        Args:
            operation: Operation performed (create, update)
        """
        pass

    def on_resource_drift_detected(
        self,
        addon_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        drift_fields: List[str],
    ) -> None:
        """Called when an existing resource differs from its desired state.

        Args:
            drift_fields: Top-level fields that drifted (spec, ownerReferences)
        """
        pass

    # =============================================================================
    # Upgrade-Tracking Service Hooks
    # =============================================================================

    def on_ocm_api_request(
        self,
        operation: str,
        duration_us: float,
        success: bool,
    ) -> None:
        """Called after every request to the upgrade-tracking service.

        Args:
            operation: Client operation (get_upgrade_policy, patch_upgrade_policy)
            duration_us: Request latency in microseconds
            success: Whether the request raised
        """
        pass

    def on_upgrade_policy_reported(
        self,
        addon_name: str,
        version: str,
        value: str,
    ) -> None:
        """Called when an upgrade policy state was recorded for an Addon.

        Args:
            addon_name: Addon resource name
            version: Addon version the state applies to
            value: Recorded state (started, completed)
        """
