"""Reconciler - applies a pushed device configuration to this AP.

One reconciliation runs these steps in order, each guarded by the success
of the previous one:

1. Check the pushed object is a DeviceConfigTree
2. Serialize it to canonical text (logged, later persisted)
3. Find this device's AP config by hostname
4. Query the VLANs live on the uplink interface
5. Detect whether the VLAN set changed
6. Clean up the existing VLANs if it did
7. Wait for the link to settle
8. Apply the AP config
9. Persist the accepted text

Any failure ends the attempt. ``handle_config_update`` is the only place
errors are caught; it turns them, and any unexpected fault, into a failed
ReconciliationOutcome so a bad push never takes the agent down.
"""
import logging
import time
from typing import Any, Callable, Optional

from ..config.identity import AgentSettings, DeviceIdentity
from ..config.locator import ConfigLocator
from ..config.schema import DeviceConfigTree
from ..config_store.store import ConfigStore
from ..errors import (
    CommandError,
    ConfigShapeError,
    ErrorKind,
    LocatorMissError,
    ReconcileError,
    VLANQueryError,
)
from ..service.base import ApplyService, CleanupService
from ..syscmd.base import CommandRunner
from ..utils.audit_log import log_reconcile
from ..utils.logging_config import timed_section
from .detector import detect_change
from .schema import ReconcileState, ReconciliationOutcome
from .serializer import emit_json

logger = logging.getLogger(__name__)

# Link renegotiation after cleanup is not observable, so wait a fixed time
SETTLE_DELAY_SECONDS = 5.0


class Reconciler:
    """
    Reconciles the device against pushed configurations.

    Usage:
        reconciler = Reconciler.from_settings(load_settings())
        outcome = reconciler.handle_config_update(tree)

    Not safe for concurrent use; callers must serialize pushes.
    """

    def __init__(
        self,
        identity: DeviceIdentity,
        runner: CommandRunner,
        cleanup: CleanupService,
        applier: ApplyService,
        store: ConfigStore,
        locator: Optional[ConfigLocator] = None,
        sleep: Callable[[float], None] = time.sleep,
        settle_delay: float = SETTLE_DELAY_SECONDS,
    ):
        """
        Args:
            identity: Hostname and interface names of this device
            runner: Command runner used to query live VLANs
            cleanup: Service that tears down existing VLANs
            applier: Service that applies the AP configuration
            store: Where the accepted configuration is persisted
            locator: AP config lookup (default: ConfigLocator)
            sleep: Blocking delay used for the settle wait
            settle_delay: Settle wait in seconds
        """
        self.identity = identity
        self.runner = runner
        self.cleanup = cleanup
        self.applier = applier
        self.store = store
        self.locator = locator or ConfigLocator()
        self.sleep = sleep
        self.settle_delay = settle_delay
        self.state = ReconcileState.IDLE

    @classmethod
    def from_settings(cls, settings: AgentSettings, **kwargs: Any) -> "Reconciler":
        """Wire the reconciler to the real Linux collaborators."""
        from ..service.network import NetworkService
        from ..syscmd.linux import LinuxCommandRunner

        runner = LinuxCommandRunner()
        service = NetworkService(runner, settings.run_folder)
        return cls(
            identity=settings.identity,
            runner=runner,
            cleanup=service,
            applier=service,
            store=ConfigStore(settings.run_folder),
            **kwargs,
        )

    def handle_config_update(self, config: Any) -> ReconciliationOutcome:
        """Entry point for a validated full-replace configuration push.

        Never raises for a failed reconciliation; the failure is returned.
        """
        self.state = ReconcileState.IDLE
        start = time.perf_counter()

        try:
            with timed_section("reconcile", hostname=self.identity.hostname):
                outcome = self.reconcile(config)
        except ReconcileError as e:
            logger.error(f"Reconciliation failed at {self.state.value}: {e}")
            outcome = ReconciliationOutcome.failed(e.kind, str(e), failed_at=self.state)
        except Exception as e:
            logger.exception(f"Unexpected fault at {self.state.value}")
            outcome = ReconciliationOutcome.failed(
                ErrorKind.RUNTIME_FAULT,
                f"unexpected fault when handling updated config: {e!r}",
                failed_at=self.state,
            )

        self.state = outcome.state
        log_reconcile(
            hostname=self.identity.hostname,
            success=outcome.success,
            reset_required=outcome.reset_required,
            state=(outcome.failed_at or outcome.state).value,
            error_kind=outcome.error_kind.value if outcome.error_kind else None,
            error=outcome.error,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return outcome

    def reconcile(self, config: Any) -> ReconciliationOutcome:
        """Run every step, raising on the first failure.

        Raises:
            ReconcileError: For any expected failure
        """
        # TODO: Handle delta updates once the protocol layer sends them.
        if not isinstance(config, DeviceConfigTree):
            raise ConfigShapeError(
                f"new configuration has invalid type: {type(config).__name__}"
            )
        self.state = ReconcileState.TYPE_CHECKED

        config_text = emit_json(config)
        self.state = ReconcileState.SERIALIZED
        logger.info(f"Received a new configuration:\n{config_text}")

        identity = self.identity
        ap_config = self.locator.find(config, identity.hostname)
        if ap_config is None:
            raise LocatorMissError(identity.hostname)
        self.state = ReconcileState.LOCATED

        try:
            existing_vlans = self.runner.query_vlans(identity.eth_intf_name)
        except CommandError as e:
            raise VLANQueryError(
                f"unable to fetch the existing VLAN with error ({e}), may need to reboot the device."
            ) from e
        self.state = ReconcileState.VLAN_QUERIED

        new_vlans = self.locator.vlans(ap_config)
        change = detect_change(existing_vlans, new_vlans)
        if change.reset_required:
            logger.info(
                f"VLAN changes ({sorted(existing_vlans)} -> {sorted(new_vlans)}) "
                f"on interface {identity.eth_intf_name}."
            )
        else:
            logger.info(f"No VLAN change on interface {identity.eth_intf_name}.")

        self.cleanup.cleanup(identity.eth_intf_name, change.vlans_to_cleanup)
        self.state = (
            ReconcileState.CLEANED_UP if change.reset_required else ReconcileState.SKIPPED_CLEANUP
        )

        self.sleep(self.settle_delay)
        self.state = ReconcileState.SETTLED

        self.applier.apply(
            ap_config,
            config.gasket,
            change.reset_required,
            identity.eth_intf_name,
            identity.wlan_intf_name,
        )
        self.state = ReconcileState.APPLIED
        logger.info("Device configuration succeeded.")

        self.store.save(config_text)
        self.state = ReconcileState.PERSISTED
        logger.info("Saved the configuration to file.")

        return ReconciliationOutcome.done(change.reset_required, config_text)
