"""Reconciliation of pushed configurations against the local device.

Usage:
    from ap_config_agent.reconcile import Reconciler

    reconciler = Reconciler.from_settings(load_settings())
    outcome = reconciler.handle_config_update(tree)
    if not outcome.success:
        print(outcome.error_kind, outcome.error)
"""

from .engine import Reconciler, SETTLE_DELAY_SECONDS
from .detector import detect_change, vlan_set_changed
from .schema import ReconcileState, ReconciliationOutcome, VLANChange
from .serializer import emit_json

__all__ = [
    "Reconciler",
    "SETTLE_DELAY_SECONDS",
    "detect_change",
    "vlan_set_changed",
    "ReconcileState",
    "ReconciliationOutcome",
    "VLANChange",
    "emit_json",
]
