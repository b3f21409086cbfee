"""Tests for reconciliation audit records."""
import logging

import pytest

from ap_config_agent.utils.audit_log import (
    ReconcileRecord,
    audit_logger,
    get_recent_records,
    log_reconcile,
    setup_audit_logging,
)


@pytest.fixture
def audit_file(tmp_path):
    path = setup_audit_logging(str(tmp_path))
    yield path
    for handler in audit_logger.handlers:
        handler.close()
    audit_logger.handlers.clear()
    audit_logger.propagate = True


class TestAuditLog:
    """Tests for log_reconcile and get_recent_records."""

    def test_record_round_trip(self):
        record = ReconcileRecord(timestamp="2026-10-18T00:00:00+00:00", hostname="ap-1", success=True)

        assert ReconcileRecord.from_json(record.to_json()) == record

    def test_records_written_and_read(self, audit_file):
        log_reconcile("ap-1", success=True, reset_required=True, state="done")
        log_reconcile("ap-1", success=False, state="located",
                      error_kind="vlan_query", error="may need to reboot")

        records = get_recent_records(str(audit_file))

        assert [r.success for r in records] == [False, True]  # most recent first
        assert records[0].error_kind == "vlan_query"
        assert records[1].reset_required is True

    def test_limit_and_malformed_lines(self, audit_file):
        for _ in range(3):
            log_reconcile("ap-1", success=True)
        with open(audit_file, "a") as f:
            f.write("not json\n")

        assert len(get_recent_records(str(audit_file), limit=2)) == 2
        assert len(get_recent_records(str(audit_file))) == 3

    def test_missing_file(self, tmp_path):
        assert get_recent_records(str(tmp_path / "none.log")) == []

    def test_long_error_truncated(self, audit_file):
        record = log_reconcile("ap-1", success=False, error="x" * 5000)

        assert len(record.error) == 1000

    def test_reconciler_writes_one_record(self, reconciler, make_tree, audit_file):
        """Each handled push leaves exactly one audit line."""
        reconciler.handle_config_update(make_tree())
        reconciler.handle_config_update("bad")

        records = get_recent_records(str(audit_file))
        assert len(records) == 2
        assert records[0].error_kind == "shape_mismatch"
        assert records[0].state == "idle"
        assert records[1].success is True
        assert records[1].hostname == "ap-1"
