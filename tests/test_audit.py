"""
Tests for the JSON-lines audit trail.
"""

import json

from vulnlens.audit.logger import AuditLogger
from vulnlens.models.scan_models import AuditEntry


def test_entries_are_appended_as_json_lines(tmp_path):
    audit = AuditLogger(tmp_path / "audit.jsonl")
    audit.log(AuditEntry(event="analysis", file_name="A.java", issues_found=3, outcome="complete"))
    audit.log(AuditEntry(event="apply_fix", file_name="A.java", line_number=4, outcome="applied"))

    lines = (tmp_path / "audit.jsonl").read_text().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["event"] == "analysis"
    assert first["issues_found"] == 3
    assert first["timestamp"].endswith("Z")
    assert "line_number" not in first
    assert json.loads(lines[1])["line_number"] == 4


def test_recent_filters_and_limits(tmp_path):
    audit = AuditLogger(tmp_path / "audit.jsonl")
    for n in range(5):
        audit.log(AuditEntry(event="analysis", file_name=f"{n}.java"))
    audit.log(AuditEntry(event="suggestions", suggestions=2))

    assert [e["file_name"] for e in audit.recent(2, event="analysis")] == ["3.java", "4.java"]
    assert audit.recent(1)[0]["event"] == "suggestions"


def test_malformed_lines_are_skipped(tmp_path):
    path = tmp_path / "audit.jsonl"
    path.write_text('{"event": "analysis"}\nnot json\n\n')

    assert AuditLogger(path).summary() == {"events": {"analysis": 1}, "apply_outcomes": {}}


def test_missing_log_is_empty(tmp_path):
    audit = AuditLogger(tmp_path / "none.jsonl")
    assert audit.recent() == []
    assert audit.summary() == {"events": {}, "apply_outcomes": {}}


def test_unwritable_log_does_not_raise(tmp_path):
    audit = AuditLogger(tmp_path / "missing-dir" / "audit.jsonl")
    audit.log(AuditEntry(event="analysis"))
    assert audit.recent() == []
