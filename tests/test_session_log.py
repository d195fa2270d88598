"""Tests for mailrepl.session_log -- the append-only session log."""

from __future__ import annotations

from mailrepl.session_log import LogEntry, SessionLog


class TestSessionLog:
    """Entries are appended in order and never rewritten."""

    def test_starts_empty(self) -> None:
        log = SessionLog()
        assert len(log) == 0
        assert log.text == ""
        assert log.submitted() == []

    def test_records_inputs_and_outputs_in_order(self) -> None:
        log = SessionLog()
        log.record_input("folder list")
        log.record_output("INBOX\nSent")
        log.record_error("oops")
        assert log.lines == ["folder list", "INBOX", "Sent", "oops"]
        assert log.text == "folder list\nINBOX\nSent\noops"
        assert [e.kind for e in log.entries] == ["input", "output", "output", "error"]

    def test_submitted_only_returns_inputs(self) -> None:
        log = SessionLog()
        log.record_input("a")
        log.record_output("x")
        log.record_input("b")
        assert log.submitted() == ["a", "b"]

    def test_empty_output_is_one_blank_line(self) -> None:
        log = SessionLog()
        log.record_output("")
        assert log.entries == (LogEntry("output", ""),)

    def test_since_returns_new_entries(self) -> None:
        log = SessionLog()
        log.record_input("a")
        mark = len(log)
        log.record_output("b")
        assert log.since(mark) == (LogEntry("output", "b"),)

    def test_entries_is_a_snapshot(self) -> None:
        log = SessionLog()
        log.record_input("a")
        snapshot = log.entries
        log.record_input("b")
        assert len(snapshot) == 1
