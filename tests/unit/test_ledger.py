"""
Tests for RunRange, OutcomeRecord and ResultLedger.
"""

import threading

import pytest

from consistency_probe.core.ledger import OutcomeRecord, ResultLedger, RunRange, make_record


class TestRunRange:
    def test_identifiers_are_half_open(self):
        assert list(RunRange(start=3, count=4).identifiers()) == [3, 4, 5, 6]

    def test_empty_range(self):
        r = RunRange(start=10, count=0)
        assert list(r.identifiers()) == []
        assert len(r) == 0
        assert r.stop == 10

    def test_negative_values_rejected(self):
        with pytest.raises(ValueError):
            RunRange(start=-1, count=3)
        with pytest.raises(ValueError):
            RunRange(start=0, count=-3)

    def test_frozen(self):
        r = RunRange(start=0, count=1)
        with pytest.raises(AttributeError):
            r.count = 5  # type: ignore


class TestOutcomeRecord:
    def test_from_exception(self):
        record = make_record("write", 4, {"http_status_code": 500}, RuntimeError("boom"))
        assert record.identifier == 4
        assert record.error == "boom"
        assert record.error_type == "RuntimeError"
        assert record.response == {"http_status_code": 500}

    def test_from_message(self):
        record = make_record("read", 2, None, "Did not get OK response")
        assert record.error == "Did not get OK response"
        assert record.error_type == "ProbeFailure"
        assert record.response is None

    def test_empty_exception_message_falls_back_to_repr(self):
        record = make_record("read", 1, None, KeyError())
        assert record.error == "KeyError()"

    def test_to_dict(self):
        record = OutcomeRecord(operation="read", identifier=1, error="x", error_type="E")
        assert record.to_dict() == {
            "identifier": 1,
            "response": None,
            "error": {"type": "E", "message": "x"},
        }

    def test_response_is_copied(self):
        response = {"ETag": "abc"}
        record = make_record("write", 0, response, "err")
        response["ETag"] = "changed"
        assert record.response == {"ETag": "abc"}


class TestResultLedger:
    def test_empty(self, ledger):
        assert ledger.write_failures == []
        assert ledger.read_failures == []
        assert ledger.counts() == {
            "write_failures": 0,
            "read_failures": 0,
            "writes_succeeded": 0,
            "reads_succeeded": 0,
        }

    def test_lists_are_independent(self, ledger):
        ledger.record_write_failure(1, None, RuntimeError("w"))
        ledger.record_read_failure(2, None, RuntimeError("r"))

        assert [r.identifier for r in ledger.write_failures] == [1]
        assert [r.identifier for r in ledger.read_failures] == [2]
        assert ledger.write_failures[0].operation == "write"
        assert ledger.read_failures[0].operation == "read"

    def test_returned_lists_are_copies(self, ledger):
        ledger.record_write_failure(1, None, "w")
        ledger.write_failures.clear()
        assert len(ledger.write_failures) == 1

    def test_success_tallies(self, ledger):
        ledger.record_write_success()
        ledger.record_write_success()
        ledger.record_read_success()
        assert ledger.writes_succeeded == 2
        assert ledger.reads_succeeded == 1

    def test_concurrent_appends_are_not_lost(self, ledger):
        def write_side():
            for i in range(500):
                ledger.record_write_failure(i, None, "w")

        def read_side():
            for i in range(500):
                ledger.record_read_failure(i, None, "r")
                ledger.record_read_success()

        threads = [threading.Thread(target=write_side), threading.Thread(target=read_side)]
        threads += [threading.Thread(target=write_side)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        counts = ledger.counts()
        assert counts["write_failures"] == 1000
        assert counts["read_failures"] == 500
        assert counts["reads_succeeded"] == 500
