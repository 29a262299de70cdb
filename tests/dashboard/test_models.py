"""Tests for the monitoring record model."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from scrapewatch.dashboard.models import MonitoringRecord, parse_records


def wire_record(**overrides):
    record = {
        "id": "e9916034",
        "date_time": "2025-05-12T13:36:33.464778",
        "source": "Greene Tax",
        "total_records": 6,
        "success_status": True,
        "error_message": "",
        "created_at": "2025-05-12T17:36:34.157838Z",
    }
    record.update(overrides)
    return record


class TestMonitoringRecord:
    """Tests for parsing the wire format."""

    def test_parse_wire_names(self):
        record = MonitoringRecord.model_validate(wire_record())

        assert record.id == "e9916034"
        assert record.timestamp == datetime(2025, 5, 12, 13, 36, 33, 464778)
        assert record.source == "Greene Tax"
        assert record.total_records == 6
        assert record.success_status is True
        assert record.created_at is not None

    def test_camel_case_aliases(self):
        record = MonitoringRecord.model_validate(
            {
                "id": "1",
                "timestamp": "2025-05-12T14:00:00",
                "source": "Sheetz 722",
                "totalRecords": 12,
                "successStatus": "True",
            }
        )
        assert record.total_records == 12
        assert record.success_status is True
        assert record.error_message == ""

    @pytest.mark.parametrize(
        "raw,expected",
        [("True", True), ("false", False), ("1", True), ("no", False), (" yes ", True), (False, False)],
    )
    def test_boolean_like_status(self, raw, expected):
        record = MonitoringRecord.model_validate(wire_record(success_status=raw))
        assert record.success_status is expected

    def test_numeric_id_coerced(self):
        record = MonitoringRecord.model_validate(wire_record(id=42))
        assert record.id == "42"

    def test_null_error_message(self):
        record = MonitoringRecord.model_validate(wire_record(error_message=None))
        assert record.error_message == ""

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            MonitoringRecord.model_validate(wire_record(total_records=-1))

    def test_records_are_immutable(self):
        record = MonitoringRecord.model_validate(wire_record())
        with pytest.raises(ValidationError):
            record.total_records = 99

    def test_serializes_wire_names(self):
        data = MonitoringRecord.model_validate(wire_record()).model_dump(mode="json", by_alias=True)
        assert data["date_time"] == "2025-05-12T13:36:33.464778"
        assert data["total_records"] == 6
        assert "timestamp" not in data

    def test_sort_key_normalizes_timezones(self):
        aware = MonitoringRecord.model_validate(wire_record(date_time="2025-05-12T14:00:00+02:00"))
        naive = MonitoringRecord.model_validate(wire_record(date_time="2025-05-12T13:00:00"))

        assert aware.sort_key == datetime(2025, 5, 12, 12, 0, 0)
        assert naive.sort_key > aware.sort_key


class TestParseRecords:
    def test_list_payload(self):
        records = parse_records([wire_record(), wire_record(id="2")])
        assert [r.id for r in records] == ["e9916034", "2"]

    def test_object_payload_rejected(self):
        with pytest.raises(ValidationError):
            parse_records({"error": "nope"})
