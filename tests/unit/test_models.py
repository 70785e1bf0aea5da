"""
Unit tests for Pydantic data models.

Tests core models for validation and constraint enforcement.
"""

import pytest
from pydantic import ValidationError

from src.core.models import (
    DailyTotal,
    ExtractionDiagnostic,
    ExtractionResult,
    NormalizedTuple,
    OrderedEntitySeries,
    OrderingViolationError,
    SpikeResult,
)


class TestNormalizedTuple:
    """Tests for NormalizedTuple model"""

    def test_valid_tuple(self):
        """Test creating a valid NormalizedTuple"""
        item = NormalizedTuple(entity_key="enMain_Page", day="20140601", hour="00", view_count=156)
        assert item.sort_key == ("20140601", "00")

    @pytest.mark.parametrize("day", ["2014061", "2014-06-01", "201406011", "abcdefgh"])
    def test_invalid_day(self, day):
        """Test that a day other than YYYYMMDD raises ValidationError"""
        with pytest.raises(ValidationError) as exc_info:
            NormalizedTuple(entity_key="enMain_Page", day=day, hour="00", view_count=1)
        assert "day" in str(exc_info.value)

    @pytest.mark.parametrize("hour", ["24", "7", "000", "xx"])
    def test_invalid_hour(self, hour):
        """Test that an hour outside 00-23 raises ValidationError"""
        with pytest.raises(ValidationError):
            NormalizedTuple(entity_key="enMain_Page", day="20140601", hour=hour, view_count=1)

    def test_negative_view_count(self):
        """Test that a negative view count raises ValidationError"""
        with pytest.raises(ValidationError) as exc_info:
            NormalizedTuple(entity_key="enMain_Page", day="20140601", hour="00", view_count=-1)
        assert "view_count" in str(exc_info.value)

    def test_tuple_is_frozen(self):
        """Test that tuples cannot be mutated"""
        item = NormalizedTuple(entity_key="enMain_Page", day="20140601", hour="00", view_count=1)
        with pytest.raises(ValidationError):
            item.view_count = 2


class TestExtractionResult:
    """Tests for ExtractionResult model"""

    def test_extracted_result(self):
        item = NormalizedTuple(entity_key="enMain_Page", day="20140601", hour="00", view_count=1)
        result = ExtractionResult.of_tuple(item)
        assert result.is_extracted
        assert not result.is_failed
        assert result.record == item

    def test_failed_result(self):
        result = ExtractionResult.of_failure("malformed_record", "expected 4 fields, found 3")
        assert result.is_failed
        assert result.failure.reason == "malformed_record"
        assert result.record is None

    def test_filtered_result(self):
        result = ExtractionResult.filtered_out()
        assert result.status == "filtered"
        assert result.record is None
        assert result.failure is None

    def test_extracted_without_record_rejected(self):
        """Test that status=extracted requires a record"""
        with pytest.raises(ValidationError):
            ExtractionResult(status="extracted")

    def test_failed_without_failure_rejected(self):
        """Test that status=failed requires a failure"""
        with pytest.raises(ValidationError):
            ExtractionResult(status="failed")

    def test_unknown_reason_rejected(self):
        with pytest.raises(ValidationError):
            ExtractionResult.of_failure("disk_full", "nope")


class TestExtractionDiagnostic:
    """Tests for ExtractionDiagnostic model"""

    def test_json_round_trip(self):
        diagnostic = ExtractionDiagnostic(
            line="en Main_Page 42",
            source_file_name="pagecounts-20140601-000000.gz",
            reason="malformed_record",
            detail="expected 4 fields, found 3",
        )
        restored = ExtractionDiagnostic.model_validate_json(diagnostic.model_dump_json())
        assert restored == diagnostic
        assert restored.detected_at.tzinfo is not None


class TestDailyTotal:
    """Tests for DailyTotal model"""

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            DailyTotal(day="20140601", total_views=-5)


class TestSpikeResult:
    """Tests for SpikeResult model"""

    def test_output_line(self):
        """Test the key<TAB>"day1 day2 magnitude" output format"""
        result = SpikeResult(entity_key="enMain_Page", day1="20140603", day2="20140605", magnitude=150)
        assert result.value == "20140603 20140605 150"
        assert result.to_output_line() == "enMain_Page\t20140603 20140605 150"
        assert result.to_output_line(" ") == "enMain_Page 20140603 20140605 150"

    def test_parse_output_line(self):
        result = SpikeResult.from_output_line("deBerlin\t20140601 20140602 7\n")
        assert result == SpikeResult(entity_key="deBerlin", day1="20140601", day2="20140602", magnitude=7)

    def test_parse_output_line_without_separator(self):
        with pytest.raises(ValueError, match="separator"):
            SpikeResult.from_output_line("deBerlin 20140601 20140602 7")

    def test_negative_magnitude_rejected(self):
        with pytest.raises(ValidationError):
            SpikeResult(entity_key="enX", day1="20140601", day2="20140602", magnitude=-1)


class TestOrderedEntitySeries:
    """Tests for the ordered series precondition"""

    def test_from_sorted_accepts_chronological_tuples(self, make_tuple):
        tuples = [make_tuple("20140601", "00"), make_tuple("20140601", "01"), make_tuple("20140602", "00")]
        series = OrderedEntitySeries.from_sorted("enMain_Page", tuples)
        assert len(series.tuples) == 3
        assert series.entity_key == "enMain_Page"

    def test_duplicate_hours_are_allowed(self, make_tuple):
        tuples = [make_tuple("20140601", "05"), make_tuple("20140601", "05")]
        assert len(OrderedEntitySeries.from_sorted("enMain_Page", tuples).tuples) == 2

    def test_from_sorted_rejects_out_of_order_days(self, make_tuple):
        tuples = [make_tuple("20140602"), make_tuple("20140601")]
        with pytest.raises(OrderingViolationError) as exc_info:
            OrderedEntitySeries.from_sorted("enMain_Page", tuples)
        assert exc_info.value.position == 1
        assert exc_info.value.entity_key == "enMain_Page"

    def test_from_sorted_rejects_out_of_order_hours(self, make_tuple):
        tuples = [make_tuple("20140601", "03"), make_tuple("20140601", "02")]
        with pytest.raises(OrderingViolationError):
            OrderedEntitySeries.from_sorted("enMain_Page", tuples)

    def test_from_sorted_rejects_foreign_entity(self, make_tuple):
        tuples = [make_tuple("20140601"), make_tuple("20140602", entity_key="deMain_Page")]
        with pytest.raises(OrderingViolationError, match="deMain_Page"):
            OrderedEntitySeries.from_sorted("enMain_Page", tuples)

    def test_from_sorted_without_verification_trusts_caller(self, make_tuple):
        tuples = [make_tuple("20140602"), make_tuple("20140601")]
        series = OrderedEntitySeries.from_sorted("enMain_Page", tuples, verify=False)
        assert [item.day for item in series.tuples] == ["20140602", "20140601"]

    def test_from_unsorted_sorts_by_day_and_hour(self, make_tuple):
        tuples = [make_tuple("20140602", "01"), make_tuple("20140601", "23"), make_tuple("20140602", "00")]
        series = OrderedEntitySeries.from_unsorted("enMain_Page", tuples)
        assert [item.sort_key for item in series.tuples] == [
            ("20140601", "23"),
            ("20140602", "00"),
            ("20140602", "01"),
        ]

    def test_empty_series_rejected(self):
        with pytest.raises(ValueError, match="No tuples"):
            OrderedEntitySeries.from_sorted("enMain_Page", [])

    def test_constructor_validates_order(self, make_tuple):
        """Test that direct construction runs the same check"""
        with pytest.raises(ValidationError):
            OrderedEntitySeries(
                entity_key="enMain_Page",
                tuples=[make_tuple("20140602"), make_tuple("20140601")],
            )
