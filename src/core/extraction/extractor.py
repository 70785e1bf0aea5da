"""
Extractor for turning raw pagecount lines into normalized hourly tuples.

The extractor parses the line, parses the source file name, applies the
language filter and reports the outcome as an ExtractionResult. It is a pure
function of its input and holds no mutable state, so one instance can be
shipped to any number of Spark workers.
"""

from src.core.models import (
    ExtractionDiagnostic,
    ExtractionResult,
    NormalizedTuple,
    RawRecord,
)
from src.observability.logger import get_logger

from .errors import ExtractionError
from .line_parser import LineParser
from .source_name_parser import SourceNameParser

LANGUAGE_CHAR_LENGTH = 2

logger = get_logger(__name__)


class Extractor:
    """
    Extracts one NormalizedTuple (or nothing) from each RawRecord.

    Outcomes:
    - extracted: 4-field line, valid file name, two-letter language code
    - filtered: any other language code length (e.g. "de.d"), silently dropped
    - failed: malformed line or file name, dropped with a WARNING diagnostic
    """

    def __init__(self, language_code_length: int = LANGUAGE_CHAR_LENGTH):
        """
        Initialize the extractor.

        Args:
            language_code_length: Exact length a language code must have to be kept
        """
        self.language_code_length = language_code_length
        self.line_parser = LineParser()
        self.source_name_parser = SourceNameParser()

    def extract(self, record: RawRecord) -> ExtractionResult:
        """
        Extract a raw record.

        Never raises for bad input: failures are returned and logged.

        Args:
            record: Raw line and its source file name

        Returns:
            ExtractionResult with status extracted, filtered or failed
        """
        try:
            fields = self.line_parser.parse(record.line)
            day, hour = self.source_name_parser.parse(record.source_file_name)
        except ExtractionError as e:
            logger.warning(
                f"Dropping record: {e.detail}",
                extra={
                    "reason": e.reason,
                    "source_file_name": record.source_file_name,
                    "input_line": record.line,
                },
            )
            return ExtractionResult.of_failure(e.reason, e.detail)

        # Only process languages with two-letter codes
        if len(fields["language_code"]) != self.language_code_length:
            return ExtractionResult.filtered_out()

        return ExtractionResult.of_tuple(
            NormalizedTuple(
                entity_key=f"{fields['language_code']}{fields['page_title']}",
                day=day,
                hour=hour,
                view_count=fields["view_count"],
            )
        )

    def extract_line(self, line: str, source_file_name: str) -> ExtractionResult:
        """Convenience wrapper around extract() for plain strings."""
        return self.extract(RawRecord(line=line, source_file_name=source_file_name))

    @staticmethod
    def to_diagnostic(record: RawRecord, result: ExtractionResult) -> ExtractionDiagnostic:
        """
        Build the error channel entry for a failed extraction.

        Raises:
            ValueError: If the result is not a failure
        """
        if not result.is_failed:
            raise ValueError(f"Cannot build a diagnostic for status {result.status!r}")
        return ExtractionDiagnostic(
            line=record.line,
            source_file_name=record.source_file_name,
            reason=result.failure.reason,
            detail=result.failure.detail,
        )
