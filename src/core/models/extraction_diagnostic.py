"""
ExtractionDiagnostic model representing a dropped record on the error channel.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .extraction_result import FailureReason


class ExtractionDiagnostic(BaseModel):
    """
    A record that failed extraction, with enough context to find and fix it.

    Attributes:
        line: Original input line
        source_file_name: File the line was read from
        reason: Failure category
        detail: Failure detail
        detected_at: When the failure was detected
    """

    line: str
    source_file_name: str
    reason: FailureReason
    detail: str
    detected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        json_schema_extra = {
            "example": {
                "line": "en Main_Page 42",
                "source_file_name": "pagecounts-20140601-000000.gz",
                "reason": "malformed_record",
                "detail": "expected 4 fields, found 3"
            }
        }
