"""
Errors raised while parsing raw pagecount records.

Parsers raise ExtractionError; the Extractor turns it into an ExtractionResult
so that no malformed record ever escapes as an exception.
"""

from src.core.models.extraction_result import FailureReason


class ExtractionError(Exception):
    """Raised when a raw line or its source file name cannot be parsed."""

    def __init__(self, reason: FailureReason, detail: str):
        self.reason = reason
        self.detail = detail
        super().__init__(f"[{reason}] {detail}")
