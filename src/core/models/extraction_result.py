"""
ExtractionResult model representing the outcome of extracting one raw record (ephemeral).
"""

from typing import Literal

from pydantic import BaseModel, model_validator

from .normalized_tuple import NormalizedTuple

FailureReason = Literal["malformed_record", "malformed_source_identifier"]


class ExtractionFailure(BaseModel):
    """
    Why a raw record could not be extracted.

    Attributes:
        reason: "malformed_record" (bad line) or "malformed_source_identifier" (bad file name)
        detail: Human readable description of the problem
    """

    reason: FailureReason
    detail: str


class ExtractionResult(BaseModel):
    """
    Outcome of extracting a raw record.

    Exactly one of three outcomes:
    - extracted: record holds the normalized tuple
    - filtered: language code is not two characters, dropped without diagnostic
    - failed: failure explains why the record was dropped

    Attributes:
        status: "extracted", "filtered" or "failed"
        record: Normalized tuple when extracted
        failure: Failure reason and detail when failed
    """

    status: Literal["extracted", "filtered", "failed"]
    record: NormalizedTuple | None = None
    failure: ExtractionFailure | None = None

    @model_validator(mode="after")
    def check_status_consistency(self):
        """Validate that the payload matches the status."""
        if self.status == "extracted" and (self.record is None or self.failure is not None):
            raise ValueError("status=extracted requires a record and no failure")
        if self.status == "failed" and (self.failure is None or self.record is not None):
            raise ValueError("status=failed requires a failure and no record")
        if self.status == "filtered" and (self.record is not None or self.failure is not None):
            raise ValueError("status=filtered carries neither record nor failure")
        return self

    @classmethod
    def of_tuple(cls, record: NormalizedTuple) -> "ExtractionResult":
        return cls(status="extracted", record=record)

    @classmethod
    def filtered_out(cls) -> "ExtractionResult":
        return cls(status="filtered")

    @classmethod
    def of_failure(cls, reason: FailureReason, detail: str) -> "ExtractionResult":
        return cls(status="failed", failure=ExtractionFailure(reason=reason, detail=detail))

    @property
    def is_extracted(self) -> bool:
        return self.status == "extracted"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"
