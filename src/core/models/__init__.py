"""
Core data models for the pagecount spike pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .daily_total import DailyTotal
from .entity_series import OrderedEntitySeries, OrderingViolationError, check_ordering
from .extraction_diagnostic import ExtractionDiagnostic
from .extraction_result import ExtractionFailure, ExtractionResult, FailureReason
from .normalized_tuple import NormalizedTuple
from .raw_record import RawRecord
from .spike_result import SpikeResult

__all__ = [
    "RawRecord",
    "NormalizedTuple",
    "ExtractionResult",
    "ExtractionFailure",
    "FailureReason",
    "ExtractionDiagnostic",
    "OrderedEntitySeries",
    "OrderingViolationError",
    "check_ordering",
    "DailyTotal",
    "SpikeResult",
]
