"""
Batch output writers.
"""

from .diagnostics_writer import DiagnosticsWriter
from .spike_writer import SpikeResultWriter

__all__ = [
    "SpikeResultWriter",
    "DiagnosticsWriter",
]
