"""
Spark batch processing module.
"""

from .pipeline import SpikePipeline
from .readers import PagecountReader
from .writers import DiagnosticsWriter, SpikeResultWriter

__all__ = [
    "SpikePipeline",
    "PagecountReader",
    "SpikeResultWriter",
    "DiagnosticsWriter",
]
