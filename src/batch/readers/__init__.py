"""
Batch data source readers.
"""

from .pagecount_reader import PagecountReader

__all__ = [
    "PagecountReader",
]
