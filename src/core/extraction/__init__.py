"""
Raw record extraction.

Parses hourly pagecount lines and dump file names into normalized tuples.
"""

from .errors import ExtractionError
from .extractor import LANGUAGE_CHAR_LENGTH, Extractor
from .line_parser import LineParser
from .source_name_parser import SourceNameParser

__all__ = [
    "Extractor",
    "ExtractionError",
    "LineParser",
    "SourceNameParser",
    "LANGUAGE_CHAR_LENGTH",
]
