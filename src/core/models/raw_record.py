"""
RawRecord model representing one input line plus the file it came from (ephemeral).
"""

from pydantic import BaseModel


class RawRecord(BaseModel):
    """
    One raw pagecount line and the name of the hourly file it was read from.

    Note: RawRecord is never validated beyond being text. Malformed content is
    detected by the Extractor so that a bad line never aborts a run.

    Attributes:
        line: Raw text "language_code page_title view_count total_bytes"
        source_file_name: Base name of the hourly dump, e.g. pagecounts-20140601-000000.gz
    """

    line: str
    source_file_name: str

    class Config:
        json_schema_extra = {
            "example": {
                "line": "en Main_Page 42 50043",
                "source_file_name": "pagecounts-20140601-000000.gz"
            }
        }
