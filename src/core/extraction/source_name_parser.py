"""
SourceNameParser - reads the collection day and hour from a dump file name.

The data is stored in files with the following name format:
    pagecounts-${YEAR}${MONTH}${DAY}-${HOUR}0000.gz
For example:
    pagecounts-20140601-000000.gz
"""

import posixpath
import re

from .errors import ExtractionError

FILE_NAME_TOKEN_PATTERN = re.compile(r"-+")
FILE_NAME_TOKENS_COUNT = 3
PAGECOUNTS = "pagecounts"
DATE_INDEX = 1
HOUR_INDEX = 2
HOUR_LENGTH = 2
DATE_PATTERN = re.compile(r"^[0-9]{8}$")
HOUR_PATTERN = re.compile(r"^([01][0-9]|2[0-3])$")


class SourceNameParser:
    """
    Parses the hourly dump file name into (day, hour).

    Directory components are ignored, so a full path or URI is accepted.
    """

    def parse(self, source_file_name: str) -> tuple[str, str]:
        """
        Parse a source file name.

        Args:
            source_file_name: File name, path or URI of the hourly dump

        Returns:
            Tuple of (day as YYYYMMDD, hour as "00"-"23")

        Raises:
            ExtractionError: If the name does not follow the pagecounts convention
        """
        file_name = posixpath.basename(source_file_name)
        tokens = FILE_NAME_TOKEN_PATTERN.split(file_name)

        if len(tokens) != FILE_NAME_TOKENS_COUNT:
            raise ExtractionError(
                "malformed_source_identifier",
                f"expected {FILE_NAME_TOKENS_COUNT} '-' separated tokens in "
                f"{file_name!r}, found {len(tokens)}"
            )

        if tokens[0] != PAGECOUNTS:
            raise ExtractionError(
                "malformed_source_identifier",
                f"file name {file_name!r} does not start with {PAGECOUNTS!r}"
            )

        day = tokens[DATE_INDEX]
        # Drop minutes, seconds and extension from the hour token
        hour = tokens[HOUR_INDEX][:HOUR_LENGTH]

        if not DATE_PATTERN.match(day):
            raise ExtractionError(
                "malformed_source_identifier",
                f"date token {day!r} is not YYYYMMDD"
            )
        if not HOUR_PATTERN.match(hour):
            raise ExtractionError(
                "malformed_source_identifier",
                f"hour token {hour!r} is not 00-23"
            )

        return day, hour
