"""
LineParser - splits a raw pagecount line into its fields.

Data exists in the following format:
    language_code page_title view_count total_response_size
For example:
    en Main_Page 42 50043
Project qualified codes also occur (de.d is wiktionary) and are left to the
Extractor's language filter.
"""

import re
from typing import Any

from .errors import ExtractionError

INPUT_LINE_TOKEN_PATTERN = re.compile(r"\s+")
LINE_TOKENS_COUNT = 4
VIEW_COUNT_PATTERN = re.compile(r"^[0-9]+$")


class LineParser:
    """
    Parses one line of an hourly pagecount dump.

    Fails if:
    - The line does not split into exactly 4 whitespace separated fields
    - The view count is not a non-negative integer
    """

    def parse(self, line: str) -> dict[str, Any]:
        """
        Parse a raw line.

        Args:
            line: Raw input line

        Returns:
            Dictionary with language_code, page_title and view_count

        Raises:
            ExtractionError: If the line is malformed
        """
        stripped = line.strip()
        tokens = INPUT_LINE_TOKEN_PATTERN.split(stripped) if stripped else []
        if len(tokens) != LINE_TOKENS_COUNT:
            raise ExtractionError(
                "malformed_record",
                f"expected {LINE_TOKENS_COUNT} fields, found {len(tokens)}"
            )

        language_code, page_title, views, _total_bytes = tokens

        if not VIEW_COUNT_PATTERN.match(views):
            raise ExtractionError(
                "malformed_record",
                f"view count {views!r} is not a non-negative integer"
            )

        return {
            "language_code": language_code,
            "page_title": page_title,
            "view_count": int(views),
        }
