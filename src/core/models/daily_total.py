"""
DailyTotal model representing the summed views of one entity on one day.
"""

from pydantic import BaseModel, Field


class DailyTotal(BaseModel):
    """
    Sum of all hourly view counts of an entity for a single day.

    Attributes:
        day: Date as YYYYMMDD
        total_views: Sum of the hourly view counts seen for that day
    """

    day: str = Field(..., pattern=r"^[0-9]{8}$")
    total_views: int = Field(..., ge=0)
