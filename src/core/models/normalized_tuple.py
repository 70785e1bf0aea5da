"""
NormalizedTuple model representing one hourly view count for one entity.
"""

from pydantic import BaseModel, Field


class NormalizedTuple(BaseModel):
    """
    Hourly view count for a single (language, page) entity.

    Attributes:
        entity_key: Two-letter language code followed by the page title, no separator
        day: Collection date as YYYYMMDD, taken from the source file name
        hour: Collection hour as "00"-"23", taken from the source file name
        view_count: Views of the page during that hour
    """

    entity_key: str = Field(..., min_length=3)
    day: str = Field(..., pattern=r"^[0-9]{8}$")
    hour: str = Field(..., pattern=r"^([01][0-9]|2[0-3])$")
    view_count: int = Field(..., ge=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "entity_key": "enMain_Page",
                "day": "20140601",
                "hour": "00",
                "view_count": 156
            }
        }

    @property
    def sort_key(self) -> tuple[str, str]:
        """Chronological position of this tuple within its entity."""
        return (self.day, self.hour)
