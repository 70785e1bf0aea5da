"""
SpikeResult model representing the largest daily increase found for an entity.
"""

from pydantic import BaseModel, Field


class SpikeResult(BaseModel):
    """
    Largest day-over-day increase of an entity's daily views.

    When the entity never increases, day1 and day2 both name the first day
    and magnitude is 0.

    Attributes:
        entity_key: Language code + page title
        day1: Earlier day of the pair (YYYYMMDD)
        day2: Later day of the pair (YYYYMMDD)
        magnitude: day2 total minus day1 total, never negative
    """

    entity_key: str = Field(..., min_length=1)
    day1: str
    day2: str
    magnitude: int = Field(..., ge=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "entity_key": "enMain_Page",
                "day1": "20140603",
                "day2": "20140605",
                "magnitude": 150
            }
        }

    @property
    def value(self) -> str:
        return f"{self.day1} {self.day2} {self.magnitude}"

    def to_output_line(self, separator: str = "\t") -> str:
        """
        Render the output record: entity key, separator, "day1 day2 magnitude".

        Args:
            separator: Key/value separator (tab, as in Hadoop text output)

        Returns:
            Output line without trailing newline
        """
        return f"{self.entity_key}{separator}{self.value}"

    @classmethod
    def from_output_line(cls, line: str, separator: str = "\t") -> "SpikeResult":
        """
        Parse a line produced by to_output_line.

        Raises:
            ValueError: If the line does not have the expected layout
        """
        entity_key, sep, value = line.rstrip("\n").partition(separator)
        if not sep:
            raise ValueError(f"Missing separator in output line: {line!r}")
        fields = value.split(" ")
        if len(fields) != 3:
            raise ValueError(f"Expected 'day1 day2 magnitude', got {value!r}")
        day1, day2, magnitude = fields
        return cls(entity_key=entity_key, day1=day1, day2=day2, magnitude=int(magnitude))
