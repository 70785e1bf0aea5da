"""
OrderedEntitySeries model: all hourly tuples of one entity in chronological order.

The spike scan trusts the order in which tuples arrive. This model makes that
precondition explicit: build it with from_sorted() (checked, or trusted when
the caller guarantees it) or with from_unsorted() (sorted defensively).
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field, model_validator

from .normalized_tuple import NormalizedTuple


class OrderingViolationError(ValueError):
    """Raised when an entity's tuples are not ascending by (day, hour) or mix entity keys."""

    def __init__(self, entity_key: str, position: int, message: str):
        self.entity_key = entity_key
        self.position = position
        self.message = message
        super().__init__(f"[{entity_key}] tuple {position}: {message}")


def check_ordering(entity_key: str, tuples: list[NormalizedTuple]) -> None:
    """
    Verify that tuples belong to entity_key and are ascending by (day, hour).

    Equal (day, hour) positions are allowed; duplicated hours are summed later.

    Raises:
        OrderingViolationError: On the first offending tuple
    """
    previous = None
    for position, item in enumerate(tuples):
        if item.entity_key != entity_key:
            raise OrderingViolationError(
                entity_key, position, f"belongs to entity {item.entity_key!r}"
            )
        if previous is not None and item.sort_key < previous:
            raise OrderingViolationError(
                entity_key,
                position,
                f"{item.day} {item.hour} arrives after {previous[0]} {previous[1]}",
            )
        previous = item.sort_key


class OrderedEntitySeries(BaseModel):
    """
    Hourly tuples of a single entity, ascending by (day, hour).

    Attributes:
        entity_key: Key shared by every tuple
        tuples: The entity's tuples in chronological order
    """

    entity_key: str = Field(..., min_length=1)
    tuples: list[NormalizedTuple] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_chronological(self):
        check_ordering(self.entity_key, self.tuples)
        return self

    @classmethod
    def from_sorted(
        cls,
        entity_key: str,
        tuples: Iterable[NormalizedTuple],
        verify: bool = True
    ) -> "OrderedEntitySeries":
        """
        Wrap tuples that the grouping stage delivered in chronological order.

        Args:
            entity_key: Entity the tuples belong to
            tuples: Tuples ascending by (day, hour)
            verify: Check the order instead of trusting it

        Returns:
            OrderedEntitySeries

        Raises:
            OrderingViolationError: If verify is set and the order is broken
            ValueError: If tuples is empty
        """
        tuples = list(tuples)
        if not tuples:
            raise ValueError(f"No tuples for entity {entity_key!r}")
        if verify:
            check_ordering(entity_key, tuples)
        return cls.model_construct(entity_key=entity_key, tuples=tuples)

    @classmethod
    def from_unsorted(
        cls,
        entity_key: str,
        tuples: Iterable[NormalizedTuple]
    ) -> "OrderedEntitySeries":
        """Sort tuples by (day, hour) before wrapping them."""
        ordered = sorted(tuples, key=lambda item: item.sort_key)
        return cls.from_sorted(entity_key, ordered, verify=True)
