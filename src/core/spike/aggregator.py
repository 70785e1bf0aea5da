"""
SpikeAggregator: per-entity daily collapse followed by the windowed spike scan.
"""

from collections.abc import Iterable

from src.core.models import NormalizedTuple, OrderedEntitySeries, SpikeResult

from .daily_collapse import collapse_daily_totals
from .window_scan import LOOKBACK_DAYS, find_largest_spike


class SpikeAggregator:
    """
    Computes the SpikeResult of one entity from its chronologically ordered tuples.

    Every call builds its own accumulators, so results for one entity can
    never leak into another, even when one worker aggregates many entities.
    """

    def __init__(
        self,
        lookback_days: int = LOOKBACK_DAYS,
        verify_ordering: bool = True,
        defensive_sort: bool = False
    ):
        """
        Initialize the aggregator.

        Args:
            lookback_days: Offsets scanned per day by the windowed scan
            verify_ordering: Check that grouped tuples arrive ascending by (day, hour)
            defensive_sort: Sort grouped tuples instead of trusting their order
        """
        if lookback_days < 1:
            raise ValueError(f"lookback_days must be positive, got {lookback_days}")
        self.lookback_days = lookback_days
        self.verify_ordering = verify_ordering
        self.defensive_sort = defensive_sort

    def aggregate(self, series: OrderedEntitySeries) -> SpikeResult:
        """
        Find the largest spike of one entity.

        Args:
            series: The entity's tuples ascending by (day, hour)

        Returns:
            SpikeResult with the earlier day, the later day and the increase
        """
        daily_totals = collapse_daily_totals(series.tuples)
        first, second, magnitude = find_largest_spike(
            [daily.total_views for daily in daily_totals],
            lookback_days=self.lookback_days,
        )
        return SpikeResult(
            entity_key=series.entity_key,
            day1=daily_totals[first].day,
            day2=daily_totals[second].day,
            magnitude=magnitude,
        )

    def aggregate_group(
        self,
        entity_key: str,
        tuples: Iterable[NormalizedTuple]
    ) -> SpikeResult:
        """
        Aggregate a group delivered by the shuffle stage.

        Args:
            entity_key: Group key
            tuples: All tuples of the entity, as delivered

        Returns:
            SpikeResult for the entity

        Raises:
            OrderingViolationError: If verification is on and the group is out of order
        """
        if self.defensive_sort:
            series = OrderedEntitySeries.from_unsorted(entity_key, tuples)
        else:
            series = OrderedEntitySeries.from_sorted(
                entity_key, tuples, verify=self.verify_ordering
            )
        return self.aggregate(series)
