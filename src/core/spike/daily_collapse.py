"""
Daily collapse: sum an entity's hourly view counts into one total per day.
"""

from collections.abc import Iterable

from src.core.models import DailyTotal, NormalizedTuple


def collapse_daily_totals(tuples: Iterable[NormalizedTuple]) -> list[DailyTotal]:
    """
    Collapse hourly tuples into daily totals.

    Days appear in the order they are first encountered, so a day-ordered
    input yields ascending days. Repeated hours of the same day are added,
    never overwritten. The accumulator is local to each call.

    Args:
        tuples: Hourly tuples of a single entity

    Returns:
        One DailyTotal per distinct day
    """
    days: list[str] = []
    totals: list[int] = []
    positions: dict[str, int] = {}

    for item in tuples:
        position = positions.get(item.day)
        if position is None:
            positions[item.day] = len(days)
            days.append(item.day)
            totals.append(item.view_count)
        else:
            totals[position] += item.view_count

    return [DailyTotal(day=day, total_views=total) for day, total in zip(days, totals)]
