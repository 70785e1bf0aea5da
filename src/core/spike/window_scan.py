"""
Windowed spike scan over an entity's daily totals.

For each day i the scan compares v[i] against v[i - j] for j in
0..min(LOOKBACK_DAYS, i) - 1. Only increases count (no absolute value), the
first of equal increases wins, and j == 0 compares a day with itself so it
never contributes.
"""

from collections.abc import Sequence

LOOKBACK_DAYS = 5


def find_largest_spike(
    totals: Sequence[int],
    lookback_days: int = LOOKBACK_DAYS
) -> tuple[int, int, int]:
    """
    Find the largest increase between a day and the days looked back from it.

    Args:
        totals: Daily totals in ascending day order
        lookback_days: Maximum number of offsets scanned per day

    Returns:
        Tuple of (earlier index, later index, magnitude). When no increase
        exists the result is (0, 0, 0).

    Raises:
        ValueError: If lookback_days is not positive
    """
    if lookback_days < 1:
        raise ValueError(f"lookback_days must be positive, got {lookback_days}")

    best_first, best_second, best_magnitude = 0, 0, 0

    for i in range(len(totals)):
        window = min(lookback_days, i)

        local_first, local_second, local_magnitude = 0, 0, 0
        for j in range(window):
            delta = totals[i] - totals[i - j]
            if delta > local_magnitude:
                local_first, local_second, local_magnitude = i - j, i, delta

        if local_magnitude > best_magnitude:
            best_first, best_second, best_magnitude = local_first, local_second, local_magnitude

    return best_first, best_second, best_magnitude
