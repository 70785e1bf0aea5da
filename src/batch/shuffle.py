"""
Grouping stage between extraction and aggregation.

Implements the contract the SpikeAggregator relies on:
- every tuple of an entity lands in the same partition
- within a partition tuples are sorted by (entity_key, day, hour)
- each entity is handed over exactly once, with all of its tuples

This is a secondary sort: the composite key (entity_key, day, hour) is
partitioned on entity_key alone and sorted on the whole key.
"""

from collections.abc import Iterable, Iterator
from itertools import groupby

from pyspark import RDD
from pyspark.rdd import portable_hash

from src.core.models import NormalizedTuple

ShuffleKey = tuple[str, str, str]
ShufflePair = tuple[ShuffleKey, int]


def to_shuffle_pair(record: NormalizedTuple) -> ShufflePair:
    """Key a tuple by (entity_key, day, hour) with its view count as value."""
    return (record.entity_key, record.day, record.hour), record.view_count


def partition_by_entity(key: ShuffleKey) -> int:
    """Hash only the entity part of the composite key."""
    return portable_hash(key[0])


def group_sorted_pairs(pairs: Iterable[ShufflePair]) -> Iterator[tuple[str, list[NormalizedTuple]]]:
    """
    Group consecutive pairs of the same entity.

    Args:
        pairs: Pairs sorted by composite key, as found in one partition

    Yields:
        (entity_key, tuples ascending by (day, hour))
    """
    for entity_key, run in groupby(pairs, key=lambda pair: pair[0][0]):
        # Already validated during extraction
        yield entity_key, [
            NormalizedTuple.model_construct(
                entity_key=entity_key, day=day, hour=hour, view_count=view_count
            )
            for (_, day, hour), view_count in run
        ]


def group_by_entity(pairs: RDD, num_partitions: int) -> RDD:
    """
    Group shuffle pairs by entity with chronologically sorted values.

    Args:
        pairs: RDD of ShufflePair
        num_partitions: Number of output partitions

    Returns:
        RDD of (entity_key, list[NormalizedTuple])
    """
    sorted_pairs = pairs.repartitionAndSortWithinPartitions(
        numPartitions=num_partitions,
        partitionFunc=partition_by_entity,
        ascending=True,
    )
    return sorted_pairs.mapPartitions(group_sorted_pairs, preservesPartitioning=True)
