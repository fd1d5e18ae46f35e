"""
Splits tweet IDs into lookup-sized batches
"""
from typing import Iterable, List

# Max number of IDs accepted by GET statuses/lookup
MAX_LOOKUP_BATCH = 100


def partition(ids: Iterable[int], max_batch: int = MAX_LOOKUP_BATCH) -> List[List[int]]:
    """
    Split IDs into consecutive batches, preserving order

    Args:
        ids: Tweet IDs in the order they were requested
        max_batch: Largest batch allowed (the API caps lookups at 100)

    Returns:
        List of non-empty batches; empty input gives no batches
    """
    if max_batch < 1:
        raise ValueError(f"Batch size must be at least 1, got {max_batch}")
    ids = list(ids)
    return [ids[i:i + max_batch] for i in range(0, len(ids), max_batch)]
