"""
Test suite for splitting tweet IDs into lookup batches (src/batching.py).
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from batching import MAX_LOOKUP_BATCH, partition


class TestPartition:
    """Tests for partition()."""

    def test_empty_input_gives_no_batches(self):
        assert partition([]) == []

    @pytest.mark.parametrize("count, expected_batches, last_size", [
        (1, 1, 1),
        (99, 1, 99),
        (100, 1, 100),
        (101, 2, 1),
        (250, 3, 50),
        (300, 3, 100),
    ])
    def test_batch_counts_and_last_batch_size(self, count, expected_batches, last_size):
        ids = list(range(1000, 1000 + count))
        batches = partition(ids)
        assert len(batches) == expected_batches
        assert len(batches[-1]) == last_size
        assert all(len(b) == MAX_LOOKUP_BATCH for b in batches[:-1])

    def test_batches_reassemble_to_original_order(self):
        ids = [927673379238313984 - i * 7 for i in range(237)]
        batches = partition(ids)
        assert [tweet_id for batch in batches for tweet_id in batch] == ids

    def test_no_empty_batches(self):
        assert all(batch for batch in partition(list(range(200)), 50))

    def test_custom_batch_size(self):
        assert partition([1, 2, 3, 4, 5], max_batch=2) == [[1, 2], [3, 4], [5]]

    def test_accepts_any_iterable(self):
        assert partition(iter([1, 2, 3]), max_batch=2) == [[1, 2], [3]]

    def test_does_not_modify_input(self):
        ids = [1, 2, 3]
        batches = partition(ids, max_batch=3)
        batches[0].append(4)
        assert ids == [1, 2, 3]

    @pytest.mark.parametrize("max_batch", [0, -1])
    def test_invalid_batch_size_raises(self, max_batch):
        with pytest.raises(ValueError, match="at least 1"):
            partition([1, 2], max_batch=max_batch)
