"""
Sequential, rate-limit-aware batch fetching of tweets
Respects the server's own view of the remaining quota and dozes when it runs low
"""
import sys
import time
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from batching import MAX_LOOKUP_BATCH, partition


class RateLimitStatus(NamedTuple):
    """Quota feedback attached to an API response"""
    remaining_calls: int
    seconds_until_reset: int


class BatchLookupError(Exception):
    """A lookup call failed; may still carry the server's rate-limit status"""

    def __init__(self, message: str, rate_limit: Optional[RateLimitStatus] = None):
        super().__init__(message)
        self.rate_limit = rate_limit


LookupResult = Tuple[List[str], Optional[RateLimitStatus]]
Lookup = Callable[[List[int]], LookupResult]


class RateLimitedFetcher:
    """Fetches tweets batch by batch, dozing when the quota is nearly spent"""

    def __init__(self, lookup: Lookup, batch_size: int = MAX_LOOKUP_BATCH,
                 min_remaining_calls: int = 10, min_seconds_until_reset: int = 10,
                 doze_margin_seconds: int = 5, sleep: Callable[[float], None] = time.sleep,
                 debug: bool = False):
        """
        Initialize the fetcher

        Args:
            lookup: Takes a batch of IDs, returns (raw JSON documents, RateLimitStatus or None)
            batch_size: IDs per lookup call (clamped to the API's cap of 100)
            min_remaining_calls: Doze when fewer calls than this remain
            min_seconds_until_reset: Doze when the window resets sooner than this
            doze_margin_seconds: Extra seconds slept past the server's reset countdown
            sleep: Blocking wait, swappable for tests
            debug: Print per-batch progress
        """
        self.lookup = lookup
        self.batch_size = max(1, min(batch_size, MAX_LOOKUP_BATCH))
        self.min_remaining_calls = min_remaining_calls
        self.min_seconds_until_reset = min_seconds_until_reset
        self.doze_margin_seconds = doze_margin_seconds
        self.sleep = sleep
        self.debug = debug

        self.fetched_count = 0
        self.failed_batches: List[List[int]] = []

    def fetch(self, ids: Iterable[int]) -> Iterator[str]:
        """
        Lazily yield the raw JSON of each tweet, batch after batch

        A failed batch is reported and skipped (never retried); the run carries
        on with the next one. Stopping iteration stops further API calls.

        Args:
            ids: Tweet IDs in the order wanted

        Yields:
            Raw JSON documents in the order the API returned them
        """
        batches = partition(ids, self.batch_size)

        for number, batch in enumerate(batches, 1):
            if self.debug:
                print(f"📡 Looking up batch {number}/{len(batches)} ({len(batch)} IDs)...",
                      file=sys.stderr)

            try:
                documents, rate_limit = self.lookup(batch)
            except Exception as e:
                print(f"✗ Failed to fetch batch {number}/{len(batches)}: {e}", file=sys.stderr)
                print("   Attempting to continue...", file=sys.stderr)
                self.failed_batches.append(batch)
                rate_limit = getattr(e, "rate_limit", None)
                documents = []

            for document in documents:
                self.fetched_count += 1
                yield document

            # No doze after the last batch: there's no next call to protect
            if number < len(batches):
                self.maybe_doze(rate_limit)

    def should_doze(self, status: Optional[RateLimitStatus]) -> bool:
        """True if we're about to run out of calls or the window is about to roll over"""
        if status is None:
            return False
        return (status.seconds_until_reset < self.min_seconds_until_reset
                or status.remaining_calls < self.min_remaining_calls)

    def maybe_doze(self, status: Optional[RateLimitStatus]) -> float:
        """
        Sleep through the rest of the rate-limit window if the quota is nearly spent

        Returns:
            Seconds slept (0 if no doze was needed)
        """
        if not self.should_doze(status):
            return 0

        until_reset = max(0, status.seconds_until_reset) + self.doze_margin_seconds
        print(f"😴 Rate limit reached. Waiting {until_reset} seconds starting at "
              f"{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}...", file=sys.stderr)
        self.sleep(until_reset)
        print("   Resuming...", file=sys.stderr)
        return until_reset
