"""
Twitter/X lookup integration using tweepy
"""
import os
import time
from typing import List, Mapping, Optional

import tweepy

from json_projector import to_json
from rate_limited_fetcher import BatchLookupError, LookupResult, RateLimitStatus

LOOKUP_RESOURCE = "/statuses/lookup"


def rate_limit_from_headers(headers: Optional[Mapping[str, str]],
                            now: Optional[float] = None) -> Optional[RateLimitStatus]:
    """
    Read the quota the server reports in a response's headers

    Args:
        headers: Response headers (x-rate-limit-remaining, x-rate-limit-reset)
        now: Current epoch time, defaults to time.time()

    Returns:
        RateLimitStatus, or None if the headers are missing or unreadable
    """
    if not headers:
        return None
    remaining = headers.get("x-rate-limit-remaining")
    reset = headers.get("x-rate-limit-reset")
    if remaining is None or reset is None:
        return None

    try:
        remaining_calls = int(remaining)
        reset_at = int(reset)
    except (TypeError, ValueError):
        return None

    now = time.time() if now is None else now
    return RateLimitStatus(remaining_calls, max(0, reset_at - int(now)))


class TwitterBot:
    """Handles all Twitter/X API lookups"""

    def __init__(self, proxy: Optional[str] = None, tweet_mode: str = "extended"):
        """
        Initialize X API client with credentials from environment

        Args:
            proxy: Optional HTTP proxy URL (falls back to X_PROXY_URL)
            tweet_mode: "extended" so long tweets come back with full_text
        """
        self.api_key = os.getenv("X_API_KEY")
        self.api_secret = os.getenv("X_API_SECRET")
        self.access_token = os.getenv("X_ACCESS_TOKEN")
        self.access_token_secret = os.getenv("X_ACCESS_TOKEN_SECRET")
        self.proxy = proxy or os.getenv("X_PROXY_URL")
        self.tweet_mode = tweet_mode

        # Validate credentials
        if not all([self.api_key, self.api_secret, self.access_token,
                    self.access_token_secret]):
            raise ValueError("Missing X API credentials. Check your .env file.")

        # statuses/lookup is only on the v1.1 API; we handle rate limits ourselves
        auth = tweepy.OAuth1UserHandler(
            self.api_key,
            self.api_secret,
            self.access_token,
            self.access_token_secret
        )
        self.api = tweepy.API(auth, proxy=self.proxy, wait_on_rate_limit=False)

    def lookup_batch(self, tweet_ids: List[int]) -> LookupResult:
        """
        Look up to 100 tweets in one call

        Args:
            tweet_ids: IDs to fetch (max 100)

        Returns:
            (raw JSON of each tweet found, RateLimitStatus or None)

        Raises:
            BatchLookupError: If the call failed, with the rate-limit status
                of the failed response when there was one
        """
        try:
            statuses = self.api.lookup_statuses(tweet_ids, tweet_mode=self.tweet_mode)
        except tweepy.HTTPException as e:
            headers = getattr(e.response, "headers", None)
            raise BatchLookupError(str(e), rate_limit_from_headers(headers)) from e
        except tweepy.TweepyException as e:
            raise BatchLookupError(str(e)) from e

        # NB use Twitter's raw JSON, not tweepy's model objects
        documents = [to_json(status._json) for status in statuses]

        last_response = getattr(self.api, "last_response", None)
        return documents, rate_limit_from_headers(getattr(last_response, "headers", None))

    def lookup_quota(self) -> Optional[dict]:
        """
        Get the current statuses/lookup quota

        Returns:
            Dict with 'limit', 'remaining' and 'reset', or None if failed
        """
        try:
            limits = self.api.rate_limit_status(resources="statuses")
            return limits["resources"]["statuses"][LOOKUP_RESOURCE]
        except tweepy.TweepyException as e:
            print(f"✗ Error fetching rate limit status: {e}")
            return None
        except KeyError:
            print(f"✗ No rate limit reported for {LOOKUP_RESOURCE}")
            return None
