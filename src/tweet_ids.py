"""
Parsing of tweet IDs from the command line, files and status URLs
"""
import re
from typing import Iterable, List, Optional

MAX_TWEET_ID = 2 ** 63 - 1

_DIGITS = re.compile(r"\d+")
_STATUS_URL = re.compile(r"/status(?:es)?/(\d+)")


class InvalidTweetIdError(ValueError):
    """Raised when one or more requested tweet IDs can't be parsed"""

    def __init__(self, values: List[str]):
        self.values = values
        quoted = ", ".join(f'"{v}"' for v in values)
        super().__init__(f"Not a valid tweet ID or URL: {quoted}")


def parse_tweet_id(text: str) -> int:
    """
    Parse a tweet ID, or pull it out of a status URL

    Accepts "927673379238313984" as well as
    "https://twitter.com/ABCaustralia/status/927673379238313984?s=20".

    Args:
        text: ID or URL as typed or pasted

    Returns:
        The tweet ID

    Raises:
        InvalidTweetIdError: If no valid 64-bit ID can be found
    """
    candidate = text.strip()

    if "/" in candidate:
        match = _STATUS_URL.search(candidate)
        if match:
            candidate = match.group(1)
        else:
            candidate = candidate.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]

    if not _DIGITS.fullmatch(candidate) or int(candidate) > MAX_TWEET_ID:
        raise InvalidTweetIdError([text])
    return int(candidate)


def parse_tweet_ids(values: Iterable[str]) -> List[int]:
    """
    Parse every value, reporting all bad ones together

    Raises:
        InvalidTweetIdError: Naming every value that didn't parse
    """
    ids = []
    invalid = []
    for value in values:
        try:
            ids.append(parse_tweet_id(value))
        except InvalidTweetIdError:
            invalid.append(value)
    if invalid:
        raise InvalidTweetIdError(invalid)
    return ids


def read_ids_file(path: str) -> List[str]:
    """Read one ID (or URL) per non-empty line"""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def collect_ids(cli_values: Optional[Iterable[str]], ids_file: Optional[str] = None) -> List[int]:
    """
    Gather IDs from the command line, then from an IDs file, in order

    Everything is parsed before any API call is made, so a typo costs no quota.

    Raises:
        InvalidTweetIdError: If any value isn't a tweet ID or URL
        OSError: If the IDs file can't be read
    """
    values = list(cli_values or [])
    if ids_file:
        values.extend(read_ids_file(ids_file))
    return parse_tweet_ids(values)
