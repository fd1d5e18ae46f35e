"""
Fetch Tweets - fetches the raw JSON of tweets by ID, plus a sanitised copy
Main entry point for the command line
"""
import argparse
import contextlib
import sys
from typing import List, Optional

from dotenv import load_dotenv

from config_loader import load_config
from json_projector import project_json
from path_tree import build_path_tree, parse_field_list, render_tree, without_media
from rate_limited_fetcher import RateLimitedFetcher
from tweet_ids import InvalidTweetIdError, collect_ids
from twitter_bot import TwitterBot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fetch-tweets",
        description="Fetch the JSON for one or more tweets, optionally sanitised "
                    "down to a whitelist of fields"
    )
    parser.add_argument("-i", "--id", "--ids", dest="ids", action="extend", nargs="+",
                        default=[], help="ID or status URL of tweet(s) to fetch")
    parser.add_argument("-f", "--ids-file", help="File of tweet IDs to fetch (one per line)")
    parser.add_argument("--fields", help="Fields to keep in the sanitised JSON, "
                                         "comma or newline separated (e.g. 'id_str,user.screen_name')")
    parser.add_argument("--fields-file", help="File listing the fields to keep")
    parser.add_argument("--skip-media", action="store_true", default=None,
                        help="Leave images & videos out of the sanitised JSON")
    parser.add_argument("-o", "--output", default="-",
                        help="Where to write raw JSON, one tweet per line (default: stdout)")
    parser.add_argument("-s", "--sanitised-output",
                        help="Also write sanitised JSON here ('-' for stdout)")
    parser.add_argument("--sanitise-file",
                        help="Sanitise tweets already saved as JSON lines ('-' for stdin) "
                             "instead of fetching")
    parser.add_argument("-c", "--config", help="Path to config.yaml")
    parser.add_argument("-v", "--debug", "--verbose", dest="debug", action="store_true",
                        help="Debug mode")
    return parser


def resolve_fields(args: argparse.Namespace, config: dict) -> List[str]:
    """Fields to keep: --fields, then --fields-file, then config.yaml"""
    sanitise_config = config.get('sanitise', {})

    if args.fields:
        fields = parse_field_list(args.fields)
    elif args.fields_file:
        with open(args.fields_file, 'r', encoding='utf-8') as f:
            fields = parse_field_list(f.read())
    else:
        fields = list(sanitise_config.get('fields_to_keep') or [])

    skip_media = args.skip_media if args.skip_media is not None else sanitise_config.get('skip_media', False)
    if skip_media:
        fields = without_media(fields)
    return fields


def open_sink(path: Optional[str]):
    """Open an output path for writing; '-' (or nothing) means stdout"""
    if path is None or path == "-":
        return contextlib.nullcontext(sys.stdout)
    return open(path, 'w', encoding='utf-8')


def open_source(path: str):
    """Open saved JSON lines as bytes; '-' means stdin"""
    if path == "-":
        return contextlib.nullcontext(getattr(sys.stdin, 'buffer', sys.stdin))
    return open(path, 'rb')


def sanitise_saved(lines, tree, sink) -> int:
    """
    Sanitise JSON documents already on hand, one per line

    Lines are handed to project_json undecoded, so a line that isn't valid
    UTF-8 becomes an error envelope and the rest are still sanitised.
    """
    count = 0
    for line in lines:
        if not line.strip():
            continue
        print(project_json(line, tree), file=sink)
        count += 1
    return count


def run(args: argparse.Namespace) -> int:
    """Run the command; returns the process exit status"""
    config = load_config(args.config)

    try:
        tweet_ids = collect_ids(args.ids, args.ids_file)
        fields = resolve_fields(args, config)
    except InvalidTweetIdError as e:
        print(f"✗ ERROR: {e}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as e:
        print(f"✗ ERROR: Could not read input file: {e}", file=sys.stderr)
        return 2

    if not tweet_ids and not args.sanitise_file:
        print("✗ ERROR: No tweet IDs given (use --ids or --ids-file, "
              "or --sanitise-file to sanitise saved tweets)", file=sys.stderr)
        return 2
    if tweet_ids and args.sanitise_file:
        print("✗ ERROR: Give either tweet IDs to fetch or --sanitise-file, not both",
              file=sys.stderr)
        return 2

    tree = build_path_tree(fields)
    if args.debug:
        print("Fields to keep:", file=sys.stderr)
        print(render_tree(tree), file=sys.stderr)

    if args.sanitise_file:
        try:
            source = open_source(args.sanitise_file)
        except OSError as e:
            print(f"✗ ERROR: Could not read input file: {e}", file=sys.stderr)
            return 2
        with source as lines:
            try:
                with open_sink(args.sanitised_output) as sink:
                    count = sanitise_saved(lines, tree, sink)
            except OSError as e:
                print(f"✗ ERROR: Could not write output file: {e}", file=sys.stderr)
                return 2
        print(f"✓ Sanitised {count} tweets", file=sys.stderr)
        return 0

    api_config = config.get('api', {})
    try:
        twitter_bot = TwitterBot(
            proxy=api_config.get('proxy'),
            tweet_mode=api_config.get('tweet_mode', 'extended')
        )
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    fetch_config = config.get('fetch', {})
    fetcher = RateLimitedFetcher(
        twitter_bot.lookup_batch,
        batch_size=fetch_config.get('batch_size', 100),
        min_remaining_calls=fetch_config.get('min_remaining_calls', 10),
        min_seconds_until_reset=fetch_config.get('min_seconds_until_reset', 10),
        doze_margin_seconds=fetch_config.get('doze_margin_seconds', 5),
        debug=args.debug
    )

    with contextlib.ExitStack() as stack:
        # Open outputs before the first API call so a bad path costs no quota
        try:
            raw_sink = stack.enter_context(open_sink(args.output))
            sanitised_sink = None
            if args.sanitised_output:
                sanitised_sink = stack.enter_context(open_sink(args.sanitised_output))
        except OSError as e:
            print(f"✗ ERROR: Could not write output file: {e}", file=sys.stderr)
            return 2

        print(f"📡 Fetching {len(tweet_ids)} tweets...", file=sys.stderr)
        for raw_json in fetcher.fetch(tweet_ids):
            print(raw_json, file=raw_sink)
            if sanitised_sink is not None:
                print(project_json(raw_json, tree), file=sanitised_sink)

    print(f"✓ Fetched {fetcher.fetched_count} of {len(tweet_ids)} tweets", file=sys.stderr)
    if fetcher.failed_batches:
        print(f"⚠️  {len(fetcher.failed_batches)} batch(es) failed and were skipped", file=sys.stderr)
    return 0


def cli(argv: Optional[List[str]] = None) -> int:
    # Load environment variables
    load_dotenv()
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(cli())
