"""
Quick script to check the X API statuses/lookup rate limit
"""
import os
import sys
from datetime import datetime

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from config_loader import load_config
from twitter_bot import TwitterBot

load_dotenv()


def main():
    config = load_config()
    api_config = config.get('api', {})
    fetch_config = config.get('fetch', {})

    try:
        twitter_bot = TwitterBot(proxy=api_config.get('proxy'))
    except ValueError as e:
        print(f"\n✗ {e}")
        return 1

    print("=" * 80)
    print("X API LOOKUP RATE LIMIT (GET statuses/lookup)")
    print("=" * 80)

    quota = twitter_bot.lookup_quota()
    if quota is None:
        return 1

    reset_at = datetime.fromtimestamp(quota['reset'])
    batch_size = fetch_config.get('batch_size', 100)
    print(f"""
✓ Calls per window: {quota['limit']}
✓ Calls remaining:  {quota['remaining']}
  └─ Up to {quota['remaining'] * batch_size} more tweets at {batch_size} per call
✓ Window resets at: {reset_at.strftime('%Y-%m-%d %H:%M:%S')}
""")

    if quota['remaining'] < fetch_config.get('min_remaining_calls', 10):
        print("⚠️  Nearly out of calls - a fetch run would doze until the reset")

    print("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
