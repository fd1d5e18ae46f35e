"""
Loads fetch/sanitise settings from config.yaml
"""
import copy
import os
from typing import Dict, Optional

import yaml

DEFAULT_FIELDS_TO_KEEP = [
    "id_str",
    "created_at",
    "text",
    "full_text",
    "lang",
    "user.id_str",
    "user.screen_name",
    "user.name",
    "entities.hashtags",
    "entities.urls",
    "entities.user_mentions",
    "entities.media",
    "in_reply_to_status_id_str",
    "quoted_status_id_str",
    "retweet_count",
    "favorite_count",
]

DEFAULT_CONFIG = {
    'fetch': {
        'batch_size': 100,
        'min_remaining_calls': 10,
        'min_seconds_until_reset': 10,
        'doze_margin_seconds': 5,
    },
    'api': {
        'tweet_mode': 'extended',
        'proxy': None,
    },
    'sanitise': {
        'skip_media': False,
        'fields_to_keep': DEFAULT_FIELDS_TO_KEEP,
    },
}


def default_config_path() -> str:
    """config.yaml in the project root (parent of src/)"""
    script_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(os.path.dirname(script_dir), 'config.yaml')


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load config.yaml over the built-in defaults

    Args:
        config_path: Path to the YAML file (defaults to ../config.yaml from src/)

    Returns:
        Complete config dict; a missing file just means defaults
    """
    config_path = config_path or default_config_path()
    config = copy.deepcopy(DEFAULT_CONFIG)

    if not os.path.exists(config_path):
        return config

    with open(config_path, 'r') as f:
        overrides = yaml.safe_load(f) or {}

    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config
