#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("multigit")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. MULTIGIT_CONFIG environment variable
    2. ~/.multigit/ directory
    """
    if 'MULTIGIT_CONFIG' in os.environ:
        path = Path(os.environ['MULTIGIT_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.multigit'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # Nothing on disk; callers only read from this path
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file, defaults and environment."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                import yaml
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "max_concurrent": 12,
            "git_executable": "git",
            "timeout_seconds": 0,  # 0 waits on children indefinitely
        },
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "hosts": ["github.com"],
            "page_size": 100,
            "dedupe": True,
            "rate_limit": {
                "max_retries": 3,
                "max_delay_seconds": 60,
            }
        },
        "logging": {
            "level": "WARNING",
        },
    }


def configure_logging(config, verbose=False):
    """Apply the configured log level to the package logger."""
    level_name = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING"))
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {level_name!r}, using WARNING")
        level = logging.WARNING
    logger.setLevel(level)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: MULTIGIT_SECTION_SUBSECTION_KEY
    For example: MULTIGIT_GENERAL_MAX_CONCURRENT=4
    """
    env_prefix = "MULTIGIT_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                break

    return config
