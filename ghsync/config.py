"""
Configuration for ghsync.

Settings come from three layers, later ones winning:
1. Built-in defaults (get_default_config)
2. A config file (~/.ghsync/config.{json,toml,yaml,yml} or GHSYNC_CONFIG)
3. GHSYNC_SECTION_KEY environment variables

Command-line flags override all of them; the CLI feeds the merged file
config to click as option defaults. The resolved settings for one run
are frozen into a SyncConfig.
"""

import json
import logging
import os
import sys
import tomllib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .layout import Layout
from .repo_filter import FilterConfig

logger = logging.getLogger(__name__)

# Logger receiving append-only per-repository failure entries
ERROR_LOGGER_NAME = "ghsync.errors"

OUTPUT_HUMAN = "human"
OUTPUT_JSON = "json"

DEFAULT_PARALLEL = 6


@dataclass(frozen=True)
class SyncConfig:
    """
    Read-only settings for one sync run.

    Built once by the CLI command from flags, config file and environment.
    """
    token: str
    organizations: Tuple[str, ...] = ()
    resume: bool = False
    update: bool = False
    fetch: bool = False
    dry_run: bool = False
    concurrency: int = DEFAULT_PARALLEL
    layout: Layout = Layout.NESTED
    root_dir: Path = field(default_factory=Path.cwd)
    output_mode: str = OUTPUT_HUMAN
    filters: FilterConfig = field(default_factory=FilterConfig)
    api_url: str = "https://api.github.com"
    per_page: int = 100
    log_dir: Optional[Path] = None
    verbose: bool = False
    debug: bool = False
    assume_yes: bool = False

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")

    @property
    def auto_discover(self) -> bool:
        """True when no organizations were given explicitly."""
        return not self.organizations

    @property
    def json_output(self) -> bool:
        return self.output_mode == OUTPUT_JSON


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Checks in order:
    1. GHSYNC_CONFIG environment variable
    2. ~/.ghsync/ directory
    """
    if 'GHSYNC_CONFIG' in os.environ:
        path = Path(os.environ['GHSYNC_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.ghsync'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists():
            return path

    return config_dir / 'config.json'


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "github": {
            "api_url": "https://api.github.com",
            "per_page": 100,
        },
        "sync": {
            "layout": "nested",
            "root_dir": "",
            "parallel": DEFAULT_PARALLEL,
            "resume": False,
            "update": False,
            "fetch": False,
        },
        "filters": {
            "include_private": True,
            "include_public": True,
            "exclude_archived": True,
            "exclude_forks": True,
            "name_pattern": "",
        },
        "logging": {
            "level": "WARNING",
            "directory": "./logs",
        },
    }


def load_config() -> Dict[str, Any]:
    """Load configuration from file and environment."""
    config_path = get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


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
    Environment variables follow the pattern: GHSYNC_SECTION_KEY
    For example: GHSYNC_FILTERS_EXCLUDE_FORKS=false
    """
    env_prefix = "GHSYNC_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.isdigit():
            typed_value = int(value)
        elif value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that prefixes the remaining parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config


def config_to_default_map(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Translate a loaded config into click option defaults.

    Keys are the parameter names of the sync command.
    """
    sync = config.get("sync", {})
    filters = config.get("filters", {})
    github = config.get("github", {})
    logging_cfg = config.get("logging", {})

    default_map = {
        "layout": Layout.parse(sync.get("layout")).value,
        "parallel": sync.get("parallel", DEFAULT_PARALLEL),
        "resume": sync.get("resume", False),
        "update": sync.get("update", False),
        "fetch": sync.get("fetch", False),
        "include_private": filters.get("include_private", True),
        "include_public": filters.get("include_public", True),
        # The CLI pairs are include/exclude; the config stores exclusions
        "include_archived": not filters.get("exclude_archived", True),
        "include_forks": not filters.get("exclude_forks", True),
        "api_url": github.get("api_url", "https://api.github.com"),
        "per_page": github.get("per_page", 100),
    }
    if sync.get("root_dir"):
        default_map["root_dir"] = sync["root_dir"]
    if filters.get("name_pattern"):
        default_map["name_pattern"] = filters["name_pattern"]
    if logging_cfg.get("directory"):
        default_map["log_dir"] = logging_cfg["directory"]
    if logging_cfg.get("level"):
        default_map["log_level"] = str(logging_cfg["level"]).upper()
    return default_map


_installed_handlers = []


def reset_logging() -> None:
    """Remove the handlers installed by configure_logging."""
    for owner, handler in _installed_handlers:
        owner.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()


def configure_logging(
    level: str = "WARNING",
    log_dir: Optional[Path] = None
) -> Optional[Path]:
    """
    Configure the ghsync logger hierarchy.

    - stderr handler at ``level``
    - per-run log file under ``log_dir`` (timestamped records)
    - append-only ``errors.log`` under ``log_dir`` for the error logger

    Calling again replaces the handlers installed by the previous call.

    Args:
        level: Console log level name
        log_dir: Directory for log files (None disables file logging)

    Returns:
        Path of the per-run log file, or None
    """
    reset_logging()
    root = logging.getLogger("ghsync")

    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(console)
    _installed_handlers.append((root, console))

    if not log_dir:
        return None

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamped = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")

    run_log = log_dir / f"ghsync_{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}.log"
    run_handler = logging.FileHandler(run_log, encoding="utf-8")
    run_handler.setLevel(logging.INFO)
    run_handler.setFormatter(timestamped)
    root.addHandler(run_handler)
    _installed_handlers.append((root, run_handler))

    error_handler = logging.FileHandler(log_dir / "errors.log", mode="a", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter("[%(asctime)s] ERROR: %(message)s"))
    error_logger = logging.getLogger(ERROR_LOGGER_NAME)
    error_logger.addHandler(error_handler)
    _installed_handlers.append((error_logger, error_handler))

    return run_log
