"""Configuration file loading and argument parsing."""

import argparse
import json
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import ConfigError, ValidationError
from .models import DEFAULT_FETCH_WINDOW_DAYS, Channel, ChannelId, FetchWindow

APP_NAME = "blepo"
CONFIG_FILENAME = "config.json"

EXAMPLE_CONFIG = """{
  "fetch_window_days": 7,
  "channels": [
    {"name": "Channel Name", "id": "UCxxxxxxxxxxxxxxxxxxxxxx"}
  ]
}"""

VALID_KEYS = {"fetch_window_days", "channels"}


@dataclass(frozen=True)
class AppConfig:
    fetch_window: FetchWindow
    channels: List[Channel]
    data_dir: str


def positive_int(value: str) -> int:
    """Return *value* parsed as a positive integer for argparse."""

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise argparse.ArgumentTypeError(
            "Expected a positive integer"
        ) from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("Expected a positive integer")

    return parsed


def _xdg_dir(env_var: str, fallback: str, environ: Mapping[str, str]) -> str:
    base = environ.get(env_var) or os.path.join(os.path.expanduser("~"), fallback)
    return os.path.join(base, APP_NAME)


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return os.path.join(_xdg_dir("XDG_CONFIG_HOME", ".config", environ), CONFIG_FILENAME)


def default_data_dir(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return _xdg_dir("XDG_DATA_HOME", os.path.join(".local", "share"), environ)


def load_config(config_path: str, data_dir: str) -> AppConfig:
    """Read and validate the JSON configuration file at *config_path*."""
    if not os.path.exists(config_path):
        raise ConfigError(
            f"config file not found at {config_path}\n\nCreate it with:\n\n{EXAMPLE_CONFIG}\n"
        )

    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read config: {config_path}: {exc}") from exc

    return parse_config(content, data_dir)


def parse_config(content: str, data_dir: str) -> AppConfig:
    """Validate configuration text. An empty document means "no channels"."""
    if not content.strip():
        raw: Dict[str, Any] = {}
    else:
        try:
            raw = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid config: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("invalid config: top level must be a JSON object")

    invalid_keys = set(raw) - VALID_KEYS
    if invalid_keys:
        print(f"Warning: Unknown config keys ignored: {', '.join(sorted(invalid_keys))}", file=sys.stderr)

    raw_days = raw.get("fetch_window_days", DEFAULT_FETCH_WINDOW_DAYS)
    try:
        fetch_window = FetchWindow.parse(raw_days)
    except ValidationError as exc:
        raise ConfigError(f"invalid fetch_window_days: {exc}") from exc

    entries = raw.get("channels", [])
    if not isinstance(entries, list):
        raise ConfigError("invalid config: 'channels' must be a list")

    return AppConfig(
        fetch_window=fetch_window,
        channels=[_parse_channel(entry) for entry in entries],
        data_dir=data_dir,
    )


def _parse_channel(entry: Any) -> Channel:
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise ConfigError(f"invalid channel entry: {entry!r}")
    name = entry["name"]
    try:
        channel_id = ChannelId.parse(entry.get("id") or "")
    except ValidationError as exc:
        raise ConfigError(f'invalid channel "{name}": {exc}') from exc
    return Channel(name=name, id=channel_id)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="List unwatched videos from your YouTube channels and play them with mpv."
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to JSON configuration file (default: {default_config_path()})",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help=f"Directory holding watched.json (default: {default_data_dir()})",
    )
    parser.add_argument(
        "--days",
        type=positive_int,
        default=None,
        help="Override fetch_window_days from the config file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show yt-dlp progress output when the RSS feed is unavailable",
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> AppConfig:
    """Load the config named by *args* and apply command-line overrides."""
    config = load_config(
        args.config or default_config_path(),
        args.data_dir or default_data_dir(),
    )
    if args.days is not None:
        config = AppConfig(
            fetch_window=FetchWindow.parse(args.days),
            channels=config.channels,
            data_dir=config.data_dir,
        )
    return config
