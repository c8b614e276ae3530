"""Unwatched-video aggregator for subscribed YouTube channels."""

from .archive import JsonWatchedStore
from .errors import (
    BlepoError,
    ConfigError,
    FetchError,
    NetworkError,
    ParseError,
    PlayError,
    StatusError,
    StoreError,
    ValidationError,
)
from .fallback import FallbackFetcher
from .models import (
    Channel,
    ChannelId,
    FetchWindow,
    SelectionIndex,
    Video,
    VideoId,
    filter_by_window,
    filter_unwatched,
    sort_newest_first,
)
from .pipeline import aggregate, fetch_videos, mark_and_play, mark_as_watched
from .rss import RssFeedFetcher
from .shorts import HttpShortsChecker
from .ytdlp_fetcher import YtDlpFetcher

__version__ = "0.1.0"

__all__ = [
    # Pipeline and use cases
    "aggregate",
    "fetch_videos",
    "mark_and_play",
    "mark_as_watched",
    # Value objects
    "Channel",
    "ChannelId",
    "FetchWindow",
    "SelectionIndex",
    "Video",
    "VideoId",
    "filter_by_window",
    "filter_unwatched",
    "sort_newest_first",
    # Collaborators
    "FallbackFetcher",
    "RssFeedFetcher",
    "YtDlpFetcher",
    "HttpShortsChecker",
    "JsonWatchedStore",
    # Errors
    "BlepoError",
    "ConfigError",
    "FetchError",
    "NetworkError",
    "ParseError",
    "PlayError",
    "StatusError",
    "StoreError",
    "ValidationError",
]
