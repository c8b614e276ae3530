"""Aggregation pipeline and the play/mark use cases."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import AbstractSet, Callable, List, Optional, Sequence, TypeVar

from .errors import FetchError
from .logger import log_with_timestamp, warn
from .models import (
    Channel,
    FetchWindow,
    Video,
    VideoId,
    filter_by_window,
    filter_unwatched,
    sort_newest_first,
)
from .ports import FeedFetcher, ShortsChecker, VideoPlayer, VideoStore

MAX_WORKERS = 32

T = TypeVar("T")
R = TypeVar("R")


def _run_all(func: Callable[[T], R], items: Sequence[T]) -> List[R]:
    """Run *func* once per item on a thread pool and wait for every result.

    Results come back in input order.
    """
    if not items:
        return []
    workers = min(len(items), MAX_WORKERS)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(func, items))


def aggregate(
    channels: Sequence[Channel],
    fetcher: FeedFetcher,
    window: FetchWindow,
    watched: AbstractSet[VideoId],
    shorts_checker: ShortsChecker,
    now: Optional[datetime] = None,
) -> List[Video]:
    """Collect unwatched, non-Short videos from *channels*, newest first.

    A channel that fails to fetch is reported on stderr and contributes
    nothing. *watched* is a snapshot; it is not re-read during the run.
    """
    cutoff = window.cutoff(now)

    def fetch_channel(channel: Channel) -> List[Video]:
        try:
            fetched = fetcher.fetch(channel)
        except FetchError as exc:
            warn(f"failed to fetch {channel.name}: {exc}")
            return []
        return filter_by_window(fetched, cutoff)

    merged: List[Video] = []
    for videos in _run_all(fetch_channel, list(channels)):
        merged.extend(videos)

    unwatched = filter_unwatched(sort_newest_first(merged), watched)

    shorts = _run_all(lambda video: shorts_checker.is_short(video.id), unwatched)
    return [video for video, is_short in zip(unwatched, shorts) if not is_short]


def fetch_videos(
    channels: Sequence[Channel],
    fetcher: FeedFetcher,
    store: VideoStore,
    shorts_checker: ShortsChecker,
    window: FetchWindow,
    now: Optional[datetime] = None,
) -> List[Video]:
    """Load the watched snapshot from *store* and run :func:`aggregate`.

    :class:`~blepo.errors.StoreError` propagates to the caller.
    """
    log_with_timestamp("Updating videos list...")
    watched = store.load_watched()
    return aggregate(channels, fetcher, window, watched, shorts_checker, now=now)


def mark_and_play(video: Video, store: VideoStore, player: VideoPlayer) -> None:
    """Play *video* and record it as watched once playback has started."""
    print(f"Playing: {video.title} [{video.channel_name}]")
    player.play(video.url)
    store.mark_watched(video.id)


def mark_as_watched(video: Video, store: VideoStore) -> None:
    store.mark_watched(video.id)
