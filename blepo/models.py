"""Value objects and pure list helpers for the video aggregator."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import AbstractSet, Iterable, List, Optional

from .errors import (
    ChannelIdError,
    ChannelIdReason,
    FetchWindowError,
    SelectionIndexError,
    VideoIdError,
)


# Constants
CHANNEL_ID_PREFIX = "UC"
DEFAULT_FETCH_WINDOW_DAYS = 7
WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


@dataclass(frozen=True)
class ChannelId:
    """YouTube channel identifier (``UC...``)."""
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ChannelIdError(ChannelIdReason.EMPTY)
        if not self.value.startswith(CHANNEL_ID_PREFIX):
            raise ChannelIdError(ChannelIdReason.INVALID_PREFIX)

    @classmethod
    def parse(cls, raw: str) -> "ChannelId":
        return cls(str(raw))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Channel:
    """A subscribed channel: display name plus identifier."""
    name: str
    id: ChannelId


@dataclass(frozen=True)
class VideoId:
    """Opaque video identifier used for watched dedup and Shorts lookups."""
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise VideoIdError()

    @classmethod
    def parse(cls, raw: str) -> "VideoId":
        return cls(str(raw))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Video:
    """A single video entry as returned by a feed fetcher."""
    id: VideoId
    title: str
    url: str
    published: datetime
    channel_name: str
    channel_id: ChannelId


@dataclass(frozen=True)
class FetchWindow:
    """Number of days back from now that a video may have been published."""
    days: int

    def __post_init__(self) -> None:
        # bool is an int subclass; "true" is not a window
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days <= 0:
            raise FetchWindowError()

    @classmethod
    def parse(cls, days: int) -> "FetchWindow":
        return cls(days)

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        """Return the earliest publish time still inside the window."""
        if now is None:
            now = datetime.now(timezone.utc)
        return now - timedelta(days=self.days)


@dataclass(frozen=True)
class SelectionIndex:
    """1-based number the user types to pick a video from the list."""
    number: int

    def __post_init__(self) -> None:
        if isinstance(self.number, bool) or not isinstance(self.number, int) or self.number < 1:
            raise SelectionIndexError()

    @classmethod
    def parse(cls, number: int) -> "SelectionIndex":
        return cls(number)

    def to_index(self) -> int:
        return self.number - 1


def watch_url(video_id: str) -> str:
    return WATCH_URL_TEMPLATE.format(video_id=video_id)


def filter_by_window(videos: Iterable[Video], cutoff: datetime) -> List[Video]:
    """Keep videos published at or after *cutoff*."""
    return [video for video in videos if video.published >= cutoff]


def filter_unwatched(videos: Iterable[Video], watched: AbstractSet[VideoId]) -> List[Video]:
    """Drop videos whose id is in *watched*."""
    return [video for video in videos if video.id not in watched]


def sort_newest_first(videos: Iterable[Video]) -> List[Video]:
    """Return *videos* ordered by publish time, newest first.

    ``sorted`` is stable, so videos sharing a timestamp keep their input order.
    """
    return sorted(videos, key=lambda video: video.published, reverse=True)
