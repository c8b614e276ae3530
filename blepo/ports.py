"""Collaborator interfaces consumed by the aggregation pipeline."""

from typing import List, Protocol, Set

from .models import Channel, Video, VideoId


class FeedFetcher(Protocol):
    def fetch(self, channel: Channel) -> List[Video]:
        """Return the channel's videos or raise :class:`~blepo.errors.FetchError`."""
        ...


class VideoStore(Protocol):
    def load_watched(self) -> Set[VideoId]:
        ...

    def mark_watched(self, video_id: VideoId) -> None:
        """Record *video_id* as watched. Marking twice has no further effect."""
        ...


class ShortsChecker(Protocol):
    def is_short(self, video_id: VideoId) -> bool:
        """Return True for Shorts. Must not raise; unknown means False."""
        ...


class VideoPlayer(Protocol):
    def play(self, url: str) -> None:
        ...
