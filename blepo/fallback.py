"""Primary/secondary feed fetcher composition."""

from typing import List

from .errors import StatusError
from .logger import log_with_timestamp
from .models import Channel, Video
from .ports import FeedFetcher

NOT_FOUND = 404


class FallbackFetcher:
    """Try *primary* first and switch to *fallback* only when it reports 404.

    A 404 from the RSS endpoint means the feed is unavailable for that
    channel; outages and malformed responses are surfaced as-is.
    """

    def __init__(self, primary: FeedFetcher, fallback: FeedFetcher) -> None:
        self.primary = primary
        self.fallback = fallback

    def fetch(self, channel: Channel) -> List[Video]:
        try:
            return self.primary.fetch(channel)
        except StatusError as exc:
            if exc.status != NOT_FOUND:
                raise
        log_with_timestamp(f"RSS feed for {channel.name} returned 404, trying yt-dlp...")
        return self.fallback.fetch(channel)
