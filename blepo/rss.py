"""YouTube channel RSS (Atom) feed fetcher."""

import calendar
import http.client
import urllib.error
import urllib.request
from datetime import datetime, timezone
from typing import List, Union

import feedparser

from .errors import NetworkError, ParseError, StatusError, ValidationError
from .models import Channel, Video, VideoId, watch_url

RSS_URL_TEMPLATE = "https://www.youtube.com/feeds/videos.xml?channel_id={channel_id}"
DEFAULT_TIMEOUT = 30.0
_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; blepo/0.1)"}


class RssFeedFetcher:
    """Fetch a channel's latest uploads from its public RSS feed."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def fetch(self, channel: Channel) -> List[Video]:
        url = RSS_URL_TEMPLATE.format(channel_id=channel.id)
        request = urllib.request.Request(url, headers=_HEADERS)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                data = response.read()
        except urllib.error.HTTPError as exc:
            raise StatusError(exc.code, url) from exc
        except urllib.error.URLError as exc:
            raise NetworkError(str(exc.reason)) from exc
        except http.client.HTTPException as exc:  # truncated or garbled responses
            raise NetworkError(str(exc) or type(exc).__name__) from exc
        except OSError as exc:  # timeouts, connection resets
            raise NetworkError(str(exc)) from exc

        return parse_feed(data, channel)


def parse_feed(data: Union[bytes, str], channel: Channel) -> List[Video]:
    """Parse an Atom document from the YouTube feeds endpoint."""
    feed = feedparser.parse(data)

    if feed.bozo and not feed.entries:
        raise ParseError(f"malformed feed: {feed.get('bozo_exception')}")

    return [_parse_entry(entry, channel) for entry in feed.entries]


def _parse_entry(entry, channel: Channel) -> Video:
    raw_id = entry.get("yt_videoid", "")
    try:
        video_id = VideoId.parse(raw_id)
    except ValidationError as exc:
        raise ParseError(f"invalid video ID: {exc}") from exc

    # feedparser normalises dates to a UTC struct_time, or leaves it unset
    published_parsed = entry.get("published_parsed")
    if not published_parsed:
        raw_date = entry.get("published", "")
        raise ParseError(f"invalid date '{raw_date}'")
    published = datetime.fromtimestamp(calendar.timegm(published_parsed), tz=timezone.utc)

    return Video(
        id=video_id,
        title=entry.get("title", ""),
        url=entry.get("link") or watch_url(video_id.value),
        published=published,
        channel_name=channel.name,
        channel_id=channel.id,
    )
