"""Channel listing through yt-dlp, used when the RSS feed is unavailable."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import yt_dlp
from yt_dlp.utils import DownloadError, ExtractorError

from .errors import NetworkError, ParseError, ValidationError
from .logger import YtDlpLogger
from .models import Channel, Video, VideoId, watch_url

CHANNEL_URL_TEMPLATE = "https://www.youtube.com/channel/{channel_id}/videos"


def build_ydl_options(logger: YtDlpLogger, playlist_end: Optional[int] = None) -> Dict[str, Any]:
    """Options for a flat, metadata-only listing of a channel tab."""
    opts: Dict[str, Any] = {
        "logger": logger,
        "quiet": True,
        "no_warnings": True,
        "skip_download": True,
        "extract_flat": "in_playlist",
        "ignoreerrors": False,
        # Flat entries carry no dates unless yt-dlp is asked to estimate them
        "extractor_args": {"youtubetab": {"approximate_date": [""]}},
    }
    if playlist_end:
        opts["playlistend"] = playlist_end
    return opts


class YtDlpFetcher:
    """List a channel's uploads by scraping the ``/videos`` tab with yt-dlp."""

    def __init__(self, playlist_end: Optional[int] = None, verbose: bool = False) -> None:
        self.playlist_end = playlist_end
        self.verbose = verbose

    def fetch(self, channel: Channel) -> List[Video]:
        url = CHANNEL_URL_TEMPLATE.format(channel_id=channel.id)
        logger = YtDlpLogger(channel_name=channel.name, verbose=self.verbose)
        ydl_opts = build_ydl_options(logger, self.playlist_end)

        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except (DownloadError, ExtractorError) as exc:
            message = logger.last_error() or str(exc)
            raise NetworkError(f"yt-dlp failed: {message}") from exc

        if not isinstance(info, dict):
            raise ParseError(f"yt-dlp returned no metadata for {url}")

        return parse_ytdlp_entries(info.get("entries") or [], channel)


def parse_ytdlp_entries(entries: Iterable[Optional[Dict[str, Any]]], channel: Channel) -> List[Video]:
    """Convert flat-playlist entries into videos. Unavailable (``None``) entries are skipped."""
    videos: List[Video] = []
    for entry in entries:
        if entry is None:
            continue
        if not isinstance(entry, dict):
            raise ParseError(f"unexpected entry: {entry!r}")
        videos.append(_parse_entry(entry, channel))
    return videos


def parse_ytdlp_output(jsonl: str, channel: Channel) -> List[Video]:
    """Parse ``yt-dlp --flat-playlist --dump-json`` output (one JSON object per line)."""
    entries = []
    for line in jsonl.splitlines():
        if not line.strip():
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ParseError(str(exc)) from exc
    return parse_ytdlp_entries(entries, channel)


def _parse_entry(entry: Dict[str, Any], channel: Channel) -> Video:
    try:
        video_id = VideoId.parse(entry.get("id") or "")
    except ValidationError as exc:
        raise ParseError(f"invalid video ID: {exc}") from exc

    timestamp = entry.get("timestamp")
    upload_date = entry.get("upload_date")
    if timestamp is not None:
        try:
            published = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise ParseError(f"invalid timestamp: {timestamp}") from exc
    elif upload_date:
        published = _parse_upload_date(str(upload_date))
    else:
        # Live streams and premieres come without any date
        published = datetime.now(timezone.utc)

    return Video(
        id=video_id,
        title=entry.get("title") or "",
        url=entry.get("url") or watch_url(video_id.value),
        published=published,
        channel_name=channel.name,
        channel_id=channel.id,
    )


def _parse_upload_date(date_str: str) -> datetime:
    try:
        return datetime.strptime(date_str, "%Y%m%d").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise ParseError(f"invalid upload_date '{date_str}': {exc}") from exc
