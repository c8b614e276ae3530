"""Interactive command-line interface: list unwatched videos, play or mark them."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from . import pipeline
from .archive import JsonWatchedStore
from .config import parse_args, resolve_config
from .errors import BlepoError
from .fallback import FallbackFetcher
from .models import SelectionIndex, Video
from .player import MpvPlayer
from .ports import VideoPlayer, VideoStore
from .rss import RssFeedFetcher
from .shorts import HttpShortsChecker
from .ytdlp_fetcher import YtDlpFetcher

PROMPT = "\nEnter number to play, w<number> to mark watched, q to quit: "


@dataclass(frozen=True)
class Selection:
    """A parsed prompt answer."""

    index: SelectionIndex
    mark_only: bool


def parse_selection(raw: str) -> Optional[Selection]:
    """Parse ``<n>`` or ``w<n>``. Returns None for quit (empty or ``q``).

    Raises ValueError for anything else.
    """
    text = raw.strip().lower()
    if text in {"", "q", "quit", "exit"}:
        return None

    mark_only = text.startswith("w")
    number_text = text[1:].strip() if mark_only else text
    if not number_text.isdigit():
        raise ValueError(f"invalid number: {raw.strip()}")
    return Selection(index=SelectionIndex.parse(int(number_text)), mark_only=mark_only)


def format_video_line(position: int, video: Video) -> str:
    date = video.published.strftime("%Y-%m-%d")
    return f"{position:>3}. [{date}] {video.channel_name} — {video.title}"


def print_videos(videos: Sequence[Video]) -> None:
    for position, video in enumerate(videos, start=1):
        print(format_video_line(position, video))


def run_selection_loop(
    videos: List[Video],
    store: VideoStore,
    player_factory: Callable[[], VideoPlayer],
    input_func: Callable[[str], str] = input,
) -> None:
    """Prompt until the user quits or starts playback."""
    while True:
        try:
            raw = input_func(PROMPT)
        except EOFError:
            return

        try:
            selection = parse_selection(raw)
        except ValueError as exc:
            print(exc)
            continue
        if selection is None:
            return

        offset = selection.index.to_index()
        if offset >= len(videos):
            print(
                f"video #{selection.index.number} not found "
                f"(have {len(videos)} unwatched videos)"
            )
            continue
        video = videos[offset]

        if selection.mark_only:
            pipeline.mark_as_watched(video, store)
            print(f"Marked as watched: {video.title} [{video.channel_name}]")
            continue

        pipeline.mark_and_play(video, store, player_factory())
        return


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = resolve_config(args)
    store = JsonWatchedStore(config.data_dir)
    fetcher = FallbackFetcher(RssFeedFetcher(), YtDlpFetcher(verbose=args.verbose))

    videos = pipeline.fetch_videos(
        config.channels,
        fetcher,
        store,
        HttpShortsChecker(),
        config.fetch_window,
    )

    if not videos:
        print("No unwatched videos.")
        return 0

    print_videos(videos)
    run_selection_loop(videos, store, MpvPlayer)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        return run(argv)
    except BlepoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print()
        return 130


if __name__ == "__main__":
    sys.exit(main())
