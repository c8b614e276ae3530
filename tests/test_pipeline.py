"""Tests for the aggregation pipeline and the play/mark use cases."""

from __future__ import annotations

import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from blepo import pipeline
from blepo.errors import NetworkError, PlayError, StatusError, StoreReadError
from blepo.models import Channel, ChannelId, FetchWindow, Video, VideoId

NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


def make_channel(name: str = "Test Channel", channel_id: str = "UC123") -> Channel:
    return Channel(name=name, id=ChannelId.parse(channel_id))


def make_video(video_id: str, days_ago: float, channel: Channel = None, title: str = "Video") -> Video:
    channel = channel or make_channel()
    return Video(
        id=VideoId.parse(video_id),
        title=title,
        url=f"https://youtube.com/watch?v={video_id}",
        published=NOW - timedelta(days=days_ago),
        channel_name=channel.name,
        channel_id=channel.id,
    )


def ids(videos):
    return [str(video.id) for video in videos]


class FakeFetcher:
    def __init__(self, by_channel=None, default=None, errors=None):
        self.by_channel = by_channel or {}
        self.default = default or []
        self.errors = errors or {}
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, channel):
        with self._lock:
            self.calls.append(channel)
        if channel.id in self.errors:
            raise self.errors[channel.id]
        return list(self.by_channel.get(channel.id, self.default))


class FakeStore:
    def __init__(self, watched=()):
        self.watched = {VideoId.parse(v) for v in watched}
        self.marked = []
        self.loads = 0

    def load_watched(self):
        self.loads += 1
        return set(self.watched)

    def mark_watched(self, video_id):
        self.marked.append(video_id)
        self.watched.add(video_id)


class FailingStore(FakeStore):
    def load_watched(self):
        raise StoreReadError("disk on fire")


class FakeShortsChecker:
    def __init__(self, shorts=()):
        self.shorts = {VideoId.parse(v) for v in shorts}
        self.checked = []
        self._lock = threading.Lock()

    def is_short(self, video_id):
        with self._lock:
            self.checked.append(video_id)
        return video_id in self.shorts


class FakePlayer:
    def __init__(self):
        self.played = []

    def play(self, url):
        self.played.append(url)


class FailingPlayer:
    def play(self, url):
        raise PlayError("mpv crashed")


def seven_days():
    return FetchWindow.parse(7)


def run_aggregate(fetcher, channels=None, watched=(), shorts=()):
    return pipeline.aggregate(
        channels if channels is not None else [make_channel()],
        fetcher,
        seven_days(),
        {VideoId.parse(v) for v in watched},
        FakeShortsChecker(shorts),
        now=NOW,
    )


def test_returns_recent_videos_only():
    fetcher = FakeFetcher(default=[make_video("v1", 1), make_video("v2", 30)])
    assert ids(run_aggregate(fetcher)) == ["v1"]


def test_excludes_watched_videos():
    fetcher = FakeFetcher(default=[make_video("v1", 1), make_video("v2", 2)])
    assert ids(run_aggregate(fetcher, watched=["v1"])) == ["v2"]


def test_returns_newest_first():
    fetcher = FakeFetcher(default=[make_video("v1", 3), make_video("v2", 1)])
    assert ids(run_aggregate(fetcher)) == ["v2", "v1"]


def test_excludes_shorts_preserving_order():
    fetcher = FakeFetcher(
        default=[make_video("v1", 1), make_video("short1", 1), make_video("v2", 2)]
    )
    assert ids(run_aggregate(fetcher, shorts=["short1"])) == ["v1", "v2"]


def test_includes_video_exactly_at_cutoff():
    fetcher = FakeFetcher(default=[make_video("edge", 7), make_video("too-old", 7.0001)])
    assert ids(run_aggregate(fetcher)) == ["edge"]


def test_empty_channel_list_yields_empty_result():
    fetcher = FakeFetcher(default=[make_video("v1", 1)])
    assert run_aggregate(fetcher, channels=[]) == []
    assert fetcher.calls == []


def test_failing_channel_does_not_fail_pipeline(capsys):
    good = make_channel("Good", "UCgood")
    bad = make_channel("Bad", "UCbad")
    fetcher = FakeFetcher(
        by_channel={good.id: [make_video("g2", 2, good), make_video("g1", 1, good)]},
        errors={bad.id: NetworkError("connection refused")},
    )

    result = run_aggregate(fetcher, channels=[bad, good])

    assert ids(result) == ["g1", "g2"]
    assert "Warning: failed to fetch Bad" in capsys.readouterr().err


def test_every_channel_failing_returns_empty():
    channel = make_channel()
    fetcher = FakeFetcher(errors={channel.id: StatusError(500)})
    assert run_aggregate(fetcher, channels=[channel]) == []


def test_merges_channels_and_sorts_globally():
    first = make_channel("First", "UC1")
    second = make_channel("Second", "UC2")
    fetcher = FakeFetcher(
        by_channel={
            first.id: [make_video("a3", 3, first), make_video("a1", 1, first)],
            second.id: [make_video("b2", 2, second), make_video("b9", 9, second)],
        }
    )

    result = run_aggregate(fetcher, channels=[first, second])

    assert ids(result) == ["a1", "b2", "a3"]
    assert {c.id for c in fetcher.calls} == {first.id, second.id}


def test_equal_timestamps_keep_channel_merge_order():
    first = make_channel("First", "UC1")
    second = make_channel("Second", "UC2")
    fetcher = FakeFetcher(
        by_channel={
            first.id: [make_video("a", 2, first)],
            second.id: [make_video("b", 2, second)],
        }
    )

    assert ids(run_aggregate(fetcher, channels=[first, second])) == ["a", "b"]


def test_classifier_only_sees_unwatched_videos_in_window():
    fetcher = FakeFetcher(
        default=[make_video("keep", 1), make_video("watched", 1), make_video("old", 40)]
    )
    checker = FakeShortsChecker()

    pipeline.aggregate(
        [make_channel()], fetcher, seven_days(), {VideoId.parse("watched")}, checker, now=NOW
    )

    assert checker.checked == [VideoId.parse("keep")]


def test_fetch_videos_reads_watched_snapshot_once():
    store = FakeStore(watched=["v1"])
    fetcher = FakeFetcher(default=[make_video("v1", 1), make_video("v2", 2)])

    result = pipeline.fetch_videos(
        [make_channel()], fetcher, store, FakeShortsChecker(), seven_days(), now=NOW
    )

    assert ids(result) == ["v2"]
    assert store.loads == 1
    assert store.marked == []


def test_fetch_videos_propagates_store_failure():
    with pytest.raises(StoreReadError):
        pipeline.fetch_videos(
            [make_channel()], FakeFetcher(), FailingStore(), FakeShortsChecker(), seven_days()
        )


def test_mark_and_play_marks_after_playing():
    video = make_video("v1", 1)
    store = FakeStore()
    player = FakePlayer()

    pipeline.mark_and_play(video, store, player)

    assert player.played == ["https://youtube.com/watch?v=v1"]
    assert VideoId.parse("v1") in store.load_watched()


def test_mark_and_play_leaves_store_untouched_on_player_failure():
    store = FakeStore()

    with pytest.raises(PlayError):
        pipeline.mark_and_play(make_video("v1", 1), store, FailingPlayer())

    assert store.marked == []
    assert store.load_watched() == set()


def test_mark_as_watched_does_not_play():
    store = FakeStore()

    pipeline.mark_as_watched(make_video("v1", 1), store)
    pipeline.mark_as_watched(make_video("v1", 1), store)

    assert store.load_watched() == {VideoId.parse("v1")}


def test_channels_are_fetched_concurrently():
    channels = [make_channel(f"C{i}", f"UC{i}") for i in range(3)]
    barrier = threading.Barrier(len(channels), timeout=5)

    class BarrierFetcher:
        def fetch(self, channel):
            # Every task must be in flight at once for the barrier to open
            barrier.wait()
            return [make_video(f"v-{channel.id}", 1, channel)]

    result = run_aggregate(BarrierFetcher(), channels=channels)

    assert sorted(ids(result)) == ["v-UC0", "v-UC1", "v-UC2"]


def test_shorts_are_checked_concurrently():
    videos = [make_video(f"v{i}", 1) for i in range(4)]
    barrier = threading.Barrier(len(videos), timeout=5)

    class BarrierChecker:
        def is_short(self, video_id):
            barrier.wait()
            return str(video_id) == "v2"

    result = pipeline.aggregate(
        [make_channel()], FakeFetcher(default=videos), seven_days(), set(), BarrierChecker(), now=NOW
    )

    assert ids(result) == ["v0", "v1", "v3"]
