"""Watched-video archive stored as a JSON list of video IDs."""

import contextlib
import json
import os
from typing import Iterable, Set

from .errors import StoreReadError, StoreWriteError, ValidationError
from .models import VideoId

WATCHED_FILENAME = "watched.json"


class JsonWatchedStore:
    """Persist watched video IDs in ``<data_dir>/watched.json``."""

    def __init__(self, data_dir: str) -> None:
        try:
            os.makedirs(data_dir, exist_ok=True)
        except OSError as exc:
            raise StoreWriteError(f"cannot create data dir {data_dir}: {exc}") from exc
        self.watched_path = os.path.join(data_dir, WATCHED_FILENAME)

    def load_watched(self) -> Set[VideoId]:
        try:
            with open(self.watched_path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return set()
        except json.JSONDecodeError as exc:
            raise StoreReadError(f"invalid watched json {self.watched_path}: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(f"cannot read {self.watched_path}: {exc}") from exc

        if not isinstance(data, list):
            raise StoreReadError(f"{self.watched_path} must contain a JSON list")

        for item in data:
            if not isinstance(item, str):
                raise StoreReadError(f"{self.watched_path}: video IDs must be strings, got {item!r}")
        try:
            return {VideoId.parse(item) for item in data}
        except ValidationError as exc:
            raise StoreReadError(f"{self.watched_path}: {exc}") from exc

    def mark_watched(self, video_id: VideoId) -> None:
        watched = self.load_watched()
        if video_id in watched and os.path.exists(self.watched_path):
            return
        watched.add(video_id)
        self._write(str(item) for item in watched)

    def _write(self, video_ids: Iterable[str]) -> None:
        payload = sorted(set(video_ids))
        temp_path = f"{self.watched_path}.tmp"

        try:
            with open(temp_path, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
            os.replace(temp_path, self.watched_path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.remove(temp_path)
            raise StoreWriteError(f"cannot write {self.watched_path}: {exc}") from exc
