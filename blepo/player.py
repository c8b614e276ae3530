"""mpv-backed video player."""

import shutil
import subprocess

from .errors import PlayError

REQUIRED_BINARIES = ("mpv", "yt-dlp")


def check_dependency(name: str) -> None:
    """Raise :class:`PlayError` when executable *name* is not on PATH."""
    if shutil.which(name) is None:
        raise PlayError(f"{name} is not installed. Install it with: brew install {name}")


class MpvPlayer:
    """Launch mpv in the background; mpv resolves YouTube URLs through yt-dlp."""

    def __init__(self) -> None:
        for name in REQUIRED_BINARIES:
            check_dependency(name)

    def play(self, url: str) -> None:
        try:
            subprocess.Popen(
                ["mpv", url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise PlayError(f"failed to launch mpv: {exc}") from exc
