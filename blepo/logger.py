"""Console logging helpers and the yt-dlp logger adapter."""

import sys
from datetime import datetime
from typing import List, Optional, TextIO


def log_with_timestamp(message: str, file: Optional[TextIO] = None) -> None:
    """Print a log message with timestamp."""
    stream = file if file is not None else sys.stderr
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}", file=stream)
    stream.flush()


def warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


class YtDlpLogger:
    """Logger object handed to yt-dlp.

    Keeps yt-dlp quiet, hides warnings that are expected when listing a
    channel tab, and remembers error messages so the fetcher can report
    them once the extraction fails.
    """

    IGNORED_FRAGMENTS = (
        "does not have a shorts tab",
        "falling back to generic n function search",
        "approximate_date",
    )

    def __init__(self, channel_name: Optional[str] = None, verbose: bool = False) -> None:
        self.channel_name = channel_name
        self.verbose = verbose
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def _format_with_context(self, message: str) -> str:
        if self.channel_name:
            return f"[yt-dlp channel={self.channel_name}] {message}"
        return f"[yt-dlp] {message}"

    def _is_ignored(self, text: str) -> bool:
        lowered = text.lower()
        return any(fragment in lowered for fragment in self.IGNORED_FRAGMENTS)

    @staticmethod
    def _ensure_text(message) -> str:
        if isinstance(message, bytes):
            return message.decode("utf-8", "ignore")
        return str(message)

    def debug(self, message) -> None:  # yt-dlp calls this
        pass

    def info(self, message) -> None:
        if self.verbose:
            print(self._format_with_context(self._ensure_text(message)), file=sys.stderr)

    def warning(self, message) -> None:
        text = self._ensure_text(message)
        if self._is_ignored(text):
            return
        self.warnings.append(text)
        if self.verbose:
            print(self._format_with_context(text), file=sys.stderr)

    def error(self, message) -> None:
        self.errors.append(self._ensure_text(message))

    def last_error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None
