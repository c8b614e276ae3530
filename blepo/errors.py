"""Exception hierarchy for the video aggregator."""

from enum import Enum
from typing import Optional


class BlepoError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(BlepoError, ValueError):
    """Raised when a value object is constructed from invalid input."""


class ChannelIdReason(Enum):
    EMPTY = "channel ID cannot be empty"
    INVALID_PREFIX = "channel ID must start with 'UC'"


class ChannelIdError(ValidationError):
    def __init__(self, reason: ChannelIdReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class VideoIdError(ValidationError):
    def __init__(self) -> None:
        super().__init__("video ID cannot be empty")


class FetchWindowError(ValidationError):
    def __init__(self) -> None:
        super().__init__("fetch_window_days must be a positive integer")


class SelectionIndexError(ValidationError):
    def __init__(self) -> None:
        super().__init__("video number must be at least 1")


class FetchError(BlepoError):
    """Raised by a feed fetcher when a channel cannot be retrieved."""


class NetworkError(FetchError):
    def __init__(self, message: str) -> None:
        super().__init__(f"network error: {message}")
        self.detail = message


class StatusError(FetchError):
    """Non-success HTTP status from the upstream service."""

    def __init__(self, status: int, url: Optional[str] = None) -> None:
        super().__init__(f"HTTP {status} from YouTube")
        self.status = status
        self.url = url


class ParseError(FetchError):
    def __init__(self, message: str) -> None:
        super().__init__(f"parse error: {message}")
        self.detail = message


class StoreError(BlepoError):
    """Raised when watched state cannot be read or persisted."""


class StoreReadError(StoreError):
    def __init__(self, message: str) -> None:
        super().__init__(f"store read error: {message}")


class StoreWriteError(StoreError):
    def __init__(self, message: str) -> None:
        super().__init__(f"store write error: {message}")


class PlayError(BlepoError):
    def __init__(self, message: str) -> None:
        super().__init__(f"player failed: {message}")


class ConfigError(BlepoError):
    """Raised when the configuration file is missing or invalid."""
