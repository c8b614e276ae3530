"""Shorts detection via the ``/shorts/<id>`` endpoint."""

import http.client
import urllib.error
import urllib.request

from .models import VideoId

SHORTS_URL_TEMPLATE = "https://www.youtube.com/shorts/{video_id}"
DEFAULT_TIMEOUT = 10.0


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Surface redirects as HTTPError instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def build_opener() -> urllib.request.OpenerDirector:
    return urllib.request.build_opener(_NoRedirectHandler)


class HttpShortsChecker:
    """Classify a video as a Short when YouTube serves its ``/shorts`` page.

    Regular videos redirect to ``/watch``. Any failure counts as "not a Short"
    so a flaky network never hides a video.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, opener=None) -> None:
        self.timeout = timeout
        self._opener = opener if opener is not None else build_opener()

    def is_short(self, video_id: VideoId) -> bool:
        url = SHORTS_URL_TEMPLATE.format(video_id=video_id)
        request = urllib.request.Request(url, method="HEAD")
        try:
            with self._opener.open(request, timeout=self.timeout) as response:
                return response.status == 200
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError):
            return False
