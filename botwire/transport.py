"""HTTP transport over :mod:`requests`.

Each primitive returns the raw response body. Bot API failures arrive as JSON
envelopes with 4xx status codes, so the status is not checked here; the
envelope is. Transport-level failures surface as :class:`TransportError`.
No retries are attempted.
"""

import logging
from typing import Dict, Optional

import requests

from botwire.exceptions import TransportError
from botwire.multipart import MultipartBody

logger = logging.getLogger("botwire.transport")


class Transport:
    """Blocking GET / form POST / multipart POST sender."""

    _DEFAULT_TIMEOUT: float = 10

    def __init__(self, timeout: float = _DEFAULT_TIMEOUT, secret: Optional[str] = None) -> None:
        """Create a sender.

        Args:
            timeout: Per-request timeout in seconds.
            secret: Text masked out of error messages (the bot token, which
                is part of every URL).
        """
        self._timeout = timeout
        self._secret = secret

    @property
    def timeout(self) -> float:
        return self._timeout

    def get(self, url: str) -> bytes:
        """Send a GET request and return the body."""
        return self._send("get", url).content

    def post_form(self, url: str, fields: Dict[str, str]) -> bytes:
        """Send a form-encoded POST and return the body."""
        return self._send("post", url, data=fields).content

    def post_multipart(self, url: str, body: MultipartBody) -> bytes:
        """Send a multipart/form-data POST and return the body."""
        return self._send("post", url, files=body.to_files()).content

    def download(self, url: str) -> bytes:
        """Fetch raw file bytes; a non-2xx status is a :class:`TransportError`."""
        response = self._send("get", url)
        if not response.ok:
            logger.error("Download failed", extra={"status_code": response.status_code})
            raise TransportError(f"download failed with HTTP {response.status_code}")
        return response.content

    def _send(self, method: str, url: str, **kwargs: object) -> requests.Response:
        func = getattr(requests, method)
        try:
            return func(url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            # the URL embeds the bot token, never log it
            logger.error("HTTP request failed", extra={"http_method": method.upper(), "error": type(exc).__name__})
            raise TransportError(self._redact(str(exc))) from exc

    def _redact(self, text: str) -> str:
        if not self._secret:
            return text
        return text.replace(self._secret, "<redacted>")
