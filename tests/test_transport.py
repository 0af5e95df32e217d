"""Tests for the requests-based transport."""

import sys
import os
from unittest.mock import patch, MagicMock

import pytest
import requests as req_lib

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.exceptions import TransportError
from botwire.files import InputFile
from botwire.multipart import compose
from botwire.transport import Transport


def _response(content: bytes = b'{"ok":true,"result":true}', ok: bool = True, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status_code
    resp.content = content
    return resp


class TestTransport:
    """GET, form POST, multipart POST and download."""

    def test_default_timeout(self) -> None:
        assert Transport().timeout == 10

    @patch("botwire.transport.requests.get")
    def test_get(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _response(b"body")
        assert Transport(timeout=3).get("https://api.example.com/botT/getMe") == b"body"
        mock_get.assert_called_once_with("https://api.example.com/botT/getMe", timeout=3)

    @patch("botwire.transport.requests.get")
    def test_get_returns_error_bodies(self, mock_get: MagicMock) -> None:
        """Status codes are not checked: the envelope carries the failure."""
        mock_get.return_value = _response(b'{"ok":false,"error_code":400}', ok=False, status_code=400)
        assert Transport().get("https://api.example.com/botT/getMe") == b'{"ok":false,"error_code":400}'

    @patch("botwire.transport.requests.post")
    def test_post_form(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _response()
        Transport().post_form("https://api.example.com/botT/setWebhook", {"url": "https://hook"})
        assert mock_post.call_args.kwargs["data"] == {"url": "https://hook"}

    @patch("botwire.transport.requests.post")
    def test_post_multipart(self, mock_post: MagicMock) -> None:
        mock_post.return_value = _response()
        body = compose("photo", InputFile.from_bytes(b"img", "a.jpg"))
        Transport().post_multipart("https://api.example.com/botT/sendPhoto", body)
        assert mock_post.call_args.kwargs["files"] == [("photo", ("a.jpg", b"img"))]

    @patch("botwire.transport.requests.get")
    def test_network_error_wrapped(self, mock_get: MagicMock) -> None:
        mock_get.side_effect = req_lib.ConnectionError("cannot reach /bot123:SECRET/getMe")
        with pytest.raises(TransportError) as exc_info:
            Transport(secret="123:SECRET").get("https://api.example.com/bot123:SECRET/getMe")
        assert "123:SECRET" not in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, req_lib.ConnectionError)

    @patch("botwire.transport.requests.get")
    def test_download(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _response(b"\x00\x01")
        assert Transport().download("https://api.example.com/file/botT/photos/1.jpg") == b"\x00\x01"

    @patch("botwire.transport.requests.get")
    def test_download_non_2xx(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _response(b"not found", ok=False, status_code=404)
        with pytest.raises(TransportError):
            Transport().download("https://api.example.com/file/botT/missing")
