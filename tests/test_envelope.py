"""Tests for the response envelope checker and the exception hierarchy."""

import sys
import os
from typing import List

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.envelope import APIResponse, check, decode
from botwire.exceptions import APIException, BotwireError, DecodeError
from botwire.models import Message, User


# ── APIException ─────────────────────────────────────────────────────────────


class TestAPIException:
    """Validate the API error class."""

    def test_attributes(self) -> None:
        exc = APIException(403, "Forbidden")
        assert exc.error_code == 403
        assert exc.description == "Forbidden"
        assert exc.parameters is None
        assert "403" in str(exc)
        assert "Forbidden" in str(exc)

    def test_default_description(self) -> None:
        assert "Unknown error" in str(APIException(500))

    def test_hierarchy(self) -> None:
        assert issubclass(APIException, BotwireError)
        assert issubclass(DecodeError, BotwireError)


# ── check ────────────────────────────────────────────────────────────────────


class TestCheck:
    """Success iff ok is true; failures carry the platform's code verbatim."""

    def test_ok(self) -> None:
        assert check(APIResponse(ok=True, result=True)) is None

    def test_failure(self) -> None:
        with pytest.raises(APIException) as exc_info:
            check(APIResponse(ok=False, error_code=403, description="Forbidden"))
        assert exc_info.value.error_code == 403
        assert exc_info.value.description == "Forbidden"

    def test_failure_keeps_parameters(self) -> None:
        envelope = decode(
            b'{"ok":false,"error_code":429,"description":"Too Many Requests: retry after 5",'
            b'"parameters":{"retry_after":5}}'
        )
        with pytest.raises(APIException) as exc_info:
            check(envelope)
        assert exc_info.value.error_code == 429
        assert exc_info.value.parameters.retry_after == 5


# ── decode ───────────────────────────────────────────────────────────────────


class TestDecode:
    """Typed envelopes from raw bodies."""

    def test_typed_result(self) -> None:
        envelope = decode(b'{"ok":true,"result":{"id":1,"is_bot":true,"first_name":"Bot"}}', User)
        assert envelope.ok is True
        assert envelope.result == User(id=1, is_bot=True, first_name="Bot")

    def test_list_result(self) -> None:
        raw = b'{"ok":true,"result":[{"message_id":1,"date":0,"chat":{"id":5,"type":"group"}}]}'
        envelope = decode(raw, List[Message])
        assert [m.message_id for m in envelope.result] == [1]

    def test_error_envelope_has_no_result(self) -> None:
        envelope = decode(b'{"ok":false,"error_code":400,"description":"Bad Request"}', Message)
        assert envelope.result is None
        assert envelope.error_code == 400

    @pytest.mark.parametrize("raw", [b"<html>502</html>", b"", b'{"result":true}'])
    def test_malformed(self, raw: bytes) -> None:
        with pytest.raises(DecodeError):
            decode(raw, bool)
