"""Response envelope — the ``{ok, result | error_code, description}`` wrapper."""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from botwire.exceptions import APIException, DecodeError
from botwire.models import ResponseParameters

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Outer wrapper of every Bot API response.

    ``ok`` is True exactly when ``result`` is set; failures carry
    ``error_code`` and ``description`` instead.
    """

    ok: bool
    result: Optional[T] = None
    error_code: Optional[int] = None
    description: Optional[str] = None
    parameters: Optional[ResponseParameters] = None

    model_config = {"populate_by_name": True}


def decode(raw: bytes, result_type: Any = Any) -> APIResponse:
    """Parse a response body into ``APIResponse[result_type]``.

    Raises:
        DecodeError: *raw* is not JSON or does not match the envelope.
    """
    try:
        return APIResponse[result_type].model_validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(f"malformed Bot API response: {exc.error_count()} validation error(s)") from exc


def check(envelope: APIResponse) -> None:
    """Return silently on success; raise :class:`APIException` on failure.

    The platform's code and description are carried verbatim. Specific codes
    (rate limits, missing rights) are not interpreted here.
    """
    if envelope.ok:
        return
    raise APIException(envelope.error_code, envelope.description, envelope.parameters)
