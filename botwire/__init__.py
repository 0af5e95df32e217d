"""botwire — a typed client for the Telegram Bot API.

The request-construction core turns options records into query strings and
multipart bodies; :class:`BotClient` wraps every Bot API call on top of it.

Usage::

    from botwire import BotClient, InputFile
    from botwire.options import PhotoOptions

    client = BotClient.from_env()
    client.send_photo(42, InputFile.from_path("cat.jpg"), PhotoOptions(caption="hi"))
"""

from botwire.client import BotClient
from botwire.envelope import APIResponse, check
from botwire.exceptions import (
    APIException,
    BotwireError,
    DecodeError,
    EncodingError,
    InvalidArgumentError,
    TransportError,
)
from botwire.files import InputFile, LocalFile, RemoteFile
from botwire.media_group import resolve_group
from botwire.multipart import MultipartBody, MultipartPart, compose, requires_multipart
from botwire.query import serialize

__all__ = [
    "BotClient",
    # Core
    "serialize",
    "requires_multipart",
    "compose",
    "resolve_group",
    "check",
    "APIResponse",
    "MultipartBody",
    "MultipartPart",
    # Files
    "InputFile",
    "LocalFile",
    "RemoteFile",
    # Errors
    "BotwireError",
    "APIException",
    "DecodeError",
    "EncodingError",
    "InvalidArgumentError",
    "TransportError",
]
