"""Grouped media: albums and message media edits.

Items are serialized to JSON in input order. A local file is uploaded as the
part ``file{index}`` (``index`` being the item's position) and referenced from
the JSON as ``attach://file{index}``; a remote reference stays a literal URL
or ``file_id``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from botwire.descriptors import encode_json, is_omitted
from botwire.exceptions import InvalidArgumentError
from botwire.files import InputFile, LocalFile, RemoteFile
from botwire.models import MessageEntity
from botwire.multipart import MultipartPart
from botwire.options import ParseMode

MIN_GROUP_SIZE = 2
MAX_GROUP_SIZE = 10

ATTACH_SCHEME = "attach://"


class InputMedia(BaseModel):
    """Common fields of every media item."""

    type: str
    media: Optional[InputFile] = None
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = None

    model_config = {"populate_by_name": True}


class InputMediaPhoto(InputMedia):
    type: Literal["photo"] = "photo"


class InputMediaVideo(InputMedia):
    type: Literal["video"] = "video"
    thumb: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    supports_streaming: Optional[bool] = None


class InputMediaAnimation(InputMedia):
    """Animations can replace message media but cannot be grouped."""

    type: Literal["animation"] = "animation"
    thumb: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None


class InputMediaAudio(InputMedia):
    type: Literal["audio"] = "audio"
    thumb: Optional[str] = None
    duration: Optional[int] = None
    performer: Optional[str] = None
    title: Optional[str] = None


class InputMediaDocument(InputMedia):
    type: Literal["document"] = "document"
    thumb: Optional[str] = None
    disable_content_type_detection: Optional[bool] = None


# kinds that may appear in an album
GroupableMedia = Union[InputMediaPhoto, InputMediaVideo, InputMediaAudio, InputMediaDocument]
_GROUPABLE = (InputMediaPhoto, InputMediaVideo, InputMediaAudio, InputMediaDocument)


def part_name(index: int) -> str:
    return f"file{index}"


def _resolve_item(item: InputMedia, index: int) -> Tuple[Dict[str, Any], Optional[MultipartPart]]:
    media = item.media
    if media is None or media.is_empty:
        raise InvalidArgumentError(f"media item {index} has no file")

    if isinstance(media, LocalFile):
        name = part_name(index)
        reference = ATTACH_SCHEME + name
        part = MultipartPart(name=name, content=media.content, filename=media.filename)
    elif isinstance(media, RemoteFile):
        reference = media.ref
        part = None
    else:
        raise InvalidArgumentError(f"media item {index}: unsupported file reference {type(media).__name__}")

    entry: Dict[str, Any] = {"type": item.type, "media": reference}
    for key, value in item.model_dump(mode="json", exclude={"type", "media"}, exclude_none=True, by_alias=True).items():
        if not is_omitted(value):
            entry[key] = value
    return entry, part


def resolve_group(items: Sequence[GroupableMedia]) -> Tuple[str, List[MultipartPart]]:
    """Resolve an album into its JSON array and the parts of its local files.

    Returns:
        ``(json_array, local_parts)``: one JSON element per item and one part
        per local item, both in input order.

    Raises:
        InvalidArgumentError: *items* is empty, holds more than
            :data:`MAX_GROUP_SIZE` entries, an item has no file, or an item is
            of a kind that cannot be grouped (animations).
        EncodingError: An item's metadata cannot be JSON-encoded.
    """
    if not items:
        raise InvalidArgumentError("a media group needs at least one item")
    if len(items) > MAX_GROUP_SIZE:
        raise InvalidArgumentError(f"a media group holds at most {MAX_GROUP_SIZE} items, got {len(items)}")

    entries = []
    parts = []
    for index, item in enumerate(items):
        if not isinstance(item, _GROUPABLE):
            raise InvalidArgumentError(f"media item {index}: {item.type!r} cannot be part of a media group")
        entry, part = _resolve_item(item, index)
        entries.append(entry)
        if part is not None:
            parts.append(part)
    return encode_json(entries), parts


def resolve_single(item: InputMedia) -> Tuple[str, List[MultipartPart]]:
    """Resolve one item into a JSON object, for replacing a message's media."""
    entry, part = _resolve_item(item, 0)
    return encode_json(entry), [part] if part is not None else []
