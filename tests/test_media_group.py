"""Tests for the grouped-media resolver."""

import json
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.exceptions import InvalidArgumentError
from botwire.files import InputFile
from botwire.media_group import (
    MAX_GROUP_SIZE,
    InputMediaAnimation,
    InputMediaAudio,
    InputMediaDocument,
    InputMediaPhoto,
    InputMediaVideo,
    resolve_group,
    resolve_single,
)
from botwire.models import MessageEntity
from botwire.options import ParseMode


def _local(name: str) -> InputFile:
    return InputFile.from_bytes(f"bytes-of-{name}".encode(), name)


# ── resolve_group ────────────────────────────────────────────────────────────


class TestResolveGroup:
    """attach:// naming, ordering and part bookkeeping."""

    def test_mixed_group(self) -> None:
        items = [
            InputMediaPhoto(media=_local("a.jpg"), caption="first"),
            InputMediaPhoto(media=InputFile.from_url("https://example.com/b.jpg")),
            InputMediaVideo(media=_local("c.mp4")),
        ]
        payload, parts = resolve_group(items)
        entries = json.loads(payload)

        assert [entry["media"] for entry in entries] == [
            "attach://file0",
            "https://example.com/b.jpg",
            "attach://file2",
        ]
        assert [part.name for part in parts] == ["file0", "file2"]
        assert parts[0].content == b"bytes-of-a.jpg"
        assert parts[0].filename == "a.jpg"
        assert parts[1].content == b"bytes-of-c.mp4"

    def test_order_and_counts(self) -> None:
        items = [
            InputMediaDocument(media=InputFile.from_id(f"doc{i}")) if i % 2 else InputMediaDocument(media=_local(f"{i}.pdf"))
            for i in range(7)
        ]
        payload, parts = resolve_group(items)
        entries = json.loads(payload)

        assert len(entries) == len(items)
        assert len(parts) == sum(1 for item in items if item.media.is_local)
        for index, entry in enumerate(entries):
            if items[index].media.is_local:
                assert entry["media"] == f"attach://file{index}"
            else:
                assert entry["media"] == f"doc{index}"

    def test_remote_never_produces_parts(self) -> None:
        items = [InputMediaPhoto(media=InputFile.from_id("x")), InputMediaPhoto(media=InputFile.from_id("y"))]
        payload, parts = resolve_group(items)
        assert parts == []
        assert json.loads(payload) == [{"type": "photo", "media": "x"}, {"type": "photo", "media": "y"}]

    def test_metadata_copied_and_zero_values_dropped(self) -> None:
        item = InputMediaVideo(
            media=InputFile.from_id("vid"),
            caption="*clip*",
            parse_mode=ParseMode.MARKDOWN_V2,
            caption_entities=[MessageEntity(type="bold", offset=0, length=4)],
            width=640,
            height=0,
            supports_streaming=False,
        )
        (entry,) = json.loads(resolve_group([item])[0])
        assert entry == {
            "type": "video",
            "media": "vid",
            "caption": "*clip*",
            "parse_mode": "MarkdownV2",
            "caption_entities": [{"type": "bold", "offset": 0, "length": 4}],
            "width": 640,
        }

    def test_type_discriminant(self) -> None:
        items = [InputMediaAudio(media=InputFile.from_id("a"), title="Song"), InputMediaAudio(media=InputFile.from_id("b"))]
        entries = json.loads(resolve_group(items)[0])
        assert entries[0] == {"type": "audio", "media": "a", "title": "Song"}

    def test_empty_group_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            resolve_group([])

    def test_oversized_group_raises(self) -> None:
        items = [InputMediaPhoto(media=InputFile.from_id(str(i))) for i in range(MAX_GROUP_SIZE + 1)]
        with pytest.raises(InvalidArgumentError):
            resolve_group(items)

    @pytest.mark.parametrize("media", [None, InputFile.from_bytes(b""), InputFile.from_id("")])
    def test_item_without_file_raises(self, media) -> None:
        with pytest.raises(InvalidArgumentError):
            resolve_group([InputMediaPhoto(media=InputFile.from_id("ok")), InputMediaPhoto(media=media)])

    def test_animation_cannot_be_grouped(self) -> None:
        items = [InputMediaAnimation(media=InputFile.from_id("a")), InputMediaPhoto(media=InputFile.from_id("b"))]
        with pytest.raises(InvalidArgumentError):
            resolve_group(items)


# ── resolve_single ───────────────────────────────────────────────────────────


class TestResolveSingle:
    """One item rendered as a JSON object."""

    def test_local(self) -> None:
        payload, parts = resolve_single(InputMediaPhoto(media=_local("new.jpg"), caption="updated"))
        assert json.loads(payload) == {"type": "photo", "media": "attach://file0", "caption": "updated"}
        assert [part.name for part in parts] == ["file0"]

    def test_remote(self) -> None:
        payload, parts = resolve_single(InputMediaDocument(media=InputFile.from_url("https://example.com/x.pdf")))
        assert json.loads(payload) == {"type": "document", "media": "https://example.com/x.pdf"}
        assert parts == []

    def test_animation_allowed(self) -> None:
        payload, parts = resolve_single(InputMediaAnimation(media=InputFile.from_id("gif"), width=320))
        assert json.loads(payload) == {"type": "animation", "media": "gif", "width": 320}
        assert parts == []
