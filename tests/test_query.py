"""Tests for option descriptors and the query serializer."""

import json
import sys
import os
from typing import Any, Optional
from urllib.parse import parse_qsl

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.descriptors import FieldKind, Options, field_table, format_scalar, json_field
from botwire.exceptions import EncodingError, InvalidArgumentError
from botwire.files import InputFile
from botwire.models import InlineKeyboardButton, InlineKeyboardMarkup, MessageEntity
from botwire.options import (
    AdministratorRights,
    AudioOptions,
    LocationOptions,
    MessageOptions,
    ParseMode,
    PhotoOptions,
    PollOptions,
    PromoteOptions,
    UpdateOptions,
)
from botwire.query import form_fields, join, serialize, serialize_params
from botwire.descriptors import describe


class _AnyPayload(Options):
    payload: Optional[Any] = json_field()


# ── Omission ─────────────────────────────────────────────────────────────────


class TestOmission:
    """Fields at their default value never reach the wire."""

    def test_none_yields_empty_string(self) -> None:
        assert serialize(None) == ""

    def test_all_defaults_yield_empty_string(self) -> None:
        assert serialize(PhotoOptions()) == ""
        assert serialize(MessageOptions()) == ""
        assert serialize(UpdateOptions()) == ""

    def test_only_caption(self) -> None:
        assert serialize(PhotoOptions(caption="hi")) == "caption=hi"

    def test_empty_string_and_zero_skipped(self) -> None:
        assert serialize(PhotoOptions(caption="", reply_to_message_id=0)) == ""
        assert serialize(UpdateOptions(offset=0, limit=10)) == "limit=10"

    def test_empty_list_skipped(self) -> None:
        assert serialize(UpdateOptions(allowed_updates=[])) == ""

    def test_false_bool_skipped(self) -> None:
        assert serialize(MessageOptions(disable_notification=False)) == ""

    def test_true_default_only_sent_as_false(self) -> None:
        assert serialize(PollOptions()) == ""
        assert serialize(PollOptions(is_anonymous=True)) == ""
        assert serialize(PollOptions(is_anonymous=False)) == "is_anonymous=false"

    def test_keep_zero_field(self) -> None:
        assert serialize(PollOptions(correct_option_id=0)) == "correct_option_id=0"

    def test_descriptors_report_presence(self) -> None:
        descriptors = PhotoOptions(caption="hi").descriptors()
        present = [d.name for d in descriptors if d.present]
        assert present == ["caption"]
        assert len(descriptors) == len(PhotoOptions.model_fields)


# ── Ordering & determinism ───────────────────────────────────────────────────


class TestOrdering:
    """Output follows field declaration order and is deterministic."""

    def test_declaration_order(self) -> None:
        opts = MessageOptions(disable_web_page_preview=True, parse_mode=ParseMode.HTML, disable_notification=True)
        assert serialize(opts) == "disable_notification=true&parse_mode=HTML&disable_web_page_preview=true"

    def test_deterministic(self) -> None:
        opts = PhotoOptions(caption="x", reply_to_message_id=7, protect_content=True)
        assert serialize(opts) == serialize(opts)
        assert serialize(opts) == serialize(PhotoOptions(reply_to_message_id=7, caption="x", protect_content=True))

    def test_field_table_is_cached(self) -> None:
        assert field_table(PhotoOptions) is field_table(PhotoOptions)


# ── Value rendering ──────────────────────────────────────────────────────────


class TestValues:
    """Scalars, JSON values, files and nested options."""

    def test_percent_encoding(self) -> None:
        assert serialize(PhotoOptions(caption="a b&c=d")) == "caption=a+b%26c%3Dd"

    def test_enum_uses_value(self) -> None:
        assert serialize(MessageOptions(parse_mode=ParseMode.MARKDOWN_V2)) == "parse_mode=MarkdownV2"

    def test_float_fixed_point(self) -> None:
        assert serialize(LocationOptions(horizontal_accuracy=1.5)) == "horizontal_accuracy=1.5"
        assert serialize(LocationOptions(horizontal_accuracy=1e-07)) == "horizontal_accuracy=0.0000001"

    def test_format_scalar(self) -> None:
        assert format_scalar(True) == "true"
        assert format_scalar(False) == "false"
        assert format_scalar(-100123) == "-100123"
        assert format_scalar(1e16) == "10000000000000000"

    def test_non_finite_float_raises(self) -> None:
        with pytest.raises(EncodingError):
            format_scalar(float("nan"))

    def test_json_list(self) -> None:
        result = serialize(UpdateOptions(allowed_updates=["message", "callback_query"]))
        assert parse_qsl(result) == [("allowed_updates", '["message","callback_query"]')]

    def test_json_model_drops_none(self) -> None:
        markup = InlineKeyboardMarkup(inline_keyboard=[[InlineKeyboardButton(text="Go", callback_data="go")]])
        ((key, value),) = parse_qsl(serialize(MessageOptions(reply_markup=markup)))
        assert key == "reply_markup"
        assert json.loads(value) == {"inline_keyboard": [[{"text": "Go", "callback_data": "go"}]]}

    def test_json_entities(self) -> None:
        opts = PhotoOptions(caption="bold", caption_entities=[MessageEntity(type="bold", offset=0, length=4)])
        pairs = dict(parse_qsl(serialize(opts)))
        assert json.loads(pairs["caption_entities"]) == [{"type": "bold", "offset": 0, "length": 4}]

    def test_unencodable_json_raises(self) -> None:
        with pytest.raises(EncodingError):
            serialize(_AnyPayload(payload=object()))

    def test_nested_options_flattened(self) -> None:
        opts = PromoteOptions(rights=AdministratorRights(can_pin_messages=True, can_invite_users=True))
        assert serialize(opts) == "can_invite_users=true&can_pin_messages=true"

    def test_empty_nested_options(self) -> None:
        assert serialize(PromoteOptions(rights=AdministratorRights())) == ""

    def test_remote_file_field(self) -> None:
        assert serialize(AudioOptions(thumb=InputFile.from_id("AgADthumb"))) == "thumb=AgADthumb"

    def test_local_file_field_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            serialize(AudioOptions(thumb=InputFile.from_bytes(b"\x89PNG", "t.png")))

    def test_descriptor_kinds(self) -> None:
        kinds = {d.name: d.kind for d in AudioOptions().descriptors()}
        assert kinds["caption"] is FieldKind.SCALAR
        assert kinds["reply_markup"] is FieldKind.JSON
        assert kinds["thumb"] is FieldKind.FILE
        assert {d.name: d.kind for d in PromoteOptions().descriptors()} == {"rights": FieldKind.NESTED}

    def test_describe_flattens(self) -> None:
        opts = PromoteOptions(rights=AdministratorRights(can_manage_chat=True))
        assert [d.name for d in describe(opts)] == ["can_manage_chat"]


# ── Positional parameters & helpers ──────────────────────────────────────────


class TestParams:
    """serialize_params, join and form_fields."""

    def test_params_skip_none_only(self) -> None:
        assert serialize_params({"chat_id": 42, "text": "hi", "x": None}) == "chat_id=42&text=hi"

    def test_params_keep_false(self) -> None:
        assert serialize_params({"drop_pending_updates": False}) == "drop_pending_updates=false"

    def test_params_json_list(self) -> None:
        assert parse_qsl(serialize_params({"options": ["a", "b"]})) == [("options", '["a","b"]')]

    def test_join_skips_empty(self) -> None:
        assert join("a=1", "", "b=2", "") == "a=1&b=2"
        assert join("", "") == ""

    def test_form_fields(self) -> None:
        assert form_fields(describe(PhotoOptions(caption="hi", disable_notification=True))) == {
            "disable_notification": "true",
            "caption": "hi",
        }
