"""Options records for every Bot API call.

Each model lists the optional parameters one call (or family of calls)
recognises. Only fields that are set travel on the wire; see
:mod:`botwire.descriptors` for the omission and encoding rules.
"""

from __future__ import annotations

import enum
from typing import List, Optional, Union

from botwire.descriptors import Options, file_field, json_field, nested_field, scalar_field
from botwire.files import InputFile
from botwire.models import (
    BotCommandScope,
    ForceReply,
    InlineKeyboardMarkup,
    MessageEntity,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

ReplyMarkup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove, ForceReply]


class ParseMode(str, enum.Enum):
    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


class ChatAction(str, enum.Enum):
    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"
    RECORD_VIDEO = "record_video"
    UPLOAD_VIDEO = "upload_video"
    RECORD_VOICE = "record_voice"
    UPLOAD_VOICE = "upload_voice"
    UPLOAD_DOCUMENT = "upload_document"
    CHOOSE_STICKER = "choose_sticker"
    FIND_LOCATION = "find_location"
    RECORD_VIDEO_NOTE = "record_video_note"
    UPLOAD_VIDEO_NOTE = "upload_video_note"


class DiceEmoji(str, enum.Enum):
    DIE = "🎲"
    DARTS = "🎯"
    BASKETBALL = "🏀"
    FOOTBALL = "⚽"
    SLOT_MACHINE = "🎰"
    BOWLING = "🎳"


class PollType(str, enum.Enum):
    REGULAR = "regular"
    QUIZ = "quiz"


# ── Updates & webhook ────────────────────────────────────────────────────────


class UpdateOptions(Options):
    offset: Optional[int] = None
    limit: Optional[int] = None
    timeout: Optional[int] = None
    allowed_updates: Optional[List[str]] = json_field()


class WebhookOptions(Options):
    """A local ``certificate`` turns ``setWebhook`` into a multipart upload."""

    certificate: Optional[InputFile] = file_field()
    ip_address: Optional[str] = None
    max_connections: Optional[int] = None
    allowed_updates: Optional[List[str]] = json_field()


# ── Sending messages ─────────────────────────────────────────────────────────


class BaseOptions(Options):
    """Fields shared by every call that sends a new message."""

    disable_notification: bool = False
    protect_content: bool = False
    reply_to_message_id: Optional[int] = None
    allow_sending_without_reply: bool = False
    reply_markup: Optional[ReplyMarkup] = json_field()


class MessageOptions(BaseOptions):
    parse_mode: Optional[ParseMode] = None
    entities: Optional[List[MessageEntity]] = json_field()
    disable_web_page_preview: bool = False


class ForwardOptions(Options):
    disable_notification: bool = False
    protect_content: bool = False


class CopyOptions(BaseOptions):
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()


class PhotoOptions(BaseOptions):
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()


class AudioOptions(BaseOptions):
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()
    duration: Optional[int] = None
    performer: Optional[str] = None
    title: Optional[str] = None
    thumb: Optional[InputFile] = file_field()


class DocumentOptions(BaseOptions):
    thumb: Optional[InputFile] = file_field()
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()
    disable_content_type_detection: bool = False


class VideoOptions(BaseOptions):
    duration: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    thumb: Optional[InputFile] = file_field()
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()
    supports_streaming: bool = False


class AnimationOptions(BaseOptions):
    duration: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    thumb: Optional[InputFile] = file_field()
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()


class VoiceOptions(BaseOptions):
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()
    duration: Optional[int] = None


class VideoNoteOptions(BaseOptions):
    duration: Optional[int] = None
    length: Optional[int] = None
    thumb: Optional[InputFile] = file_field()


class MediaGroupOptions(Options):
    disable_notification: bool = False
    protect_content: bool = False
    reply_to_message_id: Optional[int] = None
    allow_sending_without_reply: bool = False


class LocationOptions(BaseOptions):
    horizontal_accuracy: Optional[float] = None
    live_period: Optional[int] = None
    heading: Optional[int] = None
    proximity_alert_radius: Optional[int] = None


class EditLocationOptions(Options):
    horizontal_accuracy: Optional[float] = None
    heading: Optional[int] = None
    proximity_alert_radius: Optional[int] = None
    reply_markup: Optional[InlineKeyboardMarkup] = json_field()


class VenueOptions(BaseOptions):
    foursquare_id: Optional[str] = None
    foursquare_type: Optional[str] = None
    google_place_id: Optional[str] = None
    google_place_type: Optional[str] = None


class ContactOptions(BaseOptions):
    last_name: Optional[str] = None
    vcard: Optional[str] = None


class PollOptions(BaseOptions):
    """Options of ``sendPoll``.

    ``is_anonymous`` defaults to True on the platform, so it is only sent when
    set to False. ``correct_option_id`` keeps ``0``, the first answer.
    """

    is_anonymous: bool = True
    type: Optional[PollType] = None
    allows_multiple_answers: bool = False
    correct_option_id: Optional[int] = scalar_field(keep_zero=True)
    explanation: Optional[str] = None
    explanation_parse_mode: Optional[ParseMode] = None
    explanation_entities: Optional[List[MessageEntity]] = json_field()
    open_period: Optional[int] = None
    close_date: Optional[int] = None
    is_closed: bool = False


# ── Files & members ──────────────────────────────────────────────────────────


class UserProfileOptions(Options):
    offset: Optional[int] = None
    limit: Optional[int] = None


class BanOptions(Options):
    until_date: Optional[int] = None
    revoke_messages: bool = False


class UnbanOptions(Options):
    only_if_banned: bool = False


class RestrictOptions(Options):
    until_date: Optional[int] = None


class AdministratorRights(Options):
    is_anonymous: bool = False
    can_manage_chat: bool = False
    can_post_messages: bool = False
    can_edit_messages: bool = False
    can_delete_messages: bool = False
    can_manage_voice_chats: bool = False
    can_restrict_members: bool = False
    can_promote_members: bool = False
    can_change_info: bool = False
    can_invite_users: bool = False
    can_pin_messages: bool = False


class PromoteOptions(Options):
    """The rights are sent as flat ``can_*`` parameters."""

    rights: Optional[AdministratorRights] = nested_field()


class InviteLinkOptions(Options):
    name: Optional[str] = None
    expire_date: Optional[int] = None
    member_limit: Optional[int] = None
    creates_join_request: bool = False


class PinMessageOptions(Options):
    disable_notification: bool = False


# ── Interaction ──────────────────────────────────────────────────────────────


class CallbackQueryOptions(Options):
    text: Optional[str] = None
    show_alert: bool = False
    url: Optional[str] = None
    cache_time: Optional[int] = None


class CommandOptions(Options):
    scope: Optional[BotCommandScope] = json_field()
    language_code: Optional[str] = None


# ── Editing ──────────────────────────────────────────────────────────────────


class MessageIDOptions(Options):
    """Target of an edit: ``chat_id`` + ``message_id``, or ``inline_message_id``."""

    chat_id: Optional[Union[int, str]] = None
    message_id: Optional[int] = None
    inline_message_id: Optional[str] = None


class MessageTextOptions(Options):
    parse_mode: Optional[ParseMode] = None
    entities: Optional[List[MessageEntity]] = json_field()
    disable_web_page_preview: bool = False
    reply_markup: Optional[InlineKeyboardMarkup] = json_field()


class MessageCaptionOptions(Options):
    caption: Optional[str] = None
    parse_mode: Optional[ParseMode] = None
    caption_entities: Optional[List[MessageEntity]] = json_field()
    reply_markup: Optional[InlineKeyboardMarkup] = json_field()


class MessageReplyMarkup(Options):
    reply_markup: Optional[InlineKeyboardMarkup] = json_field()
