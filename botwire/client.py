"""BotClient — one method per Bot API call.

Each method packages its parameters with the request-construction core and
returns the typed ``result`` of the response envelope:

* plain calls go out as GET requests with a query string;
* ``setWebhook`` without a local certificate is a form-encoded POST;
* any call carrying a local file becomes a multipart POST.

Failures are raised: :class:`~botwire.exceptions.APIException` when the
platform rejects the call, :class:`~botwire.exceptions.TransportError` when
the HTTP exchange fails, :class:`~botwire.exceptions.InvalidArgumentError`
when the call is rejected locally.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from botwire.descriptors import FieldKind, OptionDescriptor, describe, describe_params
from botwire.envelope import check, decode
from botwire.exceptions import APIException, InvalidArgumentError
from botwire.files import InputFile
from botwire.media_group import MIN_GROUP_SIZE, GroupableMedia, InputMedia, resolve_group, resolve_single
from botwire.models import (
    BotCommand,
    Chat,
    ChatInviteLink,
    ChatMember,
    ChatPermissions,
    File,
    Message,
    MessageId,
    Poll,
    Update,
    User,
    UserProfilePhotos,
    WebhookInfo,
)
from botwire.multipart import MultipartPart, assemble, compose, field_parts, requires_multipart
from botwire.options import (
    AnimationOptions,
    AudioOptions,
    BanOptions,
    BaseOptions,
    CallbackQueryOptions,
    ChatAction,
    CommandOptions,
    ContactOptions,
    CopyOptions,
    DiceEmoji,
    DocumentOptions,
    EditLocationOptions,
    ForwardOptions,
    InviteLinkOptions,
    LocationOptions,
    MediaGroupOptions,
    MessageCaptionOptions,
    MessageIDOptions,
    MessageOptions,
    MessageReplyMarkup,
    MessageTextOptions,
    PhotoOptions,
    PinMessageOptions,
    PollOptions,
    PromoteOptions,
    RestrictOptions,
    UnbanOptions,
    UpdateOptions,
    UserProfileOptions,
    VenueOptions,
    VideoNoteOptions,
    VideoOptions,
    VoiceOptions,
    WebhookOptions,
)
from botwire.query import encode, form_fields, join, serialize, serialize_params
from botwire.transport import Transport

logger = logging.getLogger("botwire.client")

ChatID = Union[int, str]
# edits of inline messages return True instead of the message
EditResult = Union[Message, bool]


class BotClient:
    """Client for the Bot API.

    All methods are synchronous and share no mutable state, so one client can
    be used from several threads.
    """

    _DEFAULT_TIMEOUT: float = 10
    _DEFAULT_API_ROOT: str = "https://api.telegram.org"

    def __init__(
        self,
        token: str,
        api_root: str = _DEFAULT_API_ROOT,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[Transport] = None,
    ) -> None:
        """Create a client for the bot identified by *token*.

        Args:
            token: Bot token issued by the platform.
            api_root: Bot API server root, for self-hosted servers.
            timeout: Default request timeout in seconds.
            transport: Custom sender; a :class:`Transport` is built otherwise.
        """
        root = api_root.rstrip("/")
        self._base_url = f"{root}/bot{token}/"
        self._file_url = f"{root}/file/bot{token}/"
        self._transport = transport or Transport(timeout, secret=token)

    @classmethod
    def from_env(cls) -> "BotClient":
        """Build a client from ``BOT_TOKEN`` and friends (see :mod:`config`)."""
        from config import API_ROOT, BOT_TOKEN, REQUEST_TIMEOUT  # deferred: loads .env on import

        if not BOT_TOKEN:
            raise InvalidArgumentError("BOT_TOKEN is not set")
        return cls(BOT_TOKEN, api_root=API_ROOT, timeout=REQUEST_TIMEOUT)

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def _url(self, method: str, *queries: str) -> str:
        query = join(*queries)
        return f"{self._base_url}{method}?{query}" if query else f"{self._base_url}{method}"

    def _finish(self, method: str, raw: bytes, result_type: Any) -> Any:
        envelope = decode(raw, result_type)
        try:
            check(envelope)
        except APIException as exc:
            logger.warning(
                "Bot API rejected request",
                extra={"api_endpoint": method, "error_code": exc.error_code, "description": exc.description},
            )
            raise
        logger.debug("Bot API call succeeded", extra={"api_endpoint": method})
        return envelope.result

    def _get(self, method: str, result_type: Any, params: Optional[Dict[str, Any]] = None, *options: Any) -> Any:
        url = self._url(method, serialize_params(params or {}), *(serialize(opts) for opts in options))
        return self._finish(method, self._transport.get(url), result_type)

    def _upload(
        self,
        method: str,
        result_type: Any,
        slot: str,
        file: Optional[InputFile],
        params: Dict[str, Any],
        options: Any = None,
    ) -> Any:
        """Send a call whose *slot* parameter is a file.

        File-valued options (``thumb``) become auxiliary slots. When every
        reference is remote the call degrades to a plain GET.
        """
        if file is None or file.is_empty:
            raise InvalidArgumentError(f"{method}: {slot} is required")

        option_fields = describe(options)
        auxiliary = {d.name: d.value for d in option_fields if d.kind is FieldKind.FILE}
        plain_fields = [d for d in option_fields if d.kind is not FieldKind.FILE]

        if requires_multipart(file, *auxiliary.values()):
            body = compose(slot, file, auxiliary, describe_params(params) + plain_fields)
            raw = self._transport.post_multipart(self._url(method), body)
        else:
            url = self._url(method, serialize_params({**params, slot: file}), encode(option_fields))
            raw = self._transport.get(url)
        return self._finish(method, raw, result_type)

    def _send_media(
        self,
        method: str,
        result_type: Any,
        media_json: str,
        local_parts: List[MultipartPart],
        params: List[OptionDescriptor],
        options: List[OptionDescriptor],
    ) -> Any:
        """Send a call carrying a resolved ``media`` payload."""
        media = describe_params({"media": media_json})
        if local_parts:
            body = assemble([*field_parts(params), *field_parts(media), *local_parts, *field_parts(options)])
            raw = self._transport.post_multipart(self._url(method), body)
        else:
            raw = self._transport.get(self._url(method, encode(params), encode(media), encode(options)))
        return self._finish(method, raw, result_type)

    # ------------------------------------------------------------------
    #  Updates & webhook
    # ------------------------------------------------------------------

    def get_updates(self, opts: Optional[UpdateOptions] = None) -> List[Update]:
        """Receive incoming updates using long polling."""
        return self._get("getUpdates", List[Update], None, opts)

    def set_webhook(self, url: str, drop_pending_updates: bool = False, opts: Optional[WebhookOptions] = None) -> bool:
        """Specify a URL to receive incoming updates via an outgoing webhook.

        A local ``certificate`` is uploaded as a multipart part; otherwise the
        parameters are sent as a form-encoded POST.
        """
        params = describe_params({"url": url, "drop_pending_updates": drop_pending_updates})
        option_fields = describe(opts)
        certificate = next((d.value for d in option_fields if d.kind is FieldKind.FILE), None)

        if requires_multipart(certificate):
            plain_fields = [d for d in option_fields if d.kind is not FieldKind.FILE]
            body = compose("certificate", certificate, fields=params + plain_fields)
            raw = self._transport.post_multipart(self._url("setWebhook"), body)
        else:
            raw = self._transport.post_form(self._url("setWebhook"), form_fields(params + option_fields))
        return self._finish("setWebhook", raw, bool)

    def delete_webhook(self, drop_pending_updates: bool = False) -> bool:
        """Remove the webhook integration."""
        return self._get("deleteWebhook", bool, {"drop_pending_updates": drop_pending_updates})

    def get_webhook_info(self) -> WebhookInfo:
        """Get the current webhook status."""
        return self._get("getWebhookInfo", WebhookInfo)

    # ------------------------------------------------------------------
    #  Bot
    # ------------------------------------------------------------------

    def get_me(self) -> User:
        """Return basic information about the bot."""
        return self._get("getMe", User)

    def log_out(self) -> bool:
        """Log out from the cloud Bot API server."""
        return self._get("logOut", bool)

    def close(self) -> bool:
        """Close the bot instance before moving it to another local server."""
        return self._get("close", bool)

    # ------------------------------------------------------------------
    #  Sending messages
    # ------------------------------------------------------------------

    def send_message(self, chat_id: ChatID, text: str, opts: Optional[MessageOptions] = None) -> Message:
        """Send a text message."""
        return self._get("sendMessage", Message, {"chat_id": chat_id, "text": text}, opts)

    def forward_message(
        self, chat_id: ChatID, from_chat_id: ChatID, message_id: int, opts: Optional[ForwardOptions] = None
    ) -> Message:
        """Forward a message of any kind."""
        params = {"chat_id": chat_id, "from_chat_id": from_chat_id, "message_id": message_id}
        return self._get("forwardMessage", Message, params, opts)

    def copy_message(
        self, chat_id: ChatID, from_chat_id: ChatID, message_id: int, opts: Optional[CopyOptions] = None
    ) -> MessageId:
        """Copy a message without a link to the original."""
        params = {"chat_id": chat_id, "from_chat_id": from_chat_id, "message_id": message_id}
        return self._get("copyMessage", MessageId, params, opts)

    def send_photo(self, chat_id: ChatID, photo: InputFile, opts: Optional[PhotoOptions] = None) -> Message:
        """Send a photo."""
        return self._upload("sendPhoto", Message, "photo", photo, {"chat_id": chat_id}, opts)

    def send_audio(self, chat_id: ChatID, audio: InputFile, opts: Optional[AudioOptions] = None) -> Message:
        """Send an audio file to be shown in the music player."""
        return self._upload("sendAudio", Message, "audio", audio, {"chat_id": chat_id}, opts)

    def send_document(self, chat_id: ChatID, document: InputFile, opts: Optional[DocumentOptions] = None) -> Message:
        """Send a general file."""
        return self._upload("sendDocument", Message, "document", document, {"chat_id": chat_id}, opts)

    def send_video(self, chat_id: ChatID, video: InputFile, opts: Optional[VideoOptions] = None) -> Message:
        """Send a video file."""
        return self._upload("sendVideo", Message, "video", video, {"chat_id": chat_id}, opts)

    def send_animation(self, chat_id: ChatID, animation: InputFile, opts: Optional[AnimationOptions] = None) -> Message:
        """Send an animation (GIF or soundless H.264 video)."""
        return self._upload("sendAnimation", Message, "animation", animation, {"chat_id": chat_id}, opts)

    def send_voice(self, chat_id: ChatID, voice: InputFile, opts: Optional[VoiceOptions] = None) -> Message:
        """Send an OGG/OPUS file displayed as a playable voice message."""
        return self._upload("sendVoice", Message, "voice", voice, {"chat_id": chat_id}, opts)

    def send_video_note(self, chat_id: ChatID, video_note: InputFile, opts: Optional[VideoNoteOptions] = None) -> Message:
        """Send a rounded square video message."""
        return self._upload("sendVideoNote", Message, "video_note", video_note, {"chat_id": chat_id}, opts)

    def send_media_group(
        self, chat_id: ChatID, media: Sequence[GroupableMedia], opts: Optional[MediaGroupOptions] = None
    ) -> List[Message]:
        """Send 2 to 10 photos, videos, documents or audios as an album.

        Raises:
            InvalidArgumentError: Fewer than two items, more than ten, an item
                without a file, or an animation.
        """
        if len(media) < MIN_GROUP_SIZE:
            raise InvalidArgumentError(f"sendMediaGroup: at least {MIN_GROUP_SIZE} items are required, got {len(media)}")
        media_json, local_parts = resolve_group(media)
        return self._send_media(
            "sendMediaGroup", List[Message], media_json, local_parts, describe_params({"chat_id": chat_id}), describe(opts)
        )

    def send_location(
        self, chat_id: ChatID, latitude: float, longitude: float, opts: Optional[LocationOptions] = None
    ) -> Message:
        """Send a point on the map."""
        params = {"chat_id": chat_id, "latitude": latitude, "longitude": longitude}
        return self._get("sendLocation", Message, params, opts)

    def edit_message_live_location(
        self, msg: MessageIDOptions, latitude: float, longitude: float, opts: Optional[EditLocationOptions] = None
    ) -> EditResult:
        """Edit a live location message."""
        params = {"latitude": latitude, "longitude": longitude}
        return self._get("editMessageLiveLocation", EditResult, params, msg, opts)

    def stop_message_live_location(self, msg: MessageIDOptions, opts: Optional[MessageReplyMarkup] = None) -> EditResult:
        """Stop updating a live location message."""
        return self._get("stopMessageLiveLocation", EditResult, None, msg, opts)

    def send_venue(
        self,
        chat_id: ChatID,
        latitude: float,
        longitude: float,
        title: str,
        address: str,
        opts: Optional[VenueOptions] = None,
    ) -> Message:
        """Send information about a venue."""
        params = {"chat_id": chat_id, "latitude": latitude, "longitude": longitude, "title": title, "address": address}
        return self._get("sendVenue", Message, params, opts)

    def send_contact(
        self, chat_id: ChatID, phone_number: str, first_name: str, opts: Optional[ContactOptions] = None
    ) -> Message:
        """Send a phone contact."""
        params = {"chat_id": chat_id, "phone_number": phone_number, "first_name": first_name}
        return self._get("sendContact", Message, params, opts)

    def send_poll(self, chat_id: ChatID, question: str, options: List[str], opts: Optional[PollOptions] = None) -> Message:
        """Send a native poll."""
        params = {"chat_id": chat_id, "question": question, "options": options}
        return self._get("sendPoll", Message, params, opts)

    def send_dice(self, chat_id: ChatID, emoji: DiceEmoji = DiceEmoji.DIE, opts: Optional[BaseOptions] = None) -> Message:
        """Send an animated emoji that displays a random value."""
        return self._get("sendDice", Message, {"chat_id": chat_id, "emoji": emoji}, opts)

    def send_chat_action(self, chat_id: ChatID, action: ChatAction) -> bool:
        """Tell the user that something is happening on the bot's side."""
        return self._get("sendChatAction", bool, {"chat_id": chat_id, "action": action})

    # ------------------------------------------------------------------
    #  Files
    # ------------------------------------------------------------------

    def get_user_profile_photos(self, user_id: int, opts: Optional[UserProfileOptions] = None) -> UserProfilePhotos:
        """List a user's profile pictures."""
        return self._get("getUserProfilePhotos", UserProfilePhotos, {"user_id": user_id}, opts)

    def get_file(self, file_id: str) -> File:
        """Prepare a file for downloading and return its ``file_path``."""
        return self._get("getFile", File, {"file_id": file_id})

    def download_file(self, file_path: str) -> bytes:
        """Download the bytes behind a ``file_path`` returned by :meth:`get_file`."""
        return self._transport.download(f"{self._file_url}{file_path}")

    # ------------------------------------------------------------------
    #  Chat administration
    # ------------------------------------------------------------------

    def ban_chat_member(self, chat_id: ChatID, user_id: int, opts: Optional[BanOptions] = None) -> bool:
        """Ban a user in a group, a supergroup or a channel."""
        return self._get("banChatMember", bool, {"chat_id": chat_id, "user_id": user_id}, opts)

    def unban_chat_member(self, chat_id: ChatID, user_id: int, opts: Optional[UnbanOptions] = None) -> bool:
        """Unban a previously banned user."""
        return self._get("unbanChatMember", bool, {"chat_id": chat_id, "user_id": user_id}, opts)

    def restrict_chat_member(
        self, chat_id: ChatID, user_id: int, permissions: ChatPermissions, opts: Optional[RestrictOptions] = None
    ) -> bool:
        """Restrict a user in a supergroup."""
        params = {"chat_id": chat_id, "user_id": user_id, "permissions": permissions}
        return self._get("restrictChatMember", bool, params, opts)

    def promote_chat_member(self, chat_id: ChatID, user_id: int, opts: Optional[PromoteOptions] = None) -> bool:
        """Promote or demote a user in a supergroup or a channel."""
        return self._get("promoteChatMember", bool, {"chat_id": chat_id, "user_id": user_id}, opts)

    def set_chat_administrator_custom_title(self, chat_id: ChatID, user_id: int, custom_title: str) -> bool:
        """Set a custom title for an administrator promoted by the bot."""
        params = {"chat_id": chat_id, "user_id": user_id, "custom_title": custom_title}
        return self._get("setChatAdministratorCustomTitle", bool, params)

    def ban_chat_sender_chat(self, chat_id: ChatID, sender_chat_id: int) -> bool:
        """Ban a channel chat in a supergroup or a channel."""
        return self._get("banChatSenderChat", bool, {"chat_id": chat_id, "sender_chat_id": sender_chat_id})

    def unban_chat_sender_chat(self, chat_id: ChatID, sender_chat_id: int) -> bool:
        """Unban a previously banned channel chat."""
        return self._get("unbanChatSenderChat", bool, {"chat_id": chat_id, "sender_chat_id": sender_chat_id})

    def set_chat_permissions(self, chat_id: ChatID, permissions: ChatPermissions) -> bool:
        """Set default chat permissions for all members."""
        return self._get("setChatPermissions", bool, {"chat_id": chat_id, "permissions": permissions})

    def export_chat_invite_link(self, chat_id: ChatID) -> str:
        """Generate a new primary invite link, revoking the previous one."""
        return self._get("exportChatInviteLink", str, {"chat_id": chat_id})

    def create_chat_invite_link(self, chat_id: ChatID, opts: Optional[InviteLinkOptions] = None) -> ChatInviteLink:
        """Create an additional invite link."""
        return self._get("createChatInviteLink", ChatInviteLink, {"chat_id": chat_id}, opts)

    def edit_chat_invite_link(
        self, chat_id: ChatID, invite_link: str, opts: Optional[InviteLinkOptions] = None
    ) -> ChatInviteLink:
        """Edit a non-primary invite link created by the bot."""
        return self._get("editChatInviteLink", ChatInviteLink, {"chat_id": chat_id, "invite_link": invite_link}, opts)

    def revoke_chat_invite_link(self, chat_id: ChatID, invite_link: str) -> ChatInviteLink:
        """Revoke an invite link created by the bot."""
        return self._get("revokeChatInviteLink", ChatInviteLink, {"chat_id": chat_id, "invite_link": invite_link})

    def approve_chat_join_request(self, chat_id: ChatID, user_id: int) -> bool:
        """Approve a chat join request."""
        return self._get("approveChatJoinRequest", bool, {"chat_id": chat_id, "user_id": user_id})

    def decline_chat_join_request(self, chat_id: ChatID, user_id: int) -> bool:
        """Decline a chat join request."""
        return self._get("declineChatJoinRequest", bool, {"chat_id": chat_id, "user_id": user_id})

    def set_chat_photo(self, chat_id: ChatID, photo: InputFile) -> bool:
        """Set a new profile photo for the chat. The photo must be uploaded."""
        return self._upload("setChatPhoto", bool, "photo", photo, {"chat_id": chat_id})

    def delete_chat_photo(self, chat_id: ChatID) -> bool:
        """Delete a chat photo."""
        return self._get("deleteChatPhoto", bool, {"chat_id": chat_id})

    def set_chat_title(self, chat_id: ChatID, title: str) -> bool:
        """Change the title of a chat."""
        return self._get("setChatTitle", bool, {"chat_id": chat_id, "title": title})

    def set_chat_description(self, chat_id: ChatID, description: str) -> bool:
        """Change the description of a group, a supergroup or a channel."""
        return self._get("setChatDescription", bool, {"chat_id": chat_id, "description": description})

    def pin_chat_message(self, chat_id: ChatID, message_id: int, opts: Optional[PinMessageOptions] = None) -> bool:
        """Add a message to the list of pinned messages."""
        return self._get("pinChatMessage", bool, {"chat_id": chat_id, "message_id": message_id}, opts)

    def unpin_chat_message(self, chat_id: ChatID, message_id: int) -> bool:
        """Remove a message from the list of pinned messages."""
        return self._get("unpinChatMessage", bool, {"chat_id": chat_id, "message_id": message_id})

    def unpin_all_chat_messages(self, chat_id: ChatID) -> bool:
        """Clear the list of pinned messages."""
        return self._get("unpinAllChatMessages", bool, {"chat_id": chat_id})

    def leave_chat(self, chat_id: ChatID) -> bool:
        """Leave a group, supergroup or channel."""
        return self._get("leaveChat", bool, {"chat_id": chat_id})

    def get_chat(self, chat_id: ChatID) -> Chat:
        """Get up-to-date information about a chat."""
        return self._get("getChat", Chat, {"chat_id": chat_id})

    def get_chat_administrators(self, chat_id: ChatID) -> List[ChatMember]:
        """List the administrators of a chat, other bots excluded."""
        return self._get("getChatAdministrators", List[ChatMember], {"chat_id": chat_id})

    def get_chat_member_count(self, chat_id: ChatID) -> int:
        """Get the number of members in a chat."""
        return self._get("getChatMemberCount", int, {"chat_id": chat_id})

    def get_chat_member(self, chat_id: ChatID, user_id: int) -> ChatMember:
        """Get information about a member of a chat."""
        return self._get("getChatMember", ChatMember, {"chat_id": chat_id, "user_id": user_id})

    def set_chat_sticker_set(self, chat_id: ChatID, sticker_set_name: str) -> bool:
        """Set a new group sticker set for a supergroup."""
        return self._get("setChatStickerSet", bool, {"chat_id": chat_id, "sticker_set_name": sticker_set_name})

    def delete_chat_sticker_set(self, chat_id: ChatID) -> bool:
        """Delete a group sticker set from a supergroup."""
        return self._get("deleteChatStickerSet", bool, {"chat_id": chat_id})

    # ------------------------------------------------------------------
    #  Interaction
    # ------------------------------------------------------------------

    def answer_callback_query(self, callback_query_id: str, opts: Optional[CallbackQueryOptions] = None) -> bool:
        """Answer a callback query sent from an inline keyboard."""
        return self._get("answerCallbackQuery", bool, {"callback_query_id": callback_query_id}, opts)

    def set_my_commands(self, commands: List[BotCommand], opts: Optional[CommandOptions] = None) -> bool:
        """Change the bot's command list for a scope and language."""
        return self._get("setMyCommands", bool, {"commands": commands}, opts)

    def delete_my_commands(self, opts: Optional[CommandOptions] = None) -> bool:
        """Delete the bot's command list for a scope and language."""
        return self._get("deleteMyCommands", bool, None, opts)

    def get_my_commands(self, opts: Optional[CommandOptions] = None) -> List[BotCommand]:
        """Get the bot's command list for a scope and language."""
        return self._get("getMyCommands", List[BotCommand], None, opts)

    # ------------------------------------------------------------------
    #  Editing
    # ------------------------------------------------------------------

    def edit_message_text(self, text: str, msg: MessageIDOptions, opts: Optional[MessageTextOptions] = None) -> EditResult:
        """Edit text and game messages."""
        return self._get("editMessageText", EditResult, {"text": text}, msg, opts)

    def edit_message_caption(self, msg: MessageIDOptions, opts: Optional[MessageCaptionOptions] = None) -> EditResult:
        """Edit the caption of a message."""
        return self._get("editMessageCaption", EditResult, None, msg, opts)

    def edit_message_media(
        self, msg: MessageIDOptions, media: InputMedia, opts: Optional[MessageReplyMarkup] = None
    ) -> EditResult:
        """Replace the animation, audio, document, photo or video of a message.

        Inline messages cannot receive a new upload; use a URL or ``file_id``.
        """
        media_json, local_parts = resolve_single(media)
        return self._send_media("editMessageMedia", EditResult, media_json, local_parts, describe(msg), describe(opts))

    def edit_message_reply_markup(self, msg: MessageIDOptions, opts: Optional[MessageReplyMarkup] = None) -> EditResult:
        """Edit only the reply markup of a message."""
        return self._get("editMessageReplyMarkup", EditResult, None, msg, opts)

    def stop_poll(self, chat_id: ChatID, message_id: int, opts: Optional[MessageReplyMarkup] = None) -> Poll:
        """Stop a poll sent by the bot."""
        return self._get("stopPoll", Poll, {"chat_id": chat_id, "message_id": message_id}, opts)

    def delete_message(self, chat_id: ChatID, message_id: int) -> bool:
        """Delete a message, including service messages."""
        return self._get("deleteMessage", bool, {"chat_id": chat_id, "message_id": message_id})
