"""
Telegram Bot API delivery.

Maps composed replies onto python-telegram-bot Bot calls.
"""

from typing import Optional

from telegram import (
    Bot,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    InlineQueryResultArticle,
    InlineQueryResultPhoto,
    InputMediaPhoto,
    InputTextMessageContent,
    LinkPreviewOptions,
    MessageEntity,
    ReplyParameters,
)

from .events import InboundEvent, InlineQuery
from .replies import (
    Keyboard, OutboundReply, TextReply, PhotoReply, PhotoGroupReply,
    InlineAnswer, InlineErrorResult, InlinePhotoResult,
)


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, the unit Telegram uses for entities."""
    return len(text.encode("utf-16-le")) // 2


def build_markup(keyboard: Optional[Keyboard]) -> Optional[InlineKeyboardMarkup]:
    """Convert keyboard rows into InlineKeyboardMarkup."""
    if not keyboard:
        return None
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton(
                button.text,
                url=button.url,
                switch_inline_query=button.switch_inline_query,
                switch_inline_query_current_chat=button.switch_inline_query_current_chat,
            )
            for button in row
        ]
        for row in keyboard
    ])


def build_reply_parameters(reply_to: Optional[int]) -> Optional[ReplyParameters]:
    if reply_to is None:
        return None
    return ReplyParameters(message_id=reply_to)


def build_inline_results(answer: InlineAnswer) -> list:
    """
    Build inline query results.

    Photo results reuse the image as thumbnail. Error results are articles
    that send the formula text itself when picked.
    """
    results = []
    for index, result in enumerate(answer.results):
        if isinstance(result, InlineErrorResult):
            results.append(InlineQueryResultArticle(
                id="err",
                title=result.title,
                input_message_content=InputTextMessageContent(result.formula),
                description=result.formula,
            ))
        elif isinstance(result, InlinePhotoResult):
            results.append(InlineQueryResultPhoto(
                id=str(index),
                photo_url=result.photo,
                thumbnail_url=result.photo,
                reply_markup=build_markup(result.keyboard),
            ))
    return results


async def send_text(bot: Bot, chat_id: int, reply: TextReply) -> None:
    entities = None
    if reply.code:
        entities = [MessageEntity(MessageEntity.CODE, offset=0, length=utf16_length(reply.text))]

    link_preview_options = None
    if reply.disable_link_preview:
        link_preview_options = LinkPreviewOptions(is_disabled=True)

    await bot.send_message(
        chat_id=chat_id,
        text=reply.text,
        entities=entities,
        link_preview_options=link_preview_options,
        reply_parameters=build_reply_parameters(reply.reply_to),
        reply_markup=build_markup(reply.keyboard),
    )


async def send_photo(bot: Bot, chat_id: int, reply: PhotoReply) -> None:
    await bot.send_photo(
        chat_id=chat_id,
        photo=reply.photo,
        reply_parameters=build_reply_parameters(reply.reply_to),
        reply_markup=build_markup(reply.keyboard),
    )


async def send_photo_group(bot: Bot, chat_id: int, reply: PhotoGroupReply) -> None:
    await bot.send_media_group(
        chat_id=chat_id,
        media=[InputMediaPhoto(media=photo) for photo in reply.photos],
        reply_parameters=build_reply_parameters(reply.reply_to),
    )


async def deliver_reply(bot: Bot, event: InboundEvent, reply: OutboundReply) -> None:
    """
    Send a reply back to where the event came from.

    Inline answers go to the inline query; everything else to the event's chat.
    """
    if isinstance(reply, InlineAnswer):
        if not isinstance(event, InlineQuery):
            raise TypeError("Inline answers can only reply to inline queries")
        await bot.answer_inline_query(event.query_id, build_inline_results(reply))
        return

    chat_id = event.chat_id
    if isinstance(reply, TextReply):
        await send_text(bot, chat_id, reply)
    elif isinstance(reply, PhotoReply):
        await send_photo(bot, chat_id, reply)
    elif isinstance(reply, PhotoGroupReply):
        await send_photo_group(bot, chat_id, reply)
    else:
        raise TypeError(f"Unknown reply type: {type(reply).__name__}")
