"""
Event routing.

classify_update() maps a raw Telegram update to one InboundEvent (or None to
drop it). route_event() runs extraction, rendering and composition for that
event and returns the reply to send, or None for a silent drop.

Decision table:
    /start <payload>   -> decoded formula as code text
    /start, /help      -> fixed texts
    inline query       -> photo result, error article, or empty answer
    private text       -> photo, or "invalid LaTeX" notice
    group text         -> nothing, one photo, or a media group
"""

from typing import Optional

from telegram import Chat, Message, MessageEntity, Update

from ..services.renderer import RendererClient, render_all
from .composer import (
    compose_group, compose_help, compose_inline, compose_private, compose_start,
)
from .events import (
    BotIdentity, InboundEvent, StartCommand, HelpCommand, InlineQuery,
    PrivateTextMessage, GroupTextMessage,
)
from .extractor import extract_formulas, extract_spans, formula_from_start
from .logging_config import bot_logger as logger
from .replies import OutboundReply

COMMANDS = ("start", "help")


def is_self_authored(message: Message, me: BotIdentity) -> bool:
    """True for messages the bot produced itself (directly or via inline mode)."""
    if message.via_bot is not None and message.via_bot.id == me.id:
        return True
    if message.from_user is not None and message.from_user.id == me.id:
        return True
    return False


def parse_command(message: Message, me: BotIdentity) -> Optional[tuple[str, str]]:
    """
    Parse a leading bot command addressed to us.

    Returns:
        (command, payload) for /start and /help, else None
    """
    entities = message.entities or ()
    if not entities:
        return None
    first = entities[0]
    if first.type != MessageEntity.BOT_COMMAND or first.offset != 0:
        return None

    token = message.parse_entity(first)  # "/start" or "/start@SomeBot"
    name, _, target = token[1:].partition("@")
    if target and target.lower() != me.username.lower():
        return None
    name = name.lower()
    if name not in COMMANDS:
        return None

    payload = message.text[len(token):].strip()
    return name, payload


def classify_update(update: Update, me: BotIdentity) -> Optional[InboundEvent]:
    """Classify an update into a single event. None means drop it."""
    if update.inline_query is not None:
        inline = update.inline_query
        return InlineQuery(query_id=inline.id, query=inline.query)

    message = update.message
    if message is None or message.text is None:
        return None

    if is_self_authored(message, me):
        logger.debug(f"Dropping self-authored message {message.message_id}")
        return None

    chat_id = message.chat.id
    command = parse_command(message, me)
    if command is not None:
        name, payload = command
        if name == "start":
            return StartCommand(chat_id=chat_id, payload=payload or None)
        return HelpCommand(chat_id=chat_id)

    if message.chat.type == Chat.PRIVATE:
        return PrivateTextMessage(
            chat_id=chat_id, message_id=message.message_id, text=message.text
        )

    if message.chat.type in (Chat.GROUP, Chat.SUPERGROUP):
        return GroupTextMessage(
            chat_id=chat_id, message_id=message.message_id, spans=extract_spans(message)
        )

    return None


async def route_event(
    event: InboundEvent, renderer: RendererClient, me: BotIdentity
) -> Optional[OutboundReply]:
    """Build the reply for an event. None means send nothing."""
    if isinstance(event, StartCommand):
        return compose_start(formula_from_start(event))

    if isinstance(event, HelpCommand):
        return compose_help(me)

    formulas = extract_formulas(event)

    if isinstance(event, InlineQuery):
        if not formulas:
            return compose_inline(None, None, me)
        image_url = await renderer.render(formulas[0])
        return compose_inline(formulas[0], image_url, me)

    if isinstance(event, PrivateTextMessage):
        if not formulas:
            return None
        image_url = await renderer.render(formulas[0])
        return compose_private(event.message_id, image_url)

    if isinstance(event, GroupTextMessage):
        if not formulas:
            return None
        logger.info(f"Rendering {len(formulas)} formula(s) from group chat_id={event.chat_id}")
        rendered = await render_all(renderer, formulas)
        return compose_group(event.message_id, rendered, me)

    raise TypeError(f"Unknown event type: {type(event).__name__}")
