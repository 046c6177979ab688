"""
Response composition.

Turns render outcomes into exactly one outbound reply (or None for a silent
drop). Pure functions: nothing here talks to Telegram or the renderer.
"""

from typing import Optional

from .deeplink import build_start_link
from .events import BotIdentity
from .replies import (
    Button, Keyboard, TextReply, PhotoReply, PhotoGroupReply,
    InlineAnswer, InlineErrorResult, InlinePhotoResult, MEDIA_GROUP_MAX,
)

INVALID_LATEX_TEXT = "This is invalid LaTeX and could not be rendered"

WELCOME_TEXT = "Hi! I can render LaTeX formulas to images!"

HELP_TEXT = """I can render LaTeX to images.

RENDERING is always done inside an align* environment.

INPUT is read from
  - inline queries (typing @{username} …)
  - text messages in a private chat
  - code/pre formatting inside text messages in a group chat if the formatted pieces of text are surrounded by $ signs

SOURCE is available at github.com/KnorpelSenf/ltexbot

CREDIT goes to latex2image.joeraut.com and python-telegram-bot.org"""


def edit_keyboard(formula: str, me: BotIdentity) -> Keyboard:
    """Single "LaTeX" button linking back to the bot with the formula."""
    return ((Button("LaTeX", url=build_start_link(me.username, formula)),),)


def welcome_keyboard() -> Keyboard:
    return (
        (Button("try it", switch_inline_query_current_chat=""),),
        (Button("send it", switch_inline_query=""),),
    )


def compose_inline(
    formula: Optional[str], image_url: Optional[str], me: BotIdentity
) -> InlineAnswer:
    if not formula:
        return InlineAnswer()

    if image_url is None:
        return InlineAnswer((InlineErrorResult(formula),))

    return InlineAnswer((
        InlinePhotoResult(image_url, keyboard=edit_keyboard(formula, me)),
    ))


def compose_private(message_id: int, image_url: Optional[str]) -> TextReply | PhotoReply:
    if image_url is None:
        return TextReply(INVALID_LATEX_TEXT, reply_to=message_id)
    return PhotoReply(image_url)


def compose_group(
    message_id: int,
    rendered: list[tuple[str, Optional[str]]],
    me: BotIdentity,
) -> Optional[PhotoReply | PhotoGroupReply]:
    """
    Reply for a group message.

    Failed renders are skipped. One success gets a photo with an edit
    button; several become a media group (first 10 only, no buttons).
    """
    successes = [(formula, url) for formula, url in rendered if url is not None]

    if not successes:
        return None

    if len(successes) == 1:
        formula, url = successes[0]
        return PhotoReply(url, reply_to=message_id, keyboard=edit_keyboard(formula, me))

    return PhotoGroupReply(
        tuple(url for _, url in successes[:MEDIA_GROUP_MAX]),
        reply_to=message_id,
    )


def compose_start(formula: Optional[str]) -> Optional[TextReply]:
    """
    Reply to /start.

    formula is the decoded deep-link payload: None shows the welcome text,
    an empty string sends nothing.
    """
    if formula is None:
        return TextReply(WELCOME_TEXT, keyboard=welcome_keyboard())
    if not formula:
        return None
    return TextReply(formula, code=True)


def compose_help(me: BotIdentity) -> TextReply:
    return TextReply(HELP_TEXT.format(username=me.username), disable_link_preview=True)
