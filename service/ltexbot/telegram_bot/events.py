"""
Inbound events.

Every Telegram update the bot reacts to is classified into exactly one of
these variants by router.classify_update(). Nothing past the router looks
at the raw Update.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from telegram import Bot


@dataclass(frozen=True)
class BotIdentity:
    """Who the bot is. Used for self-drop and deep-link construction."""
    id: int
    username: str

    @classmethod
    def from_bot(cls, bot: Bot) -> "BotIdentity":
        # Only valid after Bot.initialize() has fetched getMe
        return cls(id=bot.id, username=bot.username)


@dataclass(frozen=True)
class StartCommand:
    chat_id: int
    payload: Optional[str] = None


@dataclass(frozen=True)
class HelpCommand:
    chat_id: int


@dataclass(frozen=True)
class InlineQuery:
    query_id: str
    query: str


@dataclass(frozen=True)
class PrivateTextMessage:
    chat_id: int
    message_id: int
    text: str


@dataclass(frozen=True)
class GroupTextMessage:
    chat_id: int
    message_id: int
    spans: tuple[str, ...] = field(default_factory=tuple)


InboundEvent = Union[
    StartCommand, HelpCommand, InlineQuery, PrivateTextMessage, GroupTextMessage
]
