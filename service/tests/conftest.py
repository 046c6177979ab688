"""
Shared fixtures: bot settings from the environment and Telegram object factories.
"""

import logging
from datetime import datetime, timezone

import pytest
from telegram import Chat, InlineQuery, Message, MessageEntity, Update, User

from ltexbot.config import get_settings
from ltexbot.telegram_bot.events import BotIdentity

BOT_TOKEN = "123456:TEST-token_abc"
BOT_ID = 123456
BOT_USERNAME = "ltex_test_bot"


@pytest.fixture(autouse=True)
def bot_settings(monkeypatch):
    """Minimal valid configuration; cached settings are reset around each test."""
    monkeypatch.setenv("BOT_TOKEN", BOT_TOKEN)
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("WEBHOOK_SECRET", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def bot_log(caplog):
    """Capture records of the non-propagating "ltexbot" logger."""
    logger = logging.getLogger("ltexbot")
    logger.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)


@pytest.fixture
def me():
    return BotIdentity(id=BOT_ID, username=BOT_USERNAME)


@pytest.fixture
def make_message():
    """Build a Message; entities are (type, offset, length) tuples."""

    def factory(
        text,
        chat_type=Chat.PRIVATE,
        entities=(),
        from_id=42,
        via_bot_id=None,
        message_id=7,
        chat_id=1001,
    ):
        via_bot = None
        if via_bot_id is not None:
            via_bot = User(id=via_bot_id, first_name="Via", is_bot=True, username="via_bot")
        return Message(
            message_id=message_id,
            date=datetime.now(timezone.utc),
            chat=Chat(id=chat_id, type=chat_type),
            from_user=User(id=from_id, first_name="Ada", is_bot=from_id == BOT_ID),
            text=text,
            entities=[MessageEntity(type=t, offset=o, length=n) for t, o, n in entities],
            via_bot=via_bot,
        )

    return factory


@pytest.fixture
def make_update(make_message):
    def factory(text=None, inline_query=None, **message_kwargs):
        if inline_query is not None:
            query = InlineQuery(
                id="iq-1",
                from_user=User(id=42, first_name="Ada", is_bot=False),
                query=inline_query,
                offset="",
            )
            return Update(update_id=1, inline_query=query)
        return Update(update_id=1, message=make_message(text, **message_kwargs))

    return factory


class FakeRenderer:
    """Renderer stand-in: formulas in `failing` fail, others get a fake URL."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def render(self, formula):
        self.calls.append(formula)
        if formula in self.failing:
            return None
        return f"https://img.test/{formula}.jpg"


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def failing_renderer():
    def factory(*failing):
        return FakeRenderer(failing)

    return factory
