"""
Telegram update and error handlers.

A single handler receives every update and hands it to the router; there is
no per-command handler chain. Dropped updates are a normal outcome.
"""

from telegram import Update
from telegram.ext import ContextTypes

from ..config import get_settings
from ..services.renderer import get_renderer_client
from .events import BotIdentity
from .logging_config import bot_logger as logger
from .router import classify_update, route_event
from .telegram_api import deliver_reply


async def handle_update(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Classify, route and answer one update."""
    me = BotIdentity.from_bot(context.bot)

    event = classify_update(update, me)
    if event is None:
        return

    logger.info(f"Received {type(event).__name__} (update_id={update.update_id})")

    reply = await route_event(event, get_renderer_client(), me)
    if reply is None:
        logger.debug(f"No reply for update_id={update.update_id}")
        return

    await deliver_reply(context.bot, event, reply)


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle errors in handlers.

    The failed update is dropped without a reply. Debug mode logs the full
    traceback.
    """
    update_id = update.update_id if isinstance(update, Update) else None

    if get_settings().debug:
        logger.error(f"Bot error (update_id={update_id}): {context.error}", exc_info=context.error)
    else:
        logger.warning(f"Dropped update_id={update_id} after error: {context.error!r}")
