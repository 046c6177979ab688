"""
Telegram Bot module for ltexbot.

ARCHITECTURE: classify once, then plain functions.
- Receives updates (webhook via FastAPI, or long polling in DEBUG)
- Router classifies each update into one InboundEvent, or drops it
- Extractor finds formulas, renderer turns them into image URLs
- Composer builds one reply, telegram_api delivers it
"""

from .bot import handle_telegram_update, initialize_bot, shutdown_bot, run_polling
from .router import classify_update, route_event

__all__ = [
    "handle_telegram_update",
    "initialize_bot",
    "shutdown_bot",
    "run_polling",
    "classify_update",
    "route_event",
]
