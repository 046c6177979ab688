"""
Main Telegram bot handler.

Uses python-telegram-bot. Production runs in webhook mode behind FastAPI
(see ltexbot.main); DEBUG runs long polling instead.
"""

from telegram import Update
from telegram.ext import Application, TypeHandler

from ..config import get_settings
from ..services.renderer import close_renderer_client
from .logging_config import bot_logger as logger, set_debug_logging
from .handlers import handle_update, handle_error


# Global application instance (initialized once)
_application: Application | None = None


async def _close_resources(application: Application) -> None:
    await close_renderer_client()


def get_bot_application() -> Application:
    """Get or create telegram bot application."""
    global _application

    if _application is None:
        settings = get_settings()
        set_debug_logging(settings.debug)

        # Create application
        _application = (
            Application.builder()
            .token(settings.bot_token)
            .concurrent_updates(True)
            .post_shutdown(_close_resources)
            .build()
        )

        # Every update goes through the router
        _application.add_handler(TypeHandler(Update, handle_update))

        # Error handler
        _application.add_error_handler(handle_error)

        logger.info("Telegram bot application initialized")

    return _application


async def handle_telegram_update(update_data: dict) -> None:
    """
    Process incoming webhook update from Telegram.

    This is called by FastAPI webhook endpoint.
    Runs handlers in background (fire-and-forget).
    """
    try:
        app = get_bot_application()

        # Convert dict to Update object
        update = Update.de_json(update_data, app.bot)

        if update:
            # Process update through handlers
            await app.process_update(update)
        else:
            logger.warning("Received invalid update data")

    except Exception as e:
        logger.error(f"Failed to process update: {e}", exc_info=get_settings().debug)


async def initialize_bot() -> None:
    """
    Initialize bot application (call on startup).

    Registers the webhook when WEBHOOK_URL is configured.
    """
    settings = get_settings()
    app = get_bot_application()
    await app.initialize()

    if settings.webhook_url:
        await app.bot.set_webhook(
            url=settings.webhook_url,
            secret_token=settings.resolved_webhook_secret,
            allowed_updates=Update.ALL_TYPES,
        )
        logger.info(f"Webhook registered at {settings.webhook_url}")

    logger.info(f"Bot initialized successfully as @{app.bot.username}")


async def shutdown_bot() -> None:
    """
    Shutdown bot application (call on shutdown).
    """
    global _application
    if _application:
        await _application.shutdown()
        _application = None
        logger.info("Bot shut down")

    # post_shutdown only runs under run_polling()
    await close_renderer_client()


def run_polling() -> None:
    """Run the bot with long polling (local/debug operation)."""
    app = get_bot_application()
    logger.info("Starting long polling")
    app.run_polling(allowed_updates=Update.ALL_TYPES)
