import asyncio
from fastapi import FastAPI, Request, Header, HTTPException

from ltexbot.config import get_settings
from ltexbot.telegram_bot.bot import handle_telegram_update, initialize_bot, shutdown_bot, run_polling
from ltexbot.telegram_bot.logging_config import bot_logger as logger

app = FastAPI(
    title="ltexbot",
    description="Telegram bot that renders LaTeX formulas to images",
    version="0.1.0"
)

# Webhook updates in flight (keeps tasks referenced until they finish)
_background_tasks: set[asyncio.Task] = set()


# Lifecycle events
@app.on_event("startup")
async def startup_event():
    """Initialize bot on startup."""
    logger.info("[STARTUP] Initializing Telegram bot...")
    await initialize_bot()
    logger.info("[STARTUP] Bot ready")


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown bot on application shutdown."""
    logger.info("[SHUTDOWN] Shutting down Telegram bot...")
    await shutdown_bot()
    logger.info("[SHUTDOWN] Bot stopped")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "mode": "polling" if settings.debug else "webhook",
        "version": "0.1.0"
    }


# Telegram webhook endpoint
@app.post("/telegram/webhook")
async def telegram_webhook(
    request: Request,
    x_telegram_bot_api_secret_token: str = Header(None)
):
    """
    Webhook endpoint for Telegram updates.

    Telegram sends updates here when messages arrive.
    """
    settings = get_settings()

    if x_telegram_bot_api_secret_token != settings.resolved_webhook_secret:
        raise HTTPException(status_code=403, detail="Invalid secret token")

    # Parse update data
    try:
        update_data = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Update body is not JSON")

    # Handle update in background (fire-and-forget for fast 200 OK)
    task = asyncio.create_task(handle_telegram_update(update_data))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    return {"ok": True}


def run() -> None:
    """
    Start the bot.

    DEBUG set: long polling. Otherwise: webhook server via uvicorn.
    A missing BOT_TOKEN fails here, before anything starts.
    """
    settings = get_settings()

    if settings.debug:
        run_polling()
        return

    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
