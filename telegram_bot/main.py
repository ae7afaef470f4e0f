"""
Server Main Entry Point
REST API for the dashboard plus the Telegram bot
"""

import asyncio
import logging
from typing import Optional, Tuple
from aiogram import Bot, Dispatcher
from aiogram.enums import ParseMode
from aiogram.client.default import DefaultBotProperties
from aiohttp import web

from shared.config import settings, validate_config
from shared.logger import setup_logging
from database.connection import init_database, close_database, run_migrations, seed_default_users
from api_handlers import setup_api_routes

# Import handlers
from telegram_bot.handlers.start import router as start_router
from telegram_bot.handlers.help import router as help_router
from telegram_bot.handlers.payment_handler import router as payment_router
from telegram_bot.handlers.text_handler import router as text_router

from telegram_bot.intents import IntentDispatcher
from telegram_bot.middleware import UserMiddleware
from telegram_bot.webhook import WEBHOOK_PATH, on_startup, on_shutdown, setup_webhook

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


async def init_app():
    """
    Initialize application
    """
    try:
        logger.info("=" * 60)
        logger.info("SpeseSmart server starting...")
        logger.info("=" * 60)

        logger.info("Validating configuration...")
        validate_config()
        logger.info("✓ Configuration valid")

        logger.info("Initializing database...")
        await init_database()
        logger.info("✓ Database initialized")

        logger.info("Running database migrations...")
        await run_migrations()
        await seed_default_users()
        logger.info("✓ Migrations completed")

    except Exception as e:
        logger.error(f"Initialization failed: {e}", exc_info=True)
        raise


def create_bot() -> Tuple[Optional[Bot], Optional[Dispatcher]]:
    """
    Create bot and dispatcher

    Returns:
        (bot, dispatcher), or (None, None) when no token is configured
    """
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.warning("TELEGRAM_BOT_TOKEN not set, bot disabled")
        return None, None

    bot = Bot(
        token=settings.TELEGRAM_BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )
    dp = Dispatcher()
    dp["intent_dispatcher"] = IntentDispatcher()

    # Register middleware
    dp.message.middleware(UserMiddleware())
    dp.callback_query.middleware(UserMiddleware())

    # Register bot handlers
    dp.include_router(start_router)
    dp.include_router(help_router)
    dp.include_router(payment_router)
    dp.include_router(text_router)

    return bot, dp


async def main():
    """
    Start the REST API and the bot (webhook when WEBHOOK_HOST is set, polling otherwise)
    """
    bot = None
    webhook_mode = False
    runner = None

    try:
        await init_app()

        bot, dp = create_bot()

        app = web.Application()
        setup_api_routes(app)

        webhook_mode = bot is not None and bool(settings.WEBHOOK_HOST)
        if webhook_mode:
            webhook_url = f"{settings.WEBHOOK_HOST.rstrip('/')}{WEBHOOK_PATH}"
            await on_startup(bot, webhook_url)
            setup_webhook(app, bot, dp)

        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, '0.0.0.0', settings.PORT)
        await site.start()

        logger.info("=" * 60)
        logger.info(f"✅ Server started on port {settings.PORT}")
        logger.info(f"✅ Environment: {settings.ENVIRONMENT}")
        logger.info("=" * 60)

        if bot is not None and not webhook_mode:
            logger.info("Starting bot with long polling...")
            await bot.delete_webhook(drop_pending_updates=True)
            await dp.start_polling(bot, handle_signals=False)
        else:
            # Keep running
            await asyncio.Event().wait()

    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Cleaning up...")
        try:
            if bot is not None:
                if webhook_mode:
                    await on_shutdown(bot)
                await bot.session.close()
            if runner is not None:
                await runner.cleanup()
            await close_database()
            logger.info("Cleanup completed")
        except Exception as e:
            logger.error(f"Cleanup error: {e}", exc_info=True)


def run():
    """Console entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
    except Exception as e:
        logger.error(f"Application crashed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    run()
