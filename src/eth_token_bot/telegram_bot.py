"""
Telegram transport for the lookup pipeline.
"""

import logging
from typing import Awaitable, Callable, Optional

from telegram import Bot, Update
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from .config import Config
from .models import MessageHandle
from .pipeline import LookupPipeline, ReplyChannel

logger = logging.getLogger(__name__)

PIPELINE_KEY = "pipeline"


class TelegramReplyChannel(ReplyChannel):
    """ReplyChannel backed by a python-telegram-bot Bot."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def send(self, chat_id: int, text: str) -> None:
        await self._bot.send_message(chat_id=chat_id, text=text)

    async def acknowledge(self, chat_id: int, text: str) -> MessageHandle:
        message = await self._bot.send_message(chat_id=chat_id, text=text)
        return MessageHandle(chat_id=chat_id, message_id=message.message_id)

    async def finalize(self, handle: MessageHandle, text: str,
                       parse_mode: Optional[str] = None) -> None:
        await self._bot.edit_message_text(
            text=text,
            chat_id=handle.chat_id,
            message_id=handle.message_id,
            parse_mode=parse_mode,
        )


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if message is None or not message.text:
        return

    pipeline: LookupPipeline = context.bot_data[PIPELINE_KEY]
    await pipeline.handle_message(
        message.chat_id, message.text, TelegramReplyChannel(context.bot))


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error(f"Telegram update failed: {context.error}", exc_info=context.error)


def build_application(config: Config, pipeline: LookupPipeline,
                      on_shutdown: Optional[Callable[[Application], Awaitable[None]]] = None
                      ) -> Application:
    """Build the bot application with the pipeline wired into its text handler."""
    if not config.telegram_bot_token:
        raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

    # Updates from different chats are handled concurrently
    builder = ApplicationBuilder().token(config.telegram_bot_token).concurrent_updates(True)
    if on_shutdown is not None:
        builder = builder.post_shutdown(on_shutdown)

    application = builder.build()
    application.bot_data[PIPELINE_KEY] = pipeline

    # Commands are TEXT too; /start and /help are answered by the pipeline
    application.add_handler(MessageHandler(
        filters.TEXT & filters.UpdateType.MESSAGE, handle_text))
    application.add_error_handler(on_error)

    return application
