import unittest
from unittest.mock import AsyncMock, MagicMock

from telegram.ext import MessageHandler

from eth_token_bot.config import Config
from eth_token_bot.models import MessageHandle
from eth_token_bot.pipeline import LookupPipeline
from eth_token_bot.telegram_bot import (
    PIPELINE_KEY,
    TelegramReplyChannel,
    build_application,
    handle_text,
)


class TelegramReplyChannelTests(unittest.IsolatedAsyncioTestCase):
    async def test_acknowledge_returns_sent_message_handle(self) -> None:
        bot = MagicMock()
        bot.send_message = AsyncMock(return_value=MagicMock(message_id=42))
        channel = TelegramReplyChannel(bot)

        handle = await channel.acknowledge(5, "Fetching info ...")

        self.assertEqual(handle, MessageHandle(chat_id=5, message_id=42))
        bot.send_message.assert_awaited_once_with(chat_id=5, text="Fetching info ...")

    async def test_finalize_edits_in_place(self) -> None:
        bot = MagicMock()
        bot.edit_message_text = AsyncMock()
        channel = TelegramReplyChannel(bot)

        await channel.finalize(MessageHandle(chat_id=5, message_id=42), "done", "Markdown")

        bot.edit_message_text.assert_awaited_once_with(
            text="done", chat_id=5, message_id=42, parse_mode="Markdown")


class HandleTextTests(unittest.IsolatedAsyncioTestCase):
    async def test_routes_text_to_pipeline(self) -> None:
        pipeline = MagicMock()
        pipeline.handle_message = AsyncMock()
        update = MagicMock()
        update.effective_message.text = "/help"
        update.effective_message.chat_id = 9
        context = MagicMock()
        context.bot_data = {PIPELINE_KEY: pipeline}

        await handle_text(update, context)

        pipeline.handle_message.assert_awaited_once()
        chat_id, text, channel = pipeline.handle_message.await_args.args
        self.assertEqual((chat_id, text), (9, "/help"))
        self.assertIsInstance(channel, TelegramReplyChannel)

    async def test_ignores_updates_without_text(self) -> None:
        pipeline = MagicMock()
        pipeline.handle_message = AsyncMock()
        update = MagicMock()
        update.effective_message.text = None
        context = MagicMock()
        context.bot_data = {PIPELINE_KEY: pipeline}

        await handle_text(update, context)

        pipeline.handle_message.assert_not_awaited()


class BuildApplicationTests(unittest.TestCase):
    def test_requires_token(self) -> None:
        with self.assertRaises(ValueError):
            build_application(Config(), LookupPipeline(MagicMock(), MagicMock()))

    def test_wires_pipeline_and_text_handler(self) -> None:
        pipeline = LookupPipeline(MagicMock(), MagicMock())

        application = build_application(
            Config(telegram_bot_token="123456:TEST-token"), pipeline)

        self.assertIs(application.bot_data[PIPELINE_KEY], pipeline)
        handlers = [h for group in application.handlers.values() for h in group]
        self.assertTrue(any(isinstance(h, MessageHandler) for h in handlers))


if __name__ == "__main__":
    unittest.main()
