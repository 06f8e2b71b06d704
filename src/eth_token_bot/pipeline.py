from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Protocol

from .errors import ClassificationError, FetchError
from .messages import (
    FAILURE_TEXT,
    HELP_TEXT,
    REPLY_PARSE_MODE,
    loading_text,
    render_token_reply,
)
from .models import MessageHandle, TokenMetadata
from .utils import classify_address, is_help_command

logger = logging.getLogger(__name__)


class MetadataSource(Protocol):
    def get_token_metadata(self, contract_address: str) -> TokenMetadata: ...


class PriceSource(Protocol):
    def get_token_price(self, contract_address: str) -> Optional[float]: ...


class ReplyChannel(ABC):
    """
    Outbound side of a chat: plain replies plus a two-phase
    acknowledge/finalize protocol for replies that are edited in place.
    """

    @abstractmethod
    async def send(self, chat_id: int, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def acknowledge(self, chat_id: int, text: str) -> MessageHandle:
        raise NotImplementedError

    @abstractmethod
    async def finalize(self, handle: MessageHandle, text: str,
                       parse_mode: Optional[str] = None) -> None:
        raise NotImplementedError


class LookupPipeline:
    """
    Handles one inbound chat message end to end.

    - Validating: help commands and bad addresses are answered directly
    - Fetching: metadata and price are fetched concurrently
    - Rendered: the loading message is edited in place with the summary
    """

    def __init__(self, metadata_source: MetadataSource, price_source: PriceSource) -> None:
        self.metadata_source = metadata_source
        self.price_source = price_source

    async def handle_message(self, chat_id: int, text: Optional[str],
                             channel: ReplyChannel) -> None:
        text = (text or "").strip()

        if is_help_command(text):
            await self._send_quietly(channel, chat_id, HELP_TEXT)
            return

        try:
            address = classify_address(text)
        except ClassificationError as e:
            logger.info(f"Rejected input in chat {chat_id}: {type(e).__name__}")
            await self._send_quietly(channel, chat_id, e.user_message)
            return

        try:
            handle = await channel.acknowledge(chat_id, loading_text(address))
        except Exception:
            logger.exception(f"Could not acknowledge lookup of {address} in chat {chat_id}")
            return

        try:
            reply = await self.lookup(address)
            await channel.finalize(handle, reply, REPLY_PARSE_MODE)
        except Exception:
            logger.exception(f"Error fetching token info for {address}")
            await self._finalize_quietly(channel, handle, FAILURE_TEXT)

    async def lookup(self, address: str) -> str:
        """Fetch metadata and price for a checksum address and render the reply."""
        # Both fetches settle before either failure is raised
        metadata, price = await asyncio.gather(
            asyncio.to_thread(self.metadata_source.get_token_metadata, address),
            self._price_or_none(address),
            return_exceptions=True,
        )
        for outcome in (metadata, price):
            if isinstance(outcome, BaseException):
                raise outcome
        return render_token_reply(address, metadata, price)

    async def _price_or_none(self, address: str) -> Optional[float]:
        # A failed price lookup renders the same as an unlisted token
        try:
            return await asyncio.to_thread(self.price_source.get_token_price, address)
        except FetchError as e:
            logger.warning(f"Price fetch failed for {address}: {e}")
            return None

    @staticmethod
    async def _send_quietly(channel: ReplyChannel, chat_id: int, text: str) -> None:
        try:
            await channel.send(chat_id, text)
        except Exception:
            logger.exception(f"Could not send reply to chat {chat_id}")

    @staticmethod
    async def _finalize_quietly(channel: ReplyChannel, handle: MessageHandle, text: str) -> None:
        try:
            await channel.finalize(handle, text)
        except Exception:
            logger.exception(
                f"Could not edit message {handle.message_id} in chat {handle.chat_id}")
