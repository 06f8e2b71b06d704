"""
Reply texts and the token summary renderer.
"""

from typing import Optional

from telegram.constants import ParseMode
from telegram.helpers import escape_markdown

from .models import FieldResult, TokenMetadata
from .utils import format_usd

HELP_TEXT = (
    "Send an Ethereum token contract address (0x...) and I will fetch name, "
    "symbol, decimals and USD price (if listed)."
)

FAILURE_TEXT = (
    "Failed to fetch token info. The token contract might be nonstandard "
    "or the network provider failed."
)

PLACEHOLDER = "—"
PRICE_UNKNOWN = "Not listed / unknown"
SEARCH_URL = "https://www.coingecko.com/en/coins/"

# Parse mode of the rendered reply
REPLY_PARSE_MODE = ParseMode.MARKDOWN


def loading_text(address: str) -> str:
    return f"Fetching info for {address} ..."


def _field(result: FieldResult, escape: bool = False) -> str:
    if not result.present:
        return PLACEHOLDER
    value = str(result.value)
    return escape_markdown(value, version=1) if escape else value


def render_token_reply(address: str, metadata: TokenMetadata,
                       price_usd: Optional[float]) -> str:
    """Render the token summary. Absent values get fixed placeholders."""
    price = format_usd(price_usd) if price_usd is not None else PRICE_UNKNOWN

    lines = [
        f"🔎 Token info for {address}",
        "",
        f"Name: {_field(metadata.name, escape=True)}",
        f"Symbol: {_field(metadata.symbol, escape=True)}",
        f"Decimals: {_field(metadata.decimals)}",
        f"Price (USD): {price}",
        "",
        f"Chart/search: {SEARCH_URL}",
        "(Use the token page or search the symbol if CoinGecko didn't return a price.)",
    ]
    return "\n".join(lines)
