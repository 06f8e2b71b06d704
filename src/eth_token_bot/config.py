import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Telegram
    telegram_bot_token: Optional[str] = None

    # Ethereum RPC
    eth_rpc_url: str = "https://cloudflare-eth.com"

    # CoinGecko
    coingecko_api_key: Optional[str] = None
    coingecko_api_key_header: str = "x-cg-pro-api-key"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    price_timeout: float = 10.0  # seconds

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, require_bot_token: bool = True) -> "Config":
        """Create config from environment variables."""
        bot_token = os.getenv("TELEGRAM_BOT_TOKEN")
        if require_bot_token and not bot_token:
            raise ValueError(
                "TELEGRAM_BOT_TOKEN environment variable is required")

        return cls(
            telegram_bot_token=bot_token,
            eth_rpc_url=os.getenv("ETH_RPC_URL") or "https://cloudflare-eth.com",
            coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
            coingecko_api_key_header=os.getenv(
                "COINGECKO_API_KEY_HEADER", "x-cg-pro-api-key"),
            coingecko_base_url=os.getenv(
                "COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3"),
            price_timeout=float(os.getenv("PRICE_TIMEOUT", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
