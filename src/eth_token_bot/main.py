"""
Command line entry point for the Ethereum token lookup bot.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from .api_clients import CoinGeckoClient, Web3Client
from .config import Config
from .messages import FAILURE_TEXT
from .models import MessageHandle
from .pipeline import LookupPipeline, ReplyChannel
from .telegram_bot import build_application

logger = logging.getLogger(__name__)


app = typer.Typer(
    name="eth-token-bot",
    help="Telegram bot that replies to Ethereum token addresses with name, symbol, decimals and USD price."
)

console = Console()


class ConsoleReplyChannel(ReplyChannel):
    """ReplyChannel that prints to the terminal instead of a chat."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self.last_text: Optional[str] = None

    async def send(self, chat_id: int, text: str) -> None:
        self.last_text = text
        self.console.print(Text(text, style="yellow"))

    async def acknowledge(self, chat_id: int, text: str) -> MessageHandle:
        self.console.print(Text(text, style="cyan"))
        return MessageHandle(chat_id=chat_id, message_id=0)

    async def finalize(self, handle: MessageHandle, text: str,
                       parse_mode: Optional[str] = None) -> None:
        self.last_text = text
        self.console.print(Panel(Text(text), title="Token Information", expand=False))


def load_config(require_bot_token: bool = True) -> Config:
    """Load application configuration."""
    try:
        return Config.from_env(require_bot_token=require_bot_token)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        console.print(
            "\n[yellow]Please create a .env file with your bot token:[/yellow]")
        console.print("TELEGRAM_BOT_TOKEN=your_token_here")
        console.print("ETH_RPC_URL=https://cloudflare-eth.com  # Optional")
        console.print("COINGECKO_API_KEY=your_key_here  # Optional")
        raise typer.Exit(1)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    # python-telegram-bot logs every poll through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_pipeline(config: Config) -> Tuple[LookupPipeline, Callable[[], None]]:
    """Create the shared clients once and wire them into a pipeline.

    Returns the pipeline and a function that closes the clients.
    """
    web3_client = Web3Client(config)
    coingecko_client = CoinGeckoClient(config)

    def close_clients() -> None:
        web3_client.close()
        coingecko_client.close()

    return LookupPipeline(web3_client, coingecko_client), close_clients


@app.command()
def run():
    """Start the Telegram bot and poll for messages."""
    config = load_config()
    setup_logging(config.log_level)

    console.print("[cyan]Initializing API clients...[/cyan]")
    pipeline, close_clients = build_pipeline(config)

    async def on_shutdown(application) -> None:
        close_clients()
        logger.info("Clients closed")

    application = build_application(config, pipeline, on_shutdown=on_shutdown)

    console.print(f"[green]Bot started, RPC endpoint: {config.eth_rpc_url}[/green]")
    application.run_polling(allowed_updates=None, close_loop=False)


@app.command()
def lookup(
    address: str = typer.Argument(...,
                                  help="Token contract address (0x...)"),
):
    """Look up a token once and print the reply the bot would send."""
    config = load_config(require_bot_token=False)
    setup_logging(config.log_level)

    pipeline, close_clients = build_pipeline(config)
    channel = ConsoleReplyChannel(console)
    try:
        asyncio.run(pipeline.handle_message(0, address, channel))
    finally:
        close_clients()

    if channel.last_text == FAILURE_TEXT:
        raise typer.Exit(1)


@app.command()
def setup():
    """Setup the application by creating a .env file template."""
    env_content = """# Ethereum Token Bot Configuration

# Required: Telegram bot token (get one from @BotFather)
TELEGRAM_BOT_TOKEN=your_telegram_bot_token_here

# Optional: Ethereum JSON-RPC endpoint
# ETH_RPC_URL=https://cloudflare-eth.com

# Optional: CoinGecko API key for higher rate limits
# COINGECKO_API_KEY=your_coingecko_api_key_here
# COINGECKO_API_KEY_HEADER=x-cg-pro-api-key  # use x-cg-demo-api-key for demo keys

# Settings
PRICE_TIMEOUT=10
LOG_LEVEL=INFO
"""

    env_path = Path(".env")
    if env_path.exists():
        console.print("[yellow].env file already exists![/yellow]")
        if not typer.confirm("Overwrite existing .env file?"):
            return

    with open(env_path, 'w') as f:
        f.write(env_content)

    console.print(f"[green]Created .env file at {env_path.absolute()}[/green]")
    console.print(
        "\n[yellow]Please edit the .env file and add your bot token:[/yellow]")
    console.print("1. Create a bot with @BotFather on Telegram")
    console.print(
        "2. Replace 'your_telegram_bot_token_here' with the token it gives you")
    console.print("3. Optional: Add an RPC URL or CoinGecko key")
    console.print("4. Run: eth-token-bot run")


if __name__ == "__main__":
    app()
