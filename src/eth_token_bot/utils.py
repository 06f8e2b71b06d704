"""
Input classification and formatting helpers.
"""

import math
import re
from decimal import Decimal
from typing import Optional

from web3 import Web3

from .errors import InvalidAddress, MalformedLength

HELP_COMMANDS = ("/start", "/help")

ADDRESS_LENGTH = 42
_HEX_BODY = re.compile(r'^[0-9a-fA-F]{40}$')


def is_help_command(text: Optional[str]) -> bool:
    """Check if a message is /start or /help (optionally addressed as /help@SomeBot)."""
    command = (text or "").strip()
    if not command or any(c.isspace() for c in command):
        return False

    return command.split("@", 1)[0] in HELP_COMMANDS


def is_possible_address(text: Optional[str]) -> bool:
    """Quick shape check: 0x prefix and 42 characters."""
    if not text:
        return False

    text = text.strip()
    return text.startswith("0x") and len(text) == ADDRESS_LENGTH


def classify_address(text: Optional[str]) -> str:
    """
    Validate chat input as an Ethereum address and return its checksum form.

    Raises MalformedLength when the prefix or length is wrong and
    InvalidAddress when the body is not hex or a mixed-case checksum does not
    match.
    """
    raw = (text or "").strip()

    if not is_possible_address(raw):
        raise MalformedLength(raw)

    body = raw[2:]
    if not _HEX_BODY.match(body):
        raise InvalidAddress(raw)

    # Mixed case means the input claims a checksum, so it has to match
    if not (body.islower() or body.isupper()) and not Web3.is_checksum_address(raw):
        raise InvalidAddress(raw)

    return Web3.to_checksum_address(raw)


def format_usd(price: float) -> str:
    """
    Format a USD price.

    Prices of one dollar or more get thousands separators and cents, smaller
    prices keep four significant digits (e.g. $0.00001234).
    """
    if price is None or math.isnan(price) or math.isinf(price):
        return "$?"

    if price == 0:
        return "$0.00"

    if abs(price) >= 1:
        return f"${price:,.2f}"

    # Number of decimals needed for four significant digits
    places = min(18, -int(math.floor(math.log10(abs(price)))) + 3)
    formatted = format(Decimal(str(price)).quantize(Decimal(1).scaleb(-places)), "f")
    whole, _, fraction = formatted.partition(".")
    fraction = fraction.rstrip("0").ljust(2, "0")
    return f"${whole}.{fraction}"
