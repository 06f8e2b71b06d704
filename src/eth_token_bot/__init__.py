"""
Telegram bot that looks up Ethereum ERC-20 token metadata and USD price.
"""

__version__ = "0.1.0"
