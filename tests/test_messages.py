import unittest

from eth_token_bot.messages import PLACEHOLDER, PRICE_UNKNOWN, render_token_reply
from eth_token_bot.models import FieldResult, TokenMetadata

USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"


class RenderTokenReplyTests(unittest.TestCase):
    def test_full_reply(self) -> None:
        metadata = TokenMetadata(
            name=FieldResult.ok("Tether USD"),
            symbol=FieldResult.ok("USDT"),
            decimals=FieldResult.ok(6),
        )

        reply = render_token_reply(USDT, metadata, 1.0)

        self.assertEqual(
            reply,
            f"🔎 Token info for {USDT}\n"
            "\n"
            "Name: Tether USD\n"
            "Symbol: USDT\n"
            "Decimals: 6\n"
            "Price (USD): $1.00\n"
            "\n"
            "Chart/search: https://www.coingecko.com/en/coins/\n"
            "(Use the token page or search the symbol if CoinGecko didn't return a price.)",
        )

    def test_absent_fields_use_placeholders(self) -> None:
        reply = render_token_reply(USDT, TokenMetadata(), None)

        self.assertIn(f"Name: {PLACEHOLDER}\n", reply)
        self.assertIn(f"Symbol: {PLACEHOLDER}\n", reply)
        self.assertIn(f"Decimals: {PLACEHOLDER}\n", reply)
        self.assertIn(f"Price (USD): {PRICE_UNKNOWN}\n", reply)

    def test_zero_decimals_is_not_absent(self) -> None:
        metadata = TokenMetadata(decimals=FieldResult.ok(0))
        self.assertIn("Decimals: 0\n", render_token_reply(USDT, metadata, None))

    def test_markdown_in_token_names_is_escaped(self) -> None:
        metadata = TokenMetadata(
            name=FieldResult.ok("my_token"),
            symbol=FieldResult.ok("*PUMP*"),
        )

        reply = render_token_reply(USDT, metadata, None)

        self.assertIn("Name: my\\_token\n", reply)
        self.assertIn("Symbol: \\*PUMP\\*\n", reply)

    def test_rendering_is_deterministic(self) -> None:
        metadata = TokenMetadata(
            name=FieldResult.ok("Wrapped Ether"),
            decimals=FieldResult.absent("execution reverted"),
        )
        self.assertEqual(
            render_token_reply(USDT, metadata, 0.00001234),
            render_token_reply(USDT, metadata, 0.00001234),
        )


if __name__ == "__main__":
    unittest.main()
