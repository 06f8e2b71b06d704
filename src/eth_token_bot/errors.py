class TokenBotError(Exception):
    pass


class ClassificationError(TokenBotError, ValueError):
    """Raised when chat input is not a usable Ethereum address."""

    user_message = "Please send a valid Ethereum contract address."

    def __init__(self, text: str = "") -> None:
        super().__init__(f"{self.user_message} (got {text!r})")
        self.text = text


class MalformedLength(ClassificationError):
    user_message = "Please send a valid Ethereum contract address (0x... length 42)."


class InvalidAddress(ClassificationError):
    user_message = "This does not look like a valid Ethereum address."


class DataSourceError(TokenBotError):
    pass


class FetchError(DataSourceError):
    pass


class RpcUnavailableError(DataSourceError):
    pass
