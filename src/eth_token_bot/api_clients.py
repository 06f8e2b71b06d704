import logging
from typing import Optional, Dict, Any, Callable

import requests
from web3 import Web3

from .config import Config
from .errors import FetchError, RpcUnavailableError
from .models import FieldResult, TokenMetadata

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://cloudflare-eth.com"

# Minimal ERC-20 ABI for name, symbol, decimals
ERC20_ABI = [
    {"constant": True, "inputs": [], "name": "name", "outputs": [
        {"name": "", "type": "string"}], "type": "function"},
    {"constant": True, "inputs": [], "name": "symbol", "outputs": [
        {"name": "", "type": "string"}], "type": "function"},
    {"constant": True, "inputs": [], "name": "decimals", "outputs": [
        {"name": "", "type": "uint8"}], "type": "function"},
]


class CoinGeckoClient:
    """Client for the CoinGecko token price API."""

    PLATFORM = "ethereum"
    VS_CURRENCY = "usd"

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.coingecko_base_url.rstrip("/")
        self.api_key = config.coingecko_api_key
        self.timeout = config.price_timeout
        self._session = session or requests.Session()

    def _make_request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a request to CoinGecko API."""
        url = f"{self.base_url}/{endpoint}"
        headers = {}

        if self.api_key:
            headers[self.config.coingecko_api_key_header] = self.api_key

        if params is None:
            params = {}

        try:
            response = self._session.get(
                url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise FetchError(f"CoinGecko request to {endpoint} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"CoinGecko returned invalid JSON for {endpoint}: {e}") from e

    def get_token_price(self, contract_address: str) -> Optional[float]:
        """
        Get the USD spot price of a token by contract address.

        Returns None when CoinGecko does not list the token. Raises FetchError
        when the request itself fails.
        """
        data = self._make_request(
            f"simple/token_price/{self.PLATFORM}",
            {"contract_addresses": contract_address,
             "vs_currencies": self.VS_CURRENCY},
        )

        if not isinstance(data, dict) or not data:
            return None

        entry = self._find_entry(data, contract_address)
        if not isinstance(entry, dict):
            return None

        usd = entry.get(self.VS_CURRENCY)
        if usd is None:
            return None

        try:
            return float(usd)
        except (TypeError, ValueError):
            logger.warning(
                f"Unexpected price value for {contract_address}: {usd!r}")
            return None

    @staticmethod
    def _find_entry(data: Dict[str, Any], contract_address: str) -> Optional[Any]:
        """Find the response entry for an address regardless of key casing."""
        wanted = contract_address.lower()
        for key, value in data.items():
            if str(key).lower() == wanted:
                return value

        # A single entry is ours even if the provider rewrote the key
        if len(data) == 1:
            return next(iter(data.values()))

        return None

    def close(self) -> None:
        self._session.close()


class Web3Client:
    """Client for ERC-20 contract reads over JSON-RPC."""

    def __init__(self, config: Optional[Config] = None, provider_url: Optional[str] = None,
                 w3: Optional[Web3] = None):
        self._session: Optional[requests.Session] = None
        if w3 is None:
            if provider_url is None:
                provider_url = config.eth_rpc_url if config else DEFAULT_RPC_URL
            self._session = requests.Session()
            w3 = Web3(Web3.HTTPProvider(provider_url, session=self._session))

        self.w3 = w3

    def close(self) -> None:
        # An injected w3 is owned by the caller
        if self._session is not None:
            self._session.close()

    def _read_field(self, contract_address: str, label: str,
                    call: Callable[[], Any]) -> FieldResult:
        """Run one contract read. Any failure makes only this field absent."""
        try:
            value = call()
        except Exception as e:
            logger.debug(f"{label}() failed for {contract_address}: {e}")
            return FieldResult.absent(f"{type(e).__name__}: {e}")

        if value is None:
            return FieldResult.absent("empty result")
        return FieldResult.ok(value)

    def get_token_metadata(self, contract_address: str) -> TokenMetadata:
        """
        Read name, symbol and decimals from the token contract.

        Each read is isolated, so a contract missing decimals() still reports
        its name and symbol. Raises RpcUnavailableError when every read failed
        because the endpoint itself is unreachable.
        """
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(contract_address),
            abi=ERC20_ABI
        )

        metadata = TokenMetadata(
            name=self._read_field(
                contract_address, "name",
                lambda: contract.functions.name().call()),
            symbol=self._read_field(
                contract_address, "symbol",
                lambda: contract.functions.symbol().call()),
            decimals=self._read_field(
                contract_address, "decimals",
                lambda: int(contract.functions.decimals().call())),
        )

        if metadata.all_absent and not self.w3.is_connected():
            raise RpcUnavailableError(
                f"RPC endpoint unreachable while reading {contract_address}")

        return metadata
