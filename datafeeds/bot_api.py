"""
Bot server REST client.

Async httpx client for the bot's Data API (account, trades, portfolio,
prices, status) and Control API (start, stop, reset).

Every failure leaves this module as a FetchError subclass:
- NetworkError: transport failure, timeout or redirect loop
- ServerError: non-2xx response
- MalformedDataError: body cannot be decoded, is not JSON, or has the wrong shape
"""

from typing import Any, Callable, Optional, TypeVar

import httpx

from core.config import settings
from core.errors import FetchError, MalformedDataError, NetworkError, ServerError
from core.logging_utils import get_logger
from core.models import (
    AccountSnapshot,
    BotStatus,
    ControlAck,
    PortfolioPosition,
    PricePoint,
    Trade,
)
from core.models.fields import require_list
from core.modes import Mode

logger = get_logger(__name__, tag="API")

T = TypeVar("T")


class BotApiClient:
    """Talks to the bot server. Satisfies both IDataApi and IControlApi."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_s
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "BotApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # === Transport ===

    async def _request(self, method: str, path: str, params: Optional[dict] = None) -> Any:
        endpoint = f"{method} {path}"
        client = await self._get_client()
        try:
            resp = await client.request(method, path, params=params)
        except httpx.TimeoutException as e:
            raise NetworkError(f"timed out after {self.timeout}s", endpoint) from e
        except httpx.DecodingError as e:
            raise MalformedDataError(f"undecodable response body: {e}", endpoint) from e
        except httpx.RequestError as e:
            # Transport failures, redirect loops and the rest of httpx's request errors
            raise NetworkError(str(e) or type(e).__name__, endpoint) from e

        if not resp.is_success:
            raise ServerError(f"HTTP {resp.status_code}", endpoint, status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise MalformedDataError("response body is not JSON", endpoint) from e

    @staticmethod
    def _parse(endpoint: str, parser: Callable[[Any], T], payload: Any) -> T:
        try:
            return parser(payload)
        except MalformedDataError as e:
            if not e.endpoint:
                e.endpoint = endpoint
            raise

    def _parse_list(self, endpoint: str, parser: Callable[[Any], T], payload: Any) -> list[T]:
        return self._parse(
            endpoint,
            lambda data: [parser(item) for item in require_list(data, endpoint)],
            payload,
        )

    # === Data API ===

    async def get_account(self, mode: Mode) -> AccountSnapshot:
        payload = await self._request("GET", "/account", {"mode": mode.value})
        return self._parse("GET /account", AccountSnapshot.from_dict, payload)

    async def get_trades(self, mode: Mode) -> list[Trade]:
        payload = await self._request("GET", "/trades", {"mode": mode.value})
        return self._parse_list("GET /trades", Trade.from_dict, payload)

    async def get_portfolio(self, mode: Mode) -> list[PortfolioPosition]:
        payload = await self._request("GET", "/portfolio", {"mode": mode.value})
        return self._parse_list("GET /portfolio", PortfolioPosition.from_dict, payload)

    async def get_prices(self, mode: Mode) -> list[PricePoint]:
        """Price history in server order (newest first); callers normalize."""
        payload = await self._request("GET", "/prices", {"mode": mode.value})
        return self._parse_list("GET /prices", PricePoint.from_dict, payload)

    async def get_status(self) -> BotStatus:
        payload = await self._request("GET", "/bot/status")
        return self._parse("GET /bot/status", BotStatus.from_dict, payload)

    async def health(self) -> bool:
        """True if the server reports UP. Never raises."""
        try:
            payload = await self._request("GET", "/health")
        except FetchError as e:
            logger.warning("Health check failed: %s", e)
            return False
        return isinstance(payload, dict) and str(payload.get("status", "")).upper() == "UP"

    # === Control API ===

    async def start_bot(self, mode: Mode) -> ControlAck:
        payload = await self._request("POST", "/bot/start", {"mode": mode.value})
        ack = self._parse("POST /bot/start", ControlAck.from_dict, payload)
        logger.info("Start %s: %s", mode.value, ack.message or ack.status)
        return ack

    async def pause_bot(self) -> ControlAck:
        payload = await self._request("POST", "/bot/stop")
        ack = self._parse("POST /bot/stop", ControlAck.from_dict, payload)
        logger.info("Pause: %s", ack.message or ack.status)
        return ack

    async def reset_bot(self) -> ControlAck:
        payload = await self._request("POST", "/bot/reset")
        ack = self._parse("POST /bot/reset", ControlAck.from_dict, payload)
        logger.info("Reset: %s", ack.message or ack.status)
        return ack
