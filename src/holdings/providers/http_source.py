"""HTTP holdings source backed by httpx."""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from holdings.core.exceptions import (
    DecodingError,
    HttpError,
    InvalidURLError,
    NetworkTimeoutError,
    NoDataError,
    NoInternetConnectionError,
    ServerError,
)
from holdings.domain.models import HoldingRecord, HoldingSnapshot

DEFAULT_TIMEOUT_SECONDS = 30.0


# =============================================================================
# Wire format
# =============================================================================


class HoldingPayload(BaseModel):
    """One holding as sent by the endpoint (abbreviated field names)."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(min_length=1)
    quantity: int
    ltp: float
    avg_price: float = Field(alias="avgPrice")
    close: float

    def to_domain(self) -> HoldingRecord:
        return HoldingRecord(
            symbol=self.symbol,
            quantity=self.quantity,
            last_traded_price=self.ltp,
            average_price=self.avg_price,
            previous_close=self.close,
        )


class HoldingsData(BaseModel):
    """Nested data object wrapping the holdings array."""

    model_config = ConfigDict(populate_by_name=True)

    user_holding: list[HoldingPayload] = Field(alias="userHolding")


class HoldingsResponsePayload(BaseModel):
    """Top-level response envelope: {"data": {"userHolding": [...]}}."""

    data: HoldingsData

    def to_snapshot(self) -> HoldingSnapshot:
        return HoldingSnapshot.of(item.to_domain() for item in self.data.user_holding)


def decode_holdings(body: bytes) -> HoldingSnapshot:
    """Decode a response body into a snapshot."""
    if not body or not body.strip():
        raise NoDataError()
    try:
        payload = HoldingsResponsePayload.model_validate_json(body)
    except PydanticValidationError as exc:
        raise DecodingError(str(exc)) from exc
    return payload.to_snapshot()


# =============================================================================
# Source
# =============================================================================


class HttpHoldingsSource:
    """
    Fetches holdings with a single GET request.

    Transport failures are translated into the TransportError taxonomy;
    no retries are attempted here.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._url = url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._client = client
        self._logger = logger or logging.getLogger(__name__)

    async def fetch_holdings(self) -> HoldingSnapshot:
        """Perform the request and decode the holdings array."""
        if not self._url:
            raise InvalidURLError(self._url)

        if self._client is not None:
            response = await self._send(self._client)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await self._send(client)

        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase)

        snapshot = decode_holdings(response.content)
        self._logger.debug("Decoded %d holdings from %s", len(snapshot), self._url)
        return snapshot

    async def _send(self, client: httpx.AsyncClient) -> httpx.Response:
        try:
            return await client.get(
                self._url,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InvalidURLError(self._url) from exc
        except httpx.TimeoutException as exc:
            raise NetworkTimeoutError() from exc
        except httpx.ConnectError as exc:
            raise NoInternetConnectionError() from exc
        except httpx.HTTPError as exc:
            raise ServerError(str(exc) or type(exc).__name__) from exc
