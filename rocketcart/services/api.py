"""
Product/stock service client.

Two read endpoints keyed by product id:
    GET products/{id}  -> product metadata
    GET stock/{id}     -> {"id": ..., "amount": ...}

Lookups never raise: network errors, non-2xx responses, empty bodies and
malformed payloads all come back as a failed FetchResult.
"""
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from rocketcart import config
from rocketcart.logging import get_logger, sanitize_for_logging
from .models import Product, Stock

logger = get_logger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a remote lookup: either data or an error description."""
    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    @classmethod
    def success(cls, data: T) -> "FetchResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(error=error)


class StockOracle:
    """Async client for the product/stock service.

    Usage:
        async with StockOracle() as oracle:
            stock = await oracle.fetch_stock(1)
            if stock.ok:
                print(stock.data.amount)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or config.API_URL,
            timeout=timeout if timeout is not None else config.API_TIMEOUT,
        )

    async def __aenter__(self) -> "StockOracle":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_product(self, product_id: int) -> FetchResult[Product]:
        """Fetch product metadata."""
        return await self._fetch("products", product_id, Product)

    async def fetch_stock(self, product_id: int) -> FetchResult[Stock]:
        """Fetch currently available amount."""
        return await self._fetch("stock", product_id, Stock)

    async def _fetch(self, resource: str, product_id: int, model: type[M]) -> FetchResult[M]:
        safe_id = sanitize_for_logging(product_id, 12)
        try:
            response = await self._client.get(f"{resource}/{product_id}")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"{resource} lookup for {safe_id} returned {e.response.status_code}")
            return FetchResult.failure(f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"{resource} lookup for {safe_id} failed: {e}")
            return FetchResult.failure(str(e) or type(e).__name__)
        except ValueError as e:
            logger.warning(f"{resource} lookup for {safe_id} returned invalid JSON: {e}")
            return FetchResult.failure("Invalid JSON")

        if not payload:
            return FetchResult.failure("Empty response")
        if not isinstance(payload, dict):
            return FetchResult.failure("Unexpected payload")

        try:
            return FetchResult.success(model.model_validate(payload))
        except ValidationError as e:
            logger.warning(f"{resource} payload for {safe_id} is invalid: {e.error_count()} errors")
            return FetchResult.failure("Invalid payload")
