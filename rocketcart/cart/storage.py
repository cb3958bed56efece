"""Durable cart slot backed by the key-value store."""
import json
from typing import Any, Optional

from rocketcart import config
from rocketcart.db import get_redis
from rocketcart.errors import CartStorageError
from rocketcart.logging import get_logger
from .models import Cart, CartEntry

logger = get_logger(__name__)


class CartStorage:
    """
    Loads and saves the whole cart under a single key.

    - `save` always writes a complete snapshot (JSON array of records)
    - `load` never fails: a missing, unreadable or corrupt slot is an empty cart
    """

    def __init__(self, redis: Any = None, key: str | None = None):
        self._redis = redis  # Lazy: resolved on first access
        self.key = key or config.CART_KEY

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self) -> Cart:
        """Read the slot; degrade to an empty cart on any problem."""
        try:
            raw = await self.redis.get(self.key)
        except Exception as e:
            logger.warning(f"Cart storage unavailable, starting with empty cart: {e}")
            return Cart()

        if not raw:
            return Cart()

        try:
            records = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Corrupted cart data under {self.key}: {e}")
            return Cart()

        if not isinstance(records, list):
            logger.warning(f"Corrupted cart data under {self.key}: expected a list")
            return Cart()

        return self._parse_records(records)

    async def save(self, cart: Cart) -> None:
        """Replace the slot with the full snapshot.

        Raises:
            CartStorageError: if the write fails
        """
        payload = json.dumps(cart.to_list())
        try:
            await self.redis.set(self.key, payload)
        except Exception as e:
            raise CartStorageError(f"Failed to save cart: {e}", raw_error=e) from e
        logger.debug(f"Saved cart with {len(cart)} entries")

    async def clear(self) -> None:
        """Delete the slot."""
        try:
            await self.redis.delete(self.key)
        except Exception as e:
            raise CartStorageError(f"Failed to clear cart: {e}", raw_error=e) from e

    def _parse_records(self, records: list) -> Cart:
        entries: list[CartEntry] = []
        seen: set[int] = set()
        for record in records:
            entry = self._parse_record(record)
            if entry is None:
                continue
            if entry.product_id in seen:
                logger.warning(f"Skipping duplicate cart record for product {entry.product_id}")
                continue
            seen.add(entry.product_id)
            entries.append(entry)
        return Cart(tuple(entries))

    @staticmethod
    def _parse_record(record: Any) -> Optional[CartEntry]:
        if not isinstance(record, dict):
            logger.warning("Skipping non-object cart record")
            return None
        try:
            return CartEntry.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed cart record: {e!r}")
            return None
