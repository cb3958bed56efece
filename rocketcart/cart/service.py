"""Cart store: the single writer of the cart.

Every mutation follows the same order:
    fetch stock/product -> validate -> swap in new snapshot -> persist

All of that happens under the store lock. Subscribers and the message sink
are called once the lock is released, so they may call back into the store.
Rejections (CartError) are reported to the user through the message sink
and leave the cart exactly as it was.
"""
import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from rocketcart.errors import (
    CartError,
    CartStorageError,
    InvalidArgumentError,
    NotFoundError,
    OutOfStockError,
    ProductFetchError,
)
from rocketcart.logging import get_logger, sanitize_for_logging
from rocketcart.messages import (
    MSG_ADD_FAILED,
    MSG_OUT_OF_STOCK,
    MSG_REMOVE_FAILED,
    MSG_UPDATE_FAILED,
    get_message,
)
from rocketcart.notifications import LoggingMessageSink, MessageSink
from rocketcart.services.api import StockOracle
from .models import Cart, CartEntry
from .storage import CartStorage

logger = get_logger(__name__)

Subscriber = Callable[[Cart], Union[None, Awaitable[Any]]]


def _as_int(value: object) -> Optional[int]:
    """Integers pass, integral floats (2.0) are converted, anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _require_int(value: object, product_id: object, what: str) -> int:
    number = _as_int(value)
    if number is None:
        raise InvalidArgumentError(product_id, f"{what} must be an integer, got {type(value).__name__}")
    return number


class CartStore:
    """
    Owns the in-memory cart.

    Features:
    - add / remove / update_amount validated against live stock
    - full snapshot persisted after every committed change
    - subscribers notified with each new snapshot
    - mutations serialized with an asyncio.Lock (no stale read-check-write)

    Usage:
        async with await open_cart_store() as store:
            await store.add(1)
    """

    def __init__(
        self,
        storage: CartStorage,
        oracle: StockOracle,
        sink: Optional[MessageSink] = None,
        initial: Optional[Cart] = None,
        language: Optional[str] = None,
        owns_oracle: bool = False,
    ):
        self._storage = storage
        self._oracle = oracle
        self._owns_oracle = owns_oracle
        self._sink = sink if sink is not None else LoggingMessageSink()
        self._language = language
        self._cart = initial if initial is not None else Cart()
        self._subscribers: list[Subscriber] = []
        self._lock = asyncio.Lock()

    @classmethod
    async def create(
        cls,
        storage: CartStorage,
        oracle: StockOracle,
        sink: Optional[MessageSink] = None,
        language: Optional[str] = None,
        owns_oracle: bool = False,
    ) -> "CartStore":
        """Build a store hydrated from the durable slot."""
        cart = await storage.load()
        logger.info(f"Cart loaded with {len(cart)} entries")
        return cls(storage, oracle, sink=sink, initial=cart, language=language, owns_oracle=owns_oracle)

    async def __aenter__(self) -> "CartStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the stock client if this store created it."""
        if self._owns_oracle:
            await self._oracle.aclose()

    @property
    def cart(self) -> Cart:
        """Current snapshot (immutable)."""
        return self._cart

    def snapshot(self) -> Cart:
        return self._cart

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for new snapshots; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add(self, product_id: int) -> Cart:
        """Add one unit of a product, creating the entry if needed."""
        return await self._mutate("add", MSG_ADD_FAILED, lambda: self._with_added(product_id))

    async def remove(self, product_id: int) -> Cart:
        """Drop a product from the cart. No stock lookup."""
        return await self._mutate("remove", MSG_REMOVE_FAILED, lambda: self._without(product_id))

    async def update_amount(self, product_id: int, amount: int) -> Cart:
        """
        Set a product's amount (replacement, not increment).

        Amounts below 1 are ignored; use `remove` to delete an entry.
        Products not in the cart are ignored as well.
        """
        requested = _as_int(amount)
        if requested is not None and requested < 1:
            return self._cart
        return await self._mutate("update", MSG_UPDATE_FAILED, lambda: self._with_amount(product_id, amount))

    async def clear(self) -> Cart:
        """Empty the cart."""
        return await self._mutate("clear", MSG_REMOVE_FAILED, self._emptied)

    async def _mutate(
        self,
        operation: str,
        fallback_key: str,
        build: Callable[[], Awaitable[Optional[Cart]]],
    ) -> Cart:
        message: Optional[str] = None
        deliveries: list[asyncio.Future] = []

        async with self._lock:
            try:
                cart = await build()
            except CartError as e:
                message = self._rejection(operation, e, fallback_key)
            else:
                if cart is None:
                    logger.debug(f"Cart {operation}: nothing to change")
                else:
                    deliveries = await self._commit(cart)
            current = self._cart

        if message is not None:
            await self._report(message)
        await self._deliver(deliveries)
        return current

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def _with_added(self, product_id: object) -> Cart:
        product_id = _require_int(product_id, product_id, "product id")
        product, stock = await asyncio.gather(
            self._oracle.fetch_product(product_id),
            self._oracle.fetch_stock(product_id),
        )
        if not product.ok or not stock.ok:
            raise ProductFetchError(product_id, product.error or stock.error or "Product lookup failed")

        available = stock.data.amount
        entry = self._cart.get(product_id)

        if entry is not None:
            requested = entry.amount + 1
            if requested > available:
                raise OutOfStockError(product_id, requested, available)
            return self._cart.replace(entry.with_amount(requested))

        if available < 1:
            raise OutOfStockError(product_id, 1, available)
        return self._cart.append(
            CartEntry(product_id=product_id, amount=1, product_data=product.data.cart_fields())
        )

    async def _without(self, product_id: object) -> Cart:
        if product_id not in self._cart:
            raise NotFoundError(product_id)
        return self._cart.without(product_id)

    async def _with_amount(self, product_id: object, amount: object) -> Optional[Cart]:
        product_id = _require_int(product_id, product_id, "product id")
        amount = _require_int(amount, product_id, "amount")

        stock = await self._oracle.fetch_stock(product_id)
        if not stock.ok:
            raise ProductFetchError(product_id, stock.error or "Stock lookup failed")

        entry = self._cart.get(product_id)
        if entry is None:
            return None

        available = stock.data.amount
        if amount > available:
            raise OutOfStockError(product_id, amount, available)
        return self._cart.replace(entry.with_amount(amount))

    async def _emptied(self) -> Cart:
        return Cart()

    # ------------------------------------------------------------------
    # Commit / reporting
    # ------------------------------------------------------------------

    async def _commit(self, cart: Cart) -> list[asyncio.Future]:
        """Swap in the snapshot, start subscriber deliveries, persist."""
        self._cart = cart
        deliveries = self._publish(cart)
        try:
            await self._storage.save(cart)
        except CartStorageError as e:
            # In-memory state stays committed; the next successful save catches up
            logger.error(f"Cart committed in memory but not persisted: {e}", exc_info=True)
        return deliveries

    def _publish(self, cart: Cart) -> list[asyncio.Future]:
        pending = []
        for callback in list(self._subscribers):
            try:
                result = callback(cart)
            except Exception:
                logger.exception("Cart subscriber failed")
                continue
            if inspect.isawaitable(result):
                pending.append(asyncio.ensure_future(result))
        return pending

    async def _deliver(self, pending: list[asyncio.Future]) -> None:
        if not pending:
            return
        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Cart subscriber failed", exc_info=result)

    def _rejection(self, operation: str, error: CartError, fallback_key: str) -> str:
        logger.warning(
            f"Cart {operation} rejected for product {sanitize_for_logging(error.product_id, 12)}: "
            f"{error.code} ({error.message})"
        )
        key = MSG_OUT_OF_STOCK if isinstance(error, OutOfStockError) else fallback_key
        return get_message(key, self._language)

    async def _report(self, message: str) -> None:
        try:
            result = self._sink(message)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Message sink failed")


async def open_cart_store(
    sink: Optional[MessageSink] = None,
    storage: Optional[CartStorage] = None,
    oracle: Optional[StockOracle] = None,
    language: Optional[str] = None,
) -> CartStore:
    """
    Wire a CartStore with the configured key-value slot and stock service.

    A stock client created here is closed by `CartStore.aclose()`; one passed
    in stays the caller's to close.
    """
    owns_oracle = oracle is None
    return await CartStore.create(
        storage if storage is not None else CartStorage(),
        oracle if oracle is not None else StockOracle(),
        sink=sink,
        language=language,
        owns_oracle=owns_oracle,
    )
