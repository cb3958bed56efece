"""rocketcart: shopping-cart state kept in sync with live stock."""
from rocketcart.cart import Cart, CartEntry, CartStorage, CartStore, open_cart_store
from rocketcart.errors import CartError, NotFoundError, OutOfStockError, ProductFetchError
from rocketcart.services import FetchResult, StockOracle

__all__ = [
    "Cart",
    "CartEntry",
    "CartStorage",
    "CartStore",
    "open_cart_store",
    "CartError",
    "NotFoundError",
    "OutOfStockError",
    "ProductFetchError",
    "FetchResult",
    "StockOracle",
]
