"""Cart package: models, storage, and store."""
from .models import CartEntry, Cart
from .storage import CartStorage
from .service import CartStore, open_cart_store

__all__ = [
    "CartEntry",
    "Cart",
    "CartStorage",
    "CartStore",
    "open_cart_store",
]
