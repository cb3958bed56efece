"""
Cart error taxonomy.

Every rejected mutation raises one of the CartError subclasses inside
CartStore; the store turns it into a user-facing message and leaves the
cart untouched.
"""

# Error codes
ERROR_PRODUCT_FETCH = "PRODUCT_FETCH"
ERROR_OUT_OF_STOCK = "OUT_OF_STOCK"
ERROR_NOT_FOUND = "NOT_FOUND"
ERROR_INVALID_ARGUMENT = "INVALID_ARGUMENT"
ERROR_STORAGE = "STORAGE"


class CartError(Exception):
    """Base class for rejected cart mutations."""

    def __init__(self, message: str, code: str, product_id: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.product_id = product_id


class ProductFetchError(CartError):
    """Product or stock lookup failed or returned no data."""

    def __init__(self, product_id: int, message: str = "Product lookup failed") -> None:
        super().__init__(message, code=ERROR_PRODUCT_FETCH, product_id=product_id)


class OutOfStockError(CartError):
    """Requested amount exceeds the available stock."""

    def __init__(self, product_id: int, requested: int, available: int) -> None:
        super().__init__(
            f"Requested {requested}, only {available} in stock",
            code=ERROR_OUT_OF_STOCK,
            product_id=product_id,
        )
        self.requested = requested
        self.available = available


class NotFoundError(CartError):
    """Product is not in the cart."""

    def __init__(self, product_id: int) -> None:
        super().__init__("Product not in cart", code=ERROR_NOT_FOUND, product_id=product_id)


class InvalidArgumentError(CartError):
    """Product id or amount is not an integer."""

    def __init__(self, product_id: object, message: str) -> None:
        super().__init__(message, code=ERROR_INVALID_ARGUMENT, product_id=product_id)


class CartStorageError(Exception):
    """Durable cart slot could not be written."""

    def __init__(self, message: str, raw_error: Exception | None = None) -> None:
        super().__init__(message)
        self.code = ERROR_STORAGE
        self.raw_error = raw_error


__all__ = [
    "ERROR_PRODUCT_FETCH",
    "ERROR_OUT_OF_STOCK",
    "ERROR_NOT_FOUND",
    "ERROR_INVALID_ARGUMENT",
    "ERROR_STORAGE",
    "CartError",
    "ProductFetchError",
    "OutOfStockError",
    "NotFoundError",
    "InvalidArgumentError",
    "CartStorageError",
]
