"""Remote product/stock service."""
from .api import FetchResult, StockOracle
from .models import Product, Stock

__all__ = ["FetchResult", "StockOracle", "Product", "Stock"]
