"""Pytest configuration and fixtures"""
import asyncio
import json
from typing import Any, Optional

import pytest

from rocketcart.cart import CartStorage, CartStore
from rocketcart.services import FetchResult, Product, Stock


class FakeRedis:
    """In-memory stand-in for the async Upstash client."""

    def __init__(self, data: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(data or {})
        self.writes: list[tuple[str, str]] = []
        self.fail_writes = False
        self.fail_reads = False

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise ConnectionError("redis down")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            raise ConnectionError("redis down")
        self.data[key] = value
        self.writes.append((key, value))
        return True

    async def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0

    def stored(self, key: str) -> Any:
        return json.loads(self.data[key])


class StubOracle:
    """Stock service double: products and stock keyed by product id."""

    def __init__(self, products: Optional[dict] = None, stock: Optional[dict] = None):
        self.products: dict[int, dict] = dict(products or {})
        self.stock: dict[int, int] = dict(stock or {})
        self.product_calls: list[int] = []
        self.stock_calls: list[int] = []

    async def fetch_product(self, product_id: int) -> FetchResult[Product]:
        self.product_calls.append(product_id)
        await asyncio.sleep(0)
        if product_id not in self.products:
            return FetchResult.failure("HTTP 404")
        return FetchResult.success(Product(**self.products[product_id]))

    async def fetch_stock(self, product_id: int) -> FetchResult[Stock]:
        self.stock_calls.append(product_id)
        await asyncio.sleep(0)
        if product_id not in self.stock:
            return FetchResult.failure("HTTP 404")
        return FetchResult.success(Stock(id=product_id, amount=self.stock[product_id]))


class RecordingSink:
    """Message sink that remembers everything reported."""

    def __init__(self):
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


CART_KEY = "@RocketShoes:cart"


@pytest.fixture
def sample_product():
    """Sample product payload"""
    return {
        "id": 1,
        "title": "Tênis de Caminhada Leve Confortável",
        "price": 179.9,
        "image": "https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux/tenis1.jpg",
    }


@pytest.fixture
def second_product():
    """Another sample product payload"""
    return {
        "id": 2,
        "title": "Tênis VR Caminhada Confortável Detalhes Couro Masculino",
        "price": 139.9,
        "image": "https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux/tenis2.jpg",
    }


@pytest.fixture
def fake_redis():
    """Empty in-memory key-value client"""
    return FakeRedis()


@pytest.fixture
def storage(fake_redis):
    """Cart storage on the fake client"""
    return CartStorage(redis=fake_redis, key=CART_KEY)


@pytest.fixture
def oracle(sample_product, second_product):
    """Stock service with two products: 5 and 2 units in stock"""
    return StubOracle(
        products={1: sample_product, 2: second_product},
        stock={1: 5, 2: 2},
    )


@pytest.fixture
def sink():
    """Recording message sink"""
    return RecordingSink()


@pytest.fixture
def store(storage, oracle, sink):
    """Empty cart store with English messages"""
    return CartStore(storage, oracle, sink=sink, language="en")
