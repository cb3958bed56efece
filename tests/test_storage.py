"""Tests for durable cart storage"""
import json

import pytest

from rocketcart.cart import Cart, CartEntry, CartStorage
from rocketcart.errors import CartStorageError
from conftest import CART_KEY, FakeRedis


@pytest.mark.asyncio
async def test_load_missing_slot(storage):
    """Test loading with nothing stored"""
    cart = await storage.load()

    assert cart == Cart()


@pytest.mark.asyncio
async def test_save_then_load(storage, sample_product, second_product):
    """Test a saved cart loads back identical"""
    cart = Cart((
        CartEntry(1, 3, sample_product),
        CartEntry(2, 1, second_product),
    ))

    await storage.save(cart)
    restored = await storage.load()

    assert restored == cart
    assert restored.product_ids == [1, 2]
    assert restored.get(1).product_data["title"] == sample_product["title"]


@pytest.mark.asyncio
async def test_saved_layout(storage, fake_redis, sample_product):
    """Test the slot holds a JSON array of full records"""
    await storage.save(Cart((CartEntry(1, 2, sample_product),)))

    assert fake_redis.stored(CART_KEY) == [{**sample_product, "amount": 2}]


@pytest.mark.asyncio
async def test_save_replaces_previous_value(storage, fake_redis):
    """Test every save writes the complete snapshot"""
    await storage.save(Cart((CartEntry(1, 1), CartEntry(2, 1))))
    await storage.save(Cart((CartEntry(2, 1),)))

    assert fake_redis.stored(CART_KEY) == [{"id": 2, "amount": 1}]
    assert len(fake_redis.writes) == 2


@pytest.mark.asyncio
async def test_load_reads_legacy_records(sample_product):
    """Test records written by the browser version of the cart"""
    raw = json.dumps([{**sample_product, "amount": 2}, {"productId": 3, "amount": 1}])
    storage = CartStorage(redis=FakeRedis({CART_KEY: raw}), key=CART_KEY)

    cart = await storage.load()

    assert cart.product_ids == [1, 3]
    assert cart.get(1).amount == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["{not json", "42", '{"id": 1}', "null"])
async def test_load_corrupt_slot(raw):
    """Test corrupt data degrades to an empty cart"""
    storage = CartStorage(redis=FakeRedis({CART_KEY: raw}), key=CART_KEY)

    cart = await storage.load()

    assert len(cart) == 0


@pytest.mark.asyncio
async def test_load_skips_bad_records():
    """Test malformed and duplicate records are dropped, good ones kept"""
    raw = json.dumps([
        {"id": 1, "amount": 2},
        {"id": 2, "amount": 0},
        {"id": "3", "amount": 1},
        {"amount": 1},
        "garbage",
        {"id": 1, "amount": 5},
        {"id": 4, "amount": 1},
    ])
    storage = CartStorage(redis=FakeRedis({CART_KEY: raw}), key=CART_KEY)

    cart = await storage.load()

    assert cart.product_ids == [1, 4]
    assert cart.get(1).amount == 2


@pytest.mark.asyncio
async def test_load_when_backend_unavailable():
    """Test read failures degrade to an empty cart"""
    redis = FakeRedis({CART_KEY: json.dumps([{"id": 1, "amount": 1}])})
    redis.fail_reads = True
    storage = CartStorage(redis=redis, key=CART_KEY)

    cart = await storage.load()

    assert len(cart) == 0


@pytest.mark.asyncio
async def test_save_failure_raises(storage, fake_redis):
    """Test write failures surface as CartStorageError"""
    fake_redis.fail_writes = True

    with pytest.raises(CartStorageError) as exc_info:
        await storage.save(Cart((CartEntry(1, 1),)))

    assert isinstance(exc_info.value.raw_error, ConnectionError)


@pytest.mark.asyncio
async def test_clear(storage, fake_redis):
    """Test clearing deletes the slot"""
    await storage.save(Cart((CartEntry(1, 1),)))
    await storage.clear()

    assert CART_KEY not in fake_redis.data
    assert len(await storage.load()) == 0


def test_default_key():
    """Test the slot key defaults to the configured one"""
    from rocketcart import config

    assert CartStorage(redis=FakeRedis()).key == config.CART_KEY


@pytest.mark.asyncio
async def test_unconfigured_backend_loads_empty(monkeypatch):
    """Test missing Upstash credentials degrade to an empty cart on load"""
    from rocketcart import config, db

    monkeypatch.setattr(config, "UPSTASH_REDIS_REST_URL", "")
    monkeypatch.setattr(config, "UPSTASH_REDIS_REST_TOKEN", "")
    db.reset_redis()

    cart = await CartStorage().load()

    assert len(cart) == 0


def test_get_redis_singleton(monkeypatch):
    """Test the client is built once from configuration"""
    from rocketcart import config, db

    monkeypatch.setattr(config, "UPSTASH_REDIS_REST_URL", "https://example.upstash.io")
    monkeypatch.setattr(config, "UPSTASH_REDIS_REST_TOKEN", "test_token")
    db.reset_redis()

    try:
        assert db.get_redis() is db.get_redis()
    finally:
        db.reset_redis()


def test_get_redis_requires_credentials(monkeypatch):
    """Test a clear error without credentials"""
    from rocketcart import config, db

    monkeypatch.setattr(config, "UPSTASH_REDIS_REST_URL", "")
    db.reset_redis()

    with pytest.raises(ValueError):
        db.get_redis()
