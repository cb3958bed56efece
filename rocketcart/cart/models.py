"""Cart snapshot models.

Both types are immutable: every change produces a new Cart, so a snapshot
handed to a subscriber or caller never moves under their feet.
"""
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

# Keys owned by the entry itself, never part of product metadata
_RESERVED_KEYS = ("id", "productId", "product_id", "amount")


@dataclass(frozen=True)
class CartEntry:
    """One distinct product in the cart."""
    product_id: int
    amount: int
    product_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.product_id, bool) or not isinstance(self.product_id, int):
            raise TypeError("product_id must be an integer")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError("amount must be an integer")
        if self.amount < 1:
            raise ValueError("amount must be at least 1")
        metadata = {k: v for k, v in dict(self.product_data).items() if k not in _RESERVED_KEYS}
        object.__setattr__(self, "product_data", MappingProxyType(metadata))

    def with_amount(self, amount: int) -> "CartEntry":
        return replace(self, amount=amount)

    def to_dict(self) -> dict:
        """Persisted record: `{"id": ..., **product fields, "amount": ...}`."""
        return {"id": self.product_id, **self.product_data, "amount": self.amount}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartEntry":
        """Create from a persisted record.

        Accepts `id` (current layout) as well as `productId`/`product_id`.

        Raises:
            KeyError, TypeError, ValueError: on malformed records
        """
        for key in ("id", "productId", "product_id"):
            if key in data:
                product_id = data[key]
                break
        else:
            raise KeyError("id")
        return cls(product_id=product_id, amount=data["amount"], product_data=data)


@dataclass(frozen=True)
class Cart:
    """Ordered, unique-by-product collection of entries (insertion order)."""
    entries: tuple[CartEntry, ...] = ()

    def __post_init__(self):
        entries = tuple(self.entries)
        ids = [entry.product_id for entry in entries]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate product_id in cart")
        object.__setattr__(self, "entries", entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CartEntry]:
        return iter(self.entries)

    def __contains__(self, product_id: object) -> bool:
        return self.get(product_id) is not None

    def get(self, product_id: object) -> Optional[CartEntry]:
        return next((entry for entry in self.entries if entry.product_id == product_id), None)

    @property
    def product_ids(self) -> list[int]:
        return [entry.product_id for entry in self.entries]

    @property
    def total_items(self) -> int:
        """Sum of amounts across all entries."""
        return sum(entry.amount for entry in self.entries)

    def append(self, entry: CartEntry) -> "Cart":
        return Cart(self.entries + (entry,))

    def replace(self, entry: CartEntry) -> "Cart":
        """Swap the entry with the same product_id, keeping its position."""
        return Cart(tuple(entry if e.product_id == entry.product_id else e for e in self.entries))

    def without(self, product_id: int) -> "Cart":
        return Cart(tuple(e for e in self.entries if e.product_id != product_id))

    def to_list(self) -> list[dict]:
        return [entry.to_dict() for entry in self.entries]
