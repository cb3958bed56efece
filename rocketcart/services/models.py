"""Pydantic models for product/stock service payloads."""
from typing import Any, Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Product as returned by `GET products/{id}`.

    Only `id` is required; everything else is carried through to the cart
    entry untouched.
    """
    id: int
    title: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None

    class Config:
        extra = "allow"

    def cart_fields(self) -> dict[str, Any]:
        """Metadata stored on the cart entry: what the service sent, minus id/amount."""
        sent = self.model_fields_set | set(self.model_extra or {})
        return {
            key: value
            for key, value in self.model_dump().items()
            if key in sent and key not in ("id", "amount")
        }


class Stock(BaseModel):
    """Stock as returned by `GET stock/{id}`."""
    id: Optional[int] = None
    amount: int = Field(ge=0)

    class Config:
        extra = "ignore"
