# src/models/product.py

"""Product records as served by the catalog API."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Rating:
    """Average review score and number of reviews."""

    rate: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class Product:
    """A single catalog product. Immutable once fetched."""

    id: int
    title: str
    price: float
    description: str = ""
    category: str = ""
    image: str = ""
    rating: Rating = field(default_factory=Rating)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Product":
        """Map one API JSON object onto a Product.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` when the
        payload is missing fields or carries the wrong types.
        """
        if not isinstance(payload, dict):
            msg = f"expected a product object, got {type(payload).__name__}"
            raise TypeError(msg)

        product_id = payload["id"]
        if isinstance(product_id, bool) or not isinstance(product_id, int):
            msg = f"product id must be an integer, got {product_id!r}"
            raise TypeError(msg)

        raw_rating = payload.get("rating") or {}
        return cls(
            id=product_id,
            title=str(payload["title"]),
            price=float(payload["price"]),
            description=str(payload.get("description", "")),
            category=str(payload.get("category", "")),
            image=str(payload.get("image", "")),
            rating=Rating(
                rate=float(raw_rating.get("rate", 0.0)),
                count=int(raw_rating.get("count", 0)),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to the API's JSON shape."""
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "image": self.image,
            "rating": {
                "rate": self.rating.rate,
                "count": self.rating.count,
            },
        }


@dataclass
class ProductFilters:
    """Criteria for narrowing an in-memory product list.

    Every field is optional; absent criteria constrain nothing.
    """

    search_query: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None

    def is_empty(self) -> bool:
        """True when no criterion would drop any product."""
        return (
            not (self.search_query or "").strip()
            and not self.category
            and self.min_price is None
            and self.max_price is None
        )
