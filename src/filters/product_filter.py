# src/filters/product_filter.py

"""Client-side narrowing of an already-loaded product list."""

import logging

from src.models.product import Product, ProductFilters

logger = logging.getLogger("storefront.filters")


class ProductFilter:
    """Filter products by text, category and price range."""

    @staticmethod
    def matches(product: Product, filters: ProductFilters) -> bool:
        """Return True when the product satisfies every present criterion."""
        query = (filters.search_query or "").strip().lower()
        if query and not (
            query in product.title.lower()
            or query in product.description.lower()
        ):
            return False
        if filters.category and product.category != filters.category:
            return False
        if filters.min_price is not None and product.price < filters.min_price:
            return False
        if filters.max_price is not None and product.price > filters.max_price:
            return False
        return True

    @staticmethod
    def apply(
        products: list[Product],
        filters: ProductFilters,
    ) -> list[Product]:
        """Keep the products matching all criteria, in their original order.

        With no criteria the input list is returned as-is.
        """
        if filters.is_empty():
            return products

        kept = [p for p in products if ProductFilter.matches(p, filters)]

        dropped = len(products) - len(kept)
        if dropped:
            logger.debug(
                "Filtered out %d of %d products (%s)",
                dropped,
                len(products),
                filters,
            )

        return kept
