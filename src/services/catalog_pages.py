# src/services/catalog_pages.py

"""Data loading for the catalog listing and product detail pages."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from src.api.errors import ApiError
from src.api.store_client import StoreClient
from src.config.settings import Settings
from src.models.product import Product
from src.storage.page_cache import PageCache

logger = logging.getLogger("storefront.pages")


@dataclass
class CatalogPage:
    """Everything the catalog listing needs on first render."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    categories: list[str] = field(
        default_factory=lambda: list[str]()
    )


@dataclass
class PageMetadata:
    """Title/description pair for a page, plus an optional preview image."""

    title: str
    description: str
    image: str | None = None


@dataclass
class ProductPage:
    """A resolved product detail page."""

    product: Product
    metadata: PageMetadata


def not_found_metadata() -> PageMetadata:
    """Metadata shown for unknown or unavailable products."""
    return PageMetadata(
        title=f"Product Not Found | {Settings.SITE_NAME}",
        description="The requested product could not be found.",
    )


def truncate_description(
    description: str,
    max_length: int = Settings.META_DESCRIPTION_LENGTH,
) -> str:
    """Shorten a description for use as a meta description."""
    if len(description) <= max_length:
        return description
    return description[:max_length].strip() + "..."


def parse_product_id(raw_id: str) -> int | None:
    """Parse a route segment into a product id, or None if invalid."""
    raw_id = raw_id.strip()
    if not (raw_id.isascii() and raw_id.isdigit()):
        return None
    product_id = int(raw_id)
    return product_id if product_id > 0 else None


def build_metadata(product: Product) -> PageMetadata:
    """Metadata for a product detail page."""
    return PageMetadata(
        title=f"{product.title} | {Settings.SITE_NAME}",
        description=truncate_description(product.description),
        image=product.image or None,
    )


class CatalogPages:
    """Loads page data, regenerating it at most once per revalidation window.

    The catalog page propagates :class:`ApiError` when it cannot be
    built. The product page never does: every failure, 404 or
    otherwise, becomes ``None`` (not found).
    """

    def __init__(
        self,
        client: StoreClient | None = None,
        cache: PageCache | None = None,
    ) -> None:
        self.client = client or StoreClient()
        self.cache = cache or PageCache()

    async def _revalidate(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Serve fresh cached data or regenerate it.

        A failed regeneration falls back to the stale entry when one
        exists; otherwise the error propagates.
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            value = await loader()
        except ApiError as exc:
            stale = self.cache.get_stale(key)
            if stale is None:
                raise
            logger.warning(
                "Regeneration of '%s' failed (%s), serving stale data",
                key,
                exc,
            )
            return stale

        self.cache.store(key, value)
        return value

    async def _fetch_catalog(self) -> CatalogPage:
        """Fetch the full product list and category list concurrently."""
        products, categories = await asyncio.gather(
            asyncio.to_thread(self.client.fetch_all_products),
            asyncio.to_thread(self.client.fetch_categories),
        )
        logger.info(
            "Catalog page built: %d products, %d categories",
            len(products),
            len(categories),
        )
        return CatalogPage(products=products, categories=categories)

    async def load_catalog_page(self) -> CatalogPage:
        """Return the catalog listing data, regenerating when expired."""
        try:
            page: CatalogPage = await self._revalidate(
                "catalog", self._fetch_catalog
            )
        except ApiError as exc:
            logger.error("Catalog page could not be built: %s", exc)
            raise
        return page

    async def load_product_page(self, raw_id: str) -> ProductPage | None:
        """Resolve a detail page, or None when it should render as 404."""
        product_id = parse_product_id(raw_id)
        if product_id is None:
            logger.info("Rejected product id %r", raw_id)
            return None

        try:
            product: Product = await self._revalidate(
                f"product:{product_id}",
                lambda: asyncio.to_thread(
                    self.client.fetch_product, product_id
                ),
            )
        except ApiError as exc:
            logger.info(
                "Product %d rendered as not found (status=%s): %s",
                product_id,
                exc.status_code,
                exc.message,
            )
            return None

        return ProductPage(product=product, metadata=build_metadata(product))

    async def product_metadata(self, raw_id: str) -> PageMetadata:
        """Metadata for a detail page, falling back to not-found metadata."""
        page = await self.load_product_page(raw_id)
        if page is None:
            return not_found_metadata()
        return page.metadata

    async def static_product_ids(self) -> list[str]:
        """Ids of every known product, for pre-rendering detail pages."""
        try:
            page = await self.load_catalog_page()
        except ApiError as exc:
            logger.warning(
                "Could not list products for pre-rendering: %s", exc
            )
            return []
        return [str(p.id) for p in page.products]

    def invalidate(self) -> int:
        """Drop every cached page so the next load regenerates."""
        return self.cache.clear()
