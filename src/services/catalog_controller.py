# src/services/catalog_controller.py

"""Interactive catalog state: category refetch, debounced search, retry."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from src.api.errors import ApiError
from src.api.store_client import StoreClient
from src.config.settings import Settings
from src.filters.product_filter import ProductFilter
from src.models.product import Product, ProductFilters

logger = logging.getLogger("storefront.controller")


class ControllerState(Enum):
    """What the catalog view is currently showing."""

    IDLE = "idle-showing-results"
    LOADING_CATEGORY = "loading-category"
    ERROR = "error-with-retry"


def describe_failure(exc: BaseException, category: str = "") -> str:
    """Turn a failed load into the message shown next to the retry button."""
    if isinstance(exc, ApiError):
        if exc.is_not_found and category:
            return (
                f'Category "{category}" not found. '
                "Please select a different category."
            )
        if exc.status_code is not None:
            return (
                "Unable to load products at this time. "
                "Please try again later."
            )
        return "Network error. Please check your connection and try again."
    return "An error occurred while loading products. Please try again."


class CatalogController:
    """Explicit state machine behind the interactive catalog.

    Events are method calls: :meth:`change_category`,
    :meth:`clear_category`, :meth:`type_search`, :meth:`retry`. After
    every change to what is displayed, ``on_change`` is called with the
    controller.

    Category fetches are tagged with a generation number. With
    ``discard_stale`` (the default) a fetch that resolves after a newer
    selection, or after the category was cleared, is ignored. Without
    it the last fetch to resolve wins.
    """

    def __init__(
        self,
        client: StoreClient,
        initial_products: list[Product],
        categories: list[str] | None = None,
        *,
        debounce_seconds: float | None = None,
        discard_stale: bool | None = None,
        on_change: Callable[["CatalogController"], None] | None = None,
        on_reload: Callable[[], Awaitable[None] | None] | None = None,
    ) -> None:
        self.client = client
        self.initial_products = initial_products
        self.categories: list[str] = list(categories or [])
        self.debounce_seconds = (
            Settings.SEARCH_DEBOUNCE_SECONDS
            if debounce_seconds is None
            else debounce_seconds
        )
        self.discard_stale = (
            Settings.DISCARD_STALE_CATEGORY_RESULTS
            if discard_stale is None
            else discard_stale
        )
        self.on_change = on_change
        self.on_reload = on_reload

        self.state = ControllerState.IDLE
        self.products: list[Product] = initial_products
        self.visible: list[Product] = initial_products
        self.selected_category: str = ""
        self.search_query: str = ""
        self.pending_query: str | None = None
        self.min_price: float | None = None
        self.max_price: float | None = None
        self.error_message: str | None = None

        self._failed_category: str | None = None
        self._generation = 0
        self._debounce_handle: asyncio.TimerHandle | None = None

    # ── Derived view ─────────────────────────────────────

    def current_filters(self) -> ProductFilters:
        """Local criteria; the category is applied by the endpoint."""
        return ProductFilters(
            search_query=self.search_query or None,
            min_price=self.min_price,
            max_price=self.max_price,
        )

    def summary(self) -> str:
        """Result count line shown above the listing."""
        text = (
            f"Showing {len(self.visible)} of "
            f"{len(self.products)} products"
        )
        if self.selected_category:
            text += f' in category "{self.selected_category}"'
        if self.search_query:
            text += f' matching "{self.search_query}"'
        return text

    def empty_message(self) -> str:
        """Text shown when nothing matches."""
        if self.search_query:
            return f'No products found matching "{self.search_query}".'
        return "No products found."

    def _refilter(self) -> None:
        self.visible = ProductFilter.apply(
            self.products, self.current_filters()
        )
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    # ── Search (debounced) ───────────────────────────────

    def type_search(self, text: str) -> None:
        """Record a keystroke; the filter runs once typing pauses.

        Must be called from a running event loop.
        """
        self.pending_query = text
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(
            self.debounce_seconds, self._commit_search
        )

    def flush_search(self) -> None:
        """Apply a pending keystroke immediately."""
        if self._debounce_handle is None:
            return
        self._debounce_handle.cancel()
        self._commit_search()

    def _commit_search(self) -> None:
        self._debounce_handle = None
        text = self.pending_query
        self.pending_query = None
        if text is None or text == self.search_query:
            return
        logger.debug("Search query committed: %r", text)
        self.search_query = text
        self._refilter()

    def set_price_range(
        self,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> None:
        """Update the local price criteria and re-filter."""
        self.min_price = min_price
        self.max_price = max_price
        self._refilter()

    # ── Category ─────────────────────────────────────────

    def _is_stale(self, token: int) -> bool:
        return self.discard_stale and token != self._generation

    async def change_category(self, category: str) -> None:
        """Load the products of ``category``; an empty value means all."""
        if not category:
            self.clear_category()
            return

        self._generation += 1
        token = self._generation
        self.selected_category = category
        self.error_message = None
        self.state = ControllerState.LOADING_CATEGORY
        logger.info("Loading category '%s' (fetch #%d)", category, token)
        self._notify()

        try:
            products = await asyncio.to_thread(
                self.client.fetch_products_by_category, category
            )
        except ApiError as exc:
            logger.warning(
                "Category '%s' failed (status=%s, endpoint=%s): %s",
                category,
                exc.status_code,
                exc.endpoint,
                exc.message,
            )
            self._fail(token, category, exc)
            return
        except Exception as exc:
            logger.error(
                "Unexpected error loading category '%s'",
                category,
                exc_info=True,
            )
            self._fail(token, category, exc)
            return

        if self._is_stale(token):
            logger.info(
                "Discarding stale result of fetch #%d for '%s'",
                token,
                category,
            )
            return

        self._failed_category = None
        self.products = products
        self.state = ControllerState.IDLE
        self._refilter()

    def _fail(self, token: int, category: str, exc: BaseException) -> None:
        if self._is_stale(token):
            logger.info(
                "Discarding stale failure of fetch #%d for '%s'",
                token,
                category,
            )
            return
        # The previously displayed list stays in place
        self._failed_category = category
        self.error_message = describe_failure(exc, category)
        self.state = ControllerState.ERROR
        self._notify()

    def clear_category(self) -> None:
        """Show the initial catalog again, without a network call."""
        self._generation += 1
        self.selected_category = ""
        self._failed_category = None
        self.error_message = None
        self.products = self.initial_products
        self.state = ControllerState.IDLE
        self._refilter()

    def clear_filters(self) -> None:
        """Reset search, price range and category."""
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
        self.pending_query = None
        self.search_query = ""
        self.min_price = None
        self.max_price = None
        self.clear_category()

    # ── Errors ───────────────────────────────────────────

    def report_load_failure(self, exc: BaseException) -> None:
        """Enter the error state for a failed initial catalog load."""
        logger.error("Initial catalog load failed: %s", exc)
        self._failed_category = None
        self.error_message = describe_failure(exc)
        self.state = ControllerState.ERROR
        self._notify()

    async def retry(self) -> None:
        """Repeat whatever failed last."""
        if self.state is not ControllerState.ERROR:
            logger.debug("Retry ignored in state %s", self.state.value)
            return

        if self._failed_category:
            await self.change_category(self._failed_category)
            return

        if self.on_reload is None:
            logger.warning(
                "No reload handler registered, restoring initial products"
            )
            self.clear_category()
            return

        logger.info("Retry without a category, reloading the catalog")
        result = self.on_reload()
        if inspect.isawaitable(result):
            await result

    def close(self) -> None:
        """Cancel any pending debounced search."""
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
