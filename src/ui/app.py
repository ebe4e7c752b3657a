# src/ui/app.py

"""Terminal UI for browsing the product catalog."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from src.api.errors import ApiError
from src.config.settings import Settings
from src.models.product import Product
from src.services.catalog_controller import (
    CatalogController,
    ControllerState,
)
from src.services.catalog_pages import CatalogPages, ProductPage

logger = logging.getLogger("storefront.ui")


def category_label(category: str) -> str:
    """Capitalise the first letter for display."""
    return category[:1].upper() + category[1:]


def format_price(price: float) -> str:
    return f"${price:.2f}"


class ProductDetailScreen(Screen[None]):
    """Full view of a single product."""

    BINDINGS = [Binding("escape", "app.pop_screen", "Back to Products")]

    def __init__(self, page: ProductPage) -> None:
        super().__init__()
        self.page = page

    def compose(self) -> ComposeResult:
        product = self.page.product
        yield Header()
        yield VerticalScroll(
            Static(product.title, id="product_title"),
            Static(
                Text(format_price(product.price), style="bold green"),
                id="product_price",
            ),
            Static(category_label(product.category), id="product_category"),
            Static(
                f"★ {product.rating.rate:.1f} "
                f"({product.rating.count} reviews)",
                id="product_rating",
            ),
            Static(Text("Description", style="bold"), classes="section"),
            Static(product.description, id="product_description"),
            Static(Text(product.image, style="dim"), id="product_image"),
            id="product_detail",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.title = self.page.metadata.title
        self.sub_title = self.page.metadata.description


class NotFoundScreen(Screen[None]):
    """Shown for invalid ids and any failed product fetch."""

    BINDINGS = [Binding("escape", "app.pop_screen", "Back to Products")]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(Text("404", style="bold red"), id="not_found_code"),
            Static("Page Not Found", id="not_found_title"),
            Static(
                "The page you are looking for does not exist "
                "or has been moved."
            ),
            id="not_found",
        )
        yield Footer()


class CatalogApp(App[object]):
    """Product catalog with debounced search and category filtering."""

    TITLE = Settings.SITE_NAME

    CSS = """
    #title { text-style: bold; padding: 0 1; }
    #filter_bar { height: auto; }
    #search_input { width: 2fr; }
    #category_select { width: 1fr; }
    #status { padding: 0 1; text-style: italic; }
    #error_panel { height: auto; border: round $error; padding: 0 1; }
    #product_detail { padding: 1 2; }
    #product_title { text-style: bold; }
    #not_found { align: center middle; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "retry", "Retry"),
        Binding("c", "clear_filters", "Clear Filters"),
    ]

    def __init__(self, pages: CatalogPages | None = None) -> None:
        super().__init__()
        self.pages = pages or CatalogPages()
        self.controller: CatalogController | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the catalog listing."""
        yield Header()
        yield Container(
            Static("Products Catalog", id="title"),
            Horizontal(
                Input(
                    placeholder="Search by title or description...",
                    id="search_input",
                ),
                Select[str](
                    [],
                    prompt="All Categories",
                    id="category_select",
                ),
                Button("Clear Filters", id="clear_btn"),
                id="filter_bar",
            ),
            Static("Loading products...", id="status"),
            Container(
                Static("Something went wrong", id="error_title"),
                Static("", id="error_message"),
                Button("Try Again", variant="primary", id="retry_btn"),
                id="error_panel",
            ),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the table and start the initial catalog load."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns("Title", "Price", "Category", "Rating")
        self.query_one("#error_panel").display = False
        self.run_worker(
            self.load_catalog(), group="catalog", exclusive=True
        )

    def on_unmount(self) -> None:
        if self.controller is not None:
            self.controller.close()

    # ── Loading ──────────────────────────────────────────

    def _make_controller(
        self, products: list[Product], categories: list[str]
    ) -> CatalogController:
        return CatalogController(
            self.pages.client,
            products,
            categories,
            on_change=self.refresh_view,
            on_reload=self.reload_catalog,
        )

    async def load_catalog(self) -> None:
        """Build the listing from the catalog page data."""
        if self.controller is not None:
            self.controller.close()
        self.query_one("#status", Static).update("Loading products...")

        try:
            page = await self.pages.load_catalog_page()
        except ApiError as exc:
            self.controller = self._make_controller([], [])
            self.controller.report_load_failure(exc)
            return

        self.controller = self._make_controller(
            page.products, page.categories
        )
        self.query_one("#category_select", Select).set_options(
            (category_label(c), c) for c in page.categories
        )
        self.refresh_view(self.controller)

    async def reload_catalog(self) -> None:
        """Full reload: drop cached pages and rebuild the listing."""
        self.pages.invalidate()
        await self.load_catalog()

    # ── Rendering ────────────────────────────────────────

    def refresh_view(self, controller: CatalogController) -> None:
        """Redraw status, error panel and table from controller state."""
        if controller is not self.controller:
            return
        status = self.query_one("#status", Static)
        error_panel = self.query_one("#error_panel")

        if controller.state is ControllerState.LOADING_CATEGORY:
            status.update("Loading products...")
        elif controller.visible:
            status.update(controller.summary())
        else:
            status.update(controller.empty_message())

        error_panel.display = controller.state is ControllerState.ERROR
        self.query_one("#error_message", Static).update(
            controller.error_message or ""
        )
        self.populate_table(controller.visible)

    def populate_table(self, products: list[Product]) -> None:
        """Fill the DataTable with the visible products."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        for p in products:
            table.add_row(
                p.title[:60],
                Text(format_price(p.price), style="green"),
                category_label(p.category),
                f"★ {p.rating.rate:.1f}" if p.rating.count else "",
                key=str(p.id),
            )

    # ── Events ───────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Feed keystrokes to the debounced search."""
        if event.input.id == "search_input" and self.controller is not None:
            self.controller.type_search(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter applies the search without waiting."""
        if event.input.id == "search_input" and self.controller is not None:
            self.controller.flush_search()

    def on_select_changed(self, event: Select.Changed) -> None:
        """Refetch by category, or restore the full catalog for blank."""
        if self.controller is None:
            return
        value = event.value
        if isinstance(value, str) and value:
            self.run_worker(
                self.controller.change_category(value), group="category"
            )
        else:
            self.controller.clear_category()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "retry_btn":
            self.action_retry()
        elif event.button.id == "clear_btn":
            self.action_clear_filters()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the detail page for the selected product."""
        product_id = event.row_key.value
        if product_id is not None:
            self.run_worker(self.open_product(product_id), group="detail")

    async def open_product(self, raw_id: str) -> None:
        """Push the detail screen, or the 404 screen on any failure."""
        page = await self.pages.load_product_page(raw_id)
        if page is None:
            self.push_screen(NotFoundScreen())
        else:
            self.push_screen(ProductDetailScreen(page))

    def action_retry(self) -> None:
        """Retry the last failed load."""
        if self.controller is None:
            return
        self.run_worker(self.controller.retry(), group="category")

    def action_clear_filters(self) -> None:
        """Reset the search box, category and price range."""
        self.query_one("#search_input", Input).value = ""
        self.query_one("#category_select", Select).clear()
        if self.controller is not None:
            self.controller.clear_filters()
