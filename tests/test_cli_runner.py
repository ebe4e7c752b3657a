# tests/test_cli_runner.py

"""Tests for the headless catalog commands."""

import io
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from src.api.errors import ApiError
from src.cli.runner import cli_categories, cli_list, cli_show
from src.models.product import Product
from src.services.catalog_pages import (
    CatalogPage,
    PageMetadata,
    ProductPage,
)

SHIRT = Product(
    id=1,
    title="Shirt",
    price=20.0,
    description="Cotton shirt",
    category="clothing",
)
PHONE = Product(
    id=2,
    title="Phone",
    price=500.0,
    description="Smart phone",
    category="electronics",
)


def _pages() -> MagicMock:
    pages = MagicMock()
    pages.load_catalog_page = AsyncMock(
        return_value=CatalogPage(
            products=[SHIRT, PHONE],
            categories=["clothing", "electronics"],
        )
    )
    pages.load_product_page = AsyncMock(return_value=None)
    return pages


class TestCliList(unittest.IsolatedAsyncioTestCase):
    """The listing command."""

    async def test_json_output_filtered(self) -> None:
        """Query and price criteria narrow the JSON array."""
        pages = _pages()
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_list(
                "phone", None, None, None, "json", pages=pages
            )
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([p["id"] for p in data], [2])
        self.assertEqual(data[0]["rating"], {"rate": 0.0, "count": 0})

    async def test_price_range(self) -> None:
        """Bounds are inclusive."""
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_list(
                None, None, 20.0, 20.0, "json", pages=_pages()
            )
        self.assertEqual(code, 0)
        self.assertEqual(
            [p["title"] for p in json.loads(out.getvalue())], ["Shirt"]
        )

    async def test_category_uses_endpoint(self) -> None:
        """A category is fetched rather than filtered locally."""
        pages = _pages()
        pages.client.fetch_products_by_category.return_value = [PHONE]
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_list(
                None, "electronics", None, None, "json", pages=pages
            )
        self.assertEqual(code, 0)
        pages.client.fetch_products_by_category.assert_called_once_with(
            "electronics"
        )
        pages.load_catalog_page.assert_not_awaited()
        self.assertEqual(len(json.loads(out.getvalue())), 1)

    async def test_unknown_category_fails(self) -> None:
        """A 404 category exits non-zero."""
        pages = _pages()
        pages.client.fetch_products_by_category.side_effect = ApiError(
            'Category "toys" not found', 404, "/products/category/toys"
        )
        code = await cli_list(None, "toys", None, None, "json", pages=pages)
        self.assertEqual(code, 1)

    async def test_load_failure(self) -> None:
        """A failed catalog load exits non-zero."""
        pages = _pages()
        pages.load_catalog_page.side_effect = ApiError(
            "Network error while fetching products: refused",
            None,
            "/products",
        )
        code = await cli_list(None, None, None, None, "json", pages=pages)
        self.assertEqual(code, 1)

    async def test_no_match(self) -> None:
        """Nothing matching exits non-zero and prints nothing to stdout."""
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_list(
                "zzz", None, None, None, "json", pages=_pages()
            )
        self.assertEqual(code, 1)
        self.assertEqual(out.getvalue(), "")

    async def test_table_output(self) -> None:
        """The table format renders product titles."""
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_list(
                None, None, None, None, "table", pages=_pages()
            )
        self.assertEqual(code, 0)
        self.assertIn("Shirt", out.getvalue())
        self.assertIn("Phone", out.getvalue())


class TestCliShow(unittest.IsolatedAsyncioTestCase):
    """The product detail command."""

    async def test_not_found(self) -> None:
        """A missing product exits non-zero."""
        pages = _pages()
        code = await cli_show("abc", "json", pages=pages)
        self.assertEqual(code, 1)
        pages.load_product_page.assert_awaited_once_with("abc")

    async def test_json_includes_metadata(self) -> None:
        """Product fields plus page metadata."""
        pages = _pages()
        pages.load_product_page.return_value = ProductPage(
            product=SHIRT,
            metadata=PageMetadata(
                title="Shirt | Storefront",
                description="Cotton shirt...",
                image=None,
            ),
        )
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_show("1", "json", pages=pages)
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(data["id"], 1)
        self.assertEqual(data["metadata"]["title"], "Shirt | Storefront")


class TestCliCategories(unittest.IsolatedAsyncioTestCase):
    """The category listing command."""

    async def test_json(self) -> None:
        """Names are printed as a JSON array."""
        pages = _pages()
        pages.client.fetch_categories.return_value = ["clothing", "electronics"]
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_categories("json", pages=pages)
        self.assertEqual(code, 0)
        self.assertEqual(
            json.loads(out.getvalue()), ["clothing", "electronics"]
        )

    async def test_failure(self) -> None:
        """An API error exits non-zero."""
        pages = _pages()
        pages.client.fetch_categories.side_effect = ApiError(
            "Failed to fetch categories: 500", 500, "/products/categories"
        )
        code = await cli_categories("json", pages=pages)
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
