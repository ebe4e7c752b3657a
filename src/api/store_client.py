# src/api/store_client.py

"""HTTP client for the public product catalog API."""

import logging
from typing import Any
from urllib.parse import quote

from curl_cffi import requests as curl_requests

from src.api.errors import ApiError
from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("storefront.api")

# Characters encodeURIComponent leaves untouched besides alphanumerics
_COMPONENT_SAFE = "!*'()"

_MAPPING_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


class StoreClient:
    """Read-only client for the four catalog endpoints.

    Every failure, including bad arguments, is raised as
    :class:`~src.api.errors.ApiError`. The client keeps no cache and
    does not retry.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    # ── Transport ────────────────────────────────────────

    def _get_json(
        self,
        path: str,
        endpoint: str,
        what: str,
        not_found_message: str | None = None,
    ) -> Any:
        """GET ``path`` and decode the JSON body.

        ``endpoint`` is the unencoded path recorded on errors; ``what``
        names the resource in error messages. When
        ``not_found_message`` is given a 404 uses it.
        """
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(
                url, headers=self.settings.DEFAULT_HEADERS
            )
        except Exception as exc:
            logger.warning(
                "Request to %s failed: %s", url, exc, exc_info=True
            )
            raise ApiError(
                f"Network error while fetching {what}: {exc}",
                None,
                endpoint,
            ) from exc

        status = resp.status_code
        if not 200 <= status < 300:
            logger.warning("HTTP %d from %s", status, url)
            if status == 404 and not_found_message is not None:
                raise ApiError(not_found_message, status, endpoint)
            raise ApiError(
                f"Failed to fetch {what}: {status} {resp.reason}".rstrip(),
                status,
                endpoint,
            )

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("Invalid JSON from %s: %s", url, exc)
            raise ApiError(
                f"Malformed response while fetching {what}: {exc}",
                None,
                endpoint,
            ) from exc

    @staticmethod
    def _to_products(
        payload: Any, endpoint: str, what: str
    ) -> list[Product]:
        """Map a JSON array onto products, wrapping mapping errors."""
        try:
            if not isinstance(payload, list):
                msg = f"expected a JSON array, got {type(payload).__name__}"
                raise TypeError(msg)
            return [Product.from_api(item) for item in payload]
        except _MAPPING_ERRORS as exc:
            raise ApiError(
                f"Malformed response while fetching {what}: {exc}",
                None,
                endpoint,
            ) from exc

    # ── Endpoints ────────────────────────────────────────

    def fetch_all_products(self) -> list[Product]:
        """Return every product, in API order."""
        endpoint = "/products"
        payload = self._get_json(endpoint, endpoint, "products")
        products = self._to_products(payload, endpoint, "products")
        logger.info("Fetched %d products", len(products))
        return products

    def fetch_product(self, product_id: int) -> Product:
        """Return one product by its positive integer id."""
        endpoint = f"/products/{product_id}"
        if (
            isinstance(product_id, bool)
            or not isinstance(product_id, int)
            or product_id <= 0
        ):
            raise ApiError(
                f"Invalid product ID: {product_id}. "
                "ID must be a positive number.",
                None,
                endpoint,
            )

        what = f"product {product_id}"
        payload = self._get_json(
            endpoint,
            endpoint,
            what,
            not_found_message=f"Product with ID {product_id} not found",
        )
        try:
            return Product.from_api(payload)
        except _MAPPING_ERRORS as exc:
            raise ApiError(
                f"Malformed response while fetching {what}: {exc}",
                None,
                endpoint,
            ) from exc

    def fetch_categories(self) -> list[str]:
        """Return the category names, in API order."""
        endpoint = "/products/categories"
        payload = self._get_json(endpoint, endpoint, "categories")
        if not isinstance(payload, list) or not all(
            isinstance(c, str) for c in payload
        ):
            raise ApiError(
                "Malformed response while fetching categories: "
                "expected a JSON array of strings",
                None,
                endpoint,
            )
        return payload

    def fetch_products_by_category(self, category: str) -> list[Product]:
        """Return the products of one category, in API order."""
        endpoint = f"/products/category/{category}"
        if not isinstance(category, str) or not category.strip():
            raise ApiError(
                "Category name cannot be empty", None, endpoint
            )

        what = f'products for category "{category}"'
        path = f"/products/category/{quote(category, safe=_COMPONENT_SAFE)}"
        payload = self._get_json(
            path,
            endpoint,
            what,
            not_found_message=f'Category "{category}" not found',
        )
        products = self._to_products(payload, endpoint, what)
        logger.info(
            "Fetched %d products in category '%s'",
            len(products),
            category,
        )
        return products
