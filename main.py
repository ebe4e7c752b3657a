# main.py

"""Entry point for the storefront catalog (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Browse the product catalog.",
        epilog="Run without arguments to launch the interactive TUI.",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search text matched against titles and descriptions.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_all",
        help="List the catalog headlessly (implied by any filter).",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Only products of this category.",
    )
    parser.add_argument(
        "--min-price",
        type=float,
        default=None,
        dest="min_price",
        help="Minimum price (inclusive).",
    )
    parser.add_argument(
        "--max-price",
        type=float,
        default=None,
        dest="max_price",
        help="Maximum price (inclusive).",
    )
    parser.add_argument(
        "-p",
        "--product",
        default=None,
        dest="product_id",
        help="Show a single product by ID.",
    )
    parser.add_argument(
        "--categories",
        action="store_true",
        default=False,
        help="List the product categories.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    return parser


def _wants_listing(args: argparse.Namespace) -> bool:
    return bool(
        args.list_all
        or args.query is not None
        or args.category
        or args.min_price is not None
        or args.max_price is not None
    )


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import CatalogApp

    try:
        app = CatalogApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Dispatch a headless command and return its exit code."""
    from src.cli.runner import cli_categories, cli_list, cli_show

    if args.product_id is not None:
        return asyncio.run(cli_show(args.product_id, args.output_format))
    if args.categories:
        return asyncio.run(cli_categories(args.output_format))
    return asyncio.run(
        cli_list(
            query=args.query,
            category=args.category,
            min_price=args.min_price,
            max_price=args.max_price,
            output_format=args.output_format,
        )
    )


def main() -> None:
    """Route to TUI (no args) or a headless command."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.product_id is None and not args.categories and not _wants_listing(args):
        _run_tui()
    else:
        sys.exit(_run_cli(args))


if __name__ == "__main__":
    main()
