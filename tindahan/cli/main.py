#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Sequence

from tindahan.runtime import configure_logging, load_catalog_rules, set_log_level, set_project_root


def _add_sales_figures(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("date", help="YYYY-MM-DD")
    parser.add_argument("beginning", help="Stock value at opening")
    parser.add_argument("ending", help="Stock value at closing")
    parser.add_argument("--purchases", default="", help="Purchases made that day")
    parser.add_argument("--remarks", default="")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Tindahan inventory CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  import <file> [--layout]   Import items from .xlsx/.csv
  export [output] [--layout] Export the catalog to .xlsx (default: exports/)
  search [query]             List or search items
  price <qty> <item...>      Quote a price, e.g. "price 7 v fresh"
  stats                      Inventory totals
  categories [action]        list | seed | add | rename | delete
  sales [action]             list | add | update | delete | export
  serve [--host] [--port]    Start the inventory API server

Notes:
  The catalog lives in data/catalog.json under the project root
  (TINDAHAN_HOME or the current directory). Rule overrides are read
  from config/catalog_rules.toml.
""",
    )
    parser.add_argument("--home", default=None, help="Project root (default: $TINDAHAN_HOME or current directory)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override TINDAHAN_LOG_LEVEL for this run",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_parser = subparsers.add_parser("import", help="Import items from a spreadsheet")
    import_parser.add_argument("file", help="Path to .xlsx or .csv file")
    import_parser.add_argument(
        "--layout",
        choices=["sectioned", "upload"],
        default="sectioned",
        help="sectioned: category rows above name/price rows; upload: table with a header row",
    )
    import_parser.add_argument("-v", "--verbose", action="store_true", help="List rows that were skipped")

    export_parser = subparsers.add_parser("export", help="Export the catalog to .xlsx")
    export_parser.add_argument("output", nargs="?", default=None, help="Output path (default: exports/inventory-export-<date>.xlsx)")
    export_parser.add_argument("--layout", choices=["flat", "sectioned"], default="flat")

    search_parser = subparsers.add_parser("search", help="List or search items")
    search_parser.add_argument("query", nargs="?", default=None)
    search_parser.add_argument("--exact", action="store_true", help="Match whole field values only")
    search_parser.add_argument(
        "--sort-by", default="itemName", choices=["itemName", "price", "stock", "category"]
    )
    search_parser.add_argument("--desc", action="store_true", help="Sort descending")

    price_parser = subparsers.add_parser("price", help="Quote a price for a quantity of an item")
    price_parser.add_argument("query", nargs="+", help='Quantity then item, e.g. 7 v fresh')

    subparsers.add_parser("stats", help="Inventory totals")

    categories_parser = subparsers.add_parser("categories", help="Manage categories")
    category_actions = categories_parser.add_subparsers(dest="category_action")
    category_actions.add_parser("list", help="List categories with item counts")
    category_actions.add_parser("seed", help="Create the configured default categories")
    add_parser = category_actions.add_parser("add", help="Create a category")
    add_parser.add_argument("name")
    add_parser.add_argument("--description", default="")
    rename_parser = category_actions.add_parser("rename", help="Rename a category and its items")
    rename_parser.add_argument("name")
    rename_parser.add_argument("new_name")
    delete_parser = category_actions.add_parser("delete", help="Delete an unused category")
    delete_parser.add_argument("name")

    sales_parser = subparsers.add_parser("sales", help="Record and review daily sales")
    sales_actions = sales_parser.add_subparsers(dest="sales_action")
    sales_list_parser = sales_actions.add_parser("list", help="List daily sales with totals")
    sales_list_parser.add_argument("--month", default=None, help='Month label, e.g. "June-2025"')
    _add_sales_figures(sales_actions.add_parser("add", help="Record a day's figures"))
    sales_update_parser = sales_actions.add_parser("update", help="Replace a record's figures")
    sales_update_parser.add_argument("record_id")
    _add_sales_figures(sales_update_parser)
    sales_delete_parser = sales_actions.add_parser("delete", help="Delete a sales record")
    sales_delete_parser.add_argument("record_id")
    sales_export_parser = sales_actions.add_parser("export", help="Export daily sales to .xlsx")
    sales_export_parser.add_argument("output", nargs="?", default=None, help="Output path (default: exports/)")
    sales_export_parser.add_argument("--month", default=None)

    serve_parser = subparsers.add_parser("serve", help="Start the inventory API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")
    serve_parser.add_argument("--admin-email", default="admin@localhost", help="Email shown for the admin session")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging()
    if args.log_level:
        set_log_level(getattr(logging, args.log_level))

    if args.home:
        set_project_root(args.home)
        load_catalog_rules.cache_clear()

    from tindahan.cli import commands

    handlers = {
        "import": commands.cmd_import,
        "export": commands.cmd_export,
        "search": commands.cmd_search,
        "price": commands.cmd_price,
        "stats": commands.cmd_stats,
        "categories": commands.cmd_categories,
        "sales": commands.cmd_sales,
        "serve": commands.cmd_serve,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
