"""CLI command handlers. Each returns a process exit code."""

from __future__ import annotations

import argparse
from pathlib import Path

from tindahan.application.inventory import (
    create_category,
    delete_category,
    inventory_stats,
    list_inventory,
    run_inventory_export,
    run_price_check,
    run_spreadsheet_file_import,
    seed_default_categories,
    update_category,
)
from tindahan.application.sales import (
    SalesForm,
    add_sales_record,
    delete_sales_record,
    run_sales_export,
    sales_summary,
    update_sales_record,
)
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.errors import CatalogError
from tindahan.domain.sales import DailySales
from tindahan.runtime import get_logger, get_paths, load_catalog_rules
from tindahan.runtime.catalog_store import open_catalog_store

logger = get_logger(__name__)


def _find_category_id(store: CatalogStore, name: str) -> str | None:
    for category in store.list_categories():
        if category.name == name:
            return category.id
    return None


def _export_target(output: str | None, filename: str) -> Path:
    """Explicit output path, or ``exports/<filename>`` under the project root."""
    if output:
        target = Path(output)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target
    paths = get_paths()
    paths.ensure_data_directories()
    return paths.exports / filename


def cmd_import(args: argparse.Namespace) -> int:
    """Import a spreadsheet into the catalog."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {path}")
        return 1

    store = open_catalog_store()
    seed_default_categories(store)
    result = run_spreadsheet_file_import(store, path, path.name, args.layout)
    print(result.summary)
    if result.status == "format_error":
        return 1
    if args.verbose:
        for skipped in result.rows_skipped:
            print(f"  row {skipped.row_number}: {skipped.reason} {skipped.text}".rstrip())
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Write the catalog to an .xlsx file."""
    store = open_catalog_store()
    export = run_inventory_export(store, args.layout)
    target = _export_target(args.output, export.filename)
    target.write_bytes(export.content)
    print(f"Exported {export.item_count} items to {target}")
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """List or search the catalog."""
    store = open_catalog_store()
    try:
        items = list_inventory(
            store,
            args.query,
            "exact" if args.exact else "smart",
            args.sort_by,
            args.desc,
        )
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1

    if not items:
        print("No matching items.")
        return 0
    symbol = load_catalog_rules().store.currency_symbol
    width = max(len(item.item_name) for item in items)
    for item in items:
        print(f"{item.item_name:<{width}}  {symbol}{item.price:>9}  {item.stock:>5}  {item.category}")
    return 0


def cmd_price(args: argparse.Namespace) -> int:
    """Answer a "<quantity> <item>" price question."""
    store = open_catalog_store()
    quote = run_price_check(store, " ".join(args.query))
    print(quote.message)
    return 0 if quote.status == "quoted" else 1


def cmd_stats(args: argparse.Namespace) -> int:
    store = open_catalog_store()
    stats = inventory_stats(store)
    symbol = load_catalog_rules().store.currency_symbol
    print(f"Items:       {stats.total_items}")
    print(f"Total stock: {stats.total_stock}")
    print(f"Low stock:   {stats.low_stock_count}")
    print(f"Stock value: {symbol}{stats.total_value:,.2f}")
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """List, add, rename or delete categories."""
    store = open_catalog_store()
    action = args.category_action or "list"

    if action == "list":
        counts: dict[str, int] = {}
        for item in store.list_inventory():
            counts[item.category] = counts.get(item.category, 0) + 1
        for category in store.list_categories():
            print(f"{category.name} ({counts.get(category.name, 0)} items)")
        return 0

    if action == "seed":
        created = seed_default_categories(store)
        print(f"Created {len(created)} default categories")
        return 0

    try:
        if action == "add":
            category = create_category(store, args.name, args.description)
            print(f'Created category "{category.name}"')
            return 0

        category_id = _find_category_id(store, args.name)
        if category_id is None:
            print(f'Error: no category named "{args.name}"')
            return 1
        if action == "rename":
            result = update_category(store, category_id, name=args.new_name)
            print(
                f'Renamed "{result.previous_name}" to "{result.category.name}" '
                f"({result.items_updated} items updated)"
            )
            return 0
        if action == "delete":
            delete_category(store, category_id)
            print(f'Deleted category "{args.name}"')
            return 0
    except CatalogError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Unknown categories action: {action}")
    return 1


def _sales_form(args: argparse.Namespace) -> SalesForm:
    return SalesForm(
        date=args.date,
        beginning=args.beginning,
        ending=args.ending,
        purchases=args.purchases,
        remarks=args.remarks,
    )


def _sales_figures(record: DailySales, symbol: str) -> str:
    return f"sale {symbol}{record.sale_in_cash:,.2f}, profit {symbol}{record.profit:,.2f}"


def cmd_sales(args: argparse.Namespace) -> int:
    """List, record, correct, delete or export daily sales."""
    store = open_catalog_store()
    action = args.sales_action or "list"
    symbol = load_catalog_rules().store.currency_symbol

    if action == "list":
        summary = sales_summary(store, getattr(args, "month", None))
        if not summary.records:
            print("No sales records.")
            return 0
        for record in summary.records:
            print(
                f"{record.date}  sale {symbol}{record.sale_in_cash:>10,.2f}  "
                f"profit {symbol}{record.profit:>9,.2f}  {record.id}  {record.remarks}".rstrip()
            )
        totals = summary.totals
        print(
            f"Total: {totals.record_count} day(s), sales {symbol}{totals.total_sales:,.2f}, "
            f"profit {symbol}{totals.total_profit:,.2f}, purchases {symbol}{totals.total_purchases:,.2f}"
        )
        return 0

    if action == "export":
        export = run_sales_export(store, args.month)
        target = _export_target(args.output, export.filename)
        target.write_bytes(export.content)
        print(f"Exported {export.record_count} sales records to {target}")
        return 0

    try:
        if action == "add":
            record = add_sales_record(store, _sales_form(args))
            print(f"Recorded {record.date}: {_sales_figures(record, symbol)}")
            return 0
        if action == "update":
            record = update_sales_record(store, args.record_id, _sales_form(args))
            print(f"Updated {record.date}: {_sales_figures(record, symbol)}")
            return 0
        if action == "delete":
            record = delete_sales_record(store, args.record_id)
            print(f"Deleted sales record for {record.date}")
            return 0
    except CatalogError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Unknown sales action: {action}")
    return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI catalog server."""
    import uvicorn

    from tindahan.api import create_app
    from tindahan.runtime.sessions import SessionStore

    store = open_catalog_store()
    seed_default_categories(store)
    sessions = SessionStore()
    admin = sessions.open(user_id="admin", email=args.admin_email, is_admin=True)

    print(f"Starting inventory server on {args.host}:{args.port}")
    print(f"Admin session token (send as x-session-id): {admin.token}")
    print("Press Ctrl+C to stop")

    uvicorn.run(create_app(store, sessions), host=args.host, port=args.port)
    return 0
