"""FastAPI server for the shop's inventory catalog.

Everything except ``/health`` and ``/api/inventory/public`` requires an
``x-session-id`` header issued by the SessionStore.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, Literal

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware

from tindahan.application.inventory import (
    ItemForm,
    add_inventory_item,
    build_edit_form,
    clear_inventory,
    create_category,
    delete_category,
    delete_inventory_item,
    inventory_stats,
    list_inventory,
    low_stock_items,
    public_listing,
    run_inventory_export,
    run_price_check,
    run_spreadsheet_file_import,
    update_category,
    update_inventory_item,
)
from tindahan.application.sales import (
    SalesForm,
    add_sales_record,
    delete_sales_record,
    run_sales_export,
    sales_summary,
    update_sales_record,
)
from tindahan.catalog.config import CatalogRules
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.errors import (
    CatalogError,
    CategoryInUseError,
    DuplicateCategoryError,
    DuplicateItemError,
    RecordNotFoundError,
)
from tindahan.domain.inventory import InventoryRecord
from tindahan.runtime import get_logger, load_catalog_rules
from tindahan.runtime.sessions import SessionContext, SessionStore
from tindahan.runtime.spreadsheet_io import XLSX_MEDIA_TYPE

logger = get_logger(__name__)

SESSION_HEADER = "x-session-id"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request at DEBUG."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


class ItemBody(BaseModel):
    itemName: str
    price: str | float = ""
    stock: int = Field(default=0, ge=0)
    category: str = "General"
    bulkQuantity: int | None = None
    bulkPrice: str | float | None = None

    def to_form(self) -> ItemForm:
        return ItemForm(
            item_name=self.itemName,
            price=str(self.price),
            stock=self.stock,
            category=self.category,
            bulk_quantity=self.bulkQuantity,
            bulk_price=None if self.bulkPrice is None else str(self.bulkPrice),
        )


class CategoryBody(BaseModel):
    name: str
    description: str = ""


class CategoryUpdateBody(BaseModel):
    name: str | None = None
    description: str | None = None


class PriceCheckBody(BaseModel):
    query: str


class SalesBody(BaseModel):
    date: str
    beginning: str | float
    ending: str | float
    purchases: str | float = ""
    remarks: str = ""

    def to_form(self) -> SalesForm:
        return SalesForm(
            date=self.date,
            beginning=str(self.beginning),
            ending=str(self.ending),
            purchases=str(self.purchases),
            remarks=self.remarks,
        )


def _status_for(exc: CatalogError) -> int:
    if isinstance(exc, RecordNotFoundError):
        return 404
    if isinstance(exc, DuplicateItemError | DuplicateCategoryError | CategoryInUseError):
        return 409
    return 400


def create_app(
    store: CatalogStore,
    sessions: SessionStore,
    rules: CatalogRules | None = None,
) -> FastAPI:
    """Build the API around an explicit store, session registry and rule set."""
    rules = rules or load_catalog_rules()
    app = FastAPI(title="Tindahan Inventory")
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        status = _status_for(exc)
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, status, exc)
        return JSONResponse({"message": str(exc)}, status_code=status)

    def require_session(
        session_id: Annotated[str | None, Header(alias=SESSION_HEADER)] = None,
    ) -> SessionContext:
        session = sessions.resolve(session_id)
        if session is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return session

    Session = Annotated[SessionContext, Depends(require_session)]

    def item_json(item: InventoryRecord) -> dict[str, Any]:
        return item.to_dict()

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/auth/user")
    def current_user(session: Session) -> dict[str, Any]:
        return {"user": {"id": session.user_id, "email": session.email, "isAdmin": session.is_admin}}

    @app.post("/api/auth/logout")
    def logout(session: Session) -> dict[str, str]:
        sessions.close(session.token)
        return {"message": "Logged out successfully"}

    @app.get("/api/inventory/public")
    def public_inventory(search: str | None = None) -> list[dict[str, Any]]:
        return [
            {
                "itemName": item.item_name,
                "price": item.price,
                "category": item.category,
                "availability": item.availability,
            }
            for item in public_listing(store, search, rules)
        ]

    @app.get("/api/inventory")
    def get_inventory(
        session: Session,
        search: str | None = None,
        mode: Literal["smart", "exact"] = "smart",
        sortBy: str = "itemName",
        sortOrder: Literal["asc", "desc"] = "asc",
    ) -> list[dict[str, Any]]:
        try:
            items = list_inventory(store, search, mode, sortBy, sortOrder == "desc", rules)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return [item_json(item) for item in items]

    @app.get("/api/inventory/low-stock")
    def get_low_stock(session: Session, threshold: int | None = None) -> list[dict[str, Any]]:
        return [item_json(item) for item in low_stock_items(store, threshold, rules)]

    @app.get("/api/inventory/stats")
    def get_stats(session: Session) -> dict[str, Any]:
        stats = inventory_stats(store, rules)
        return {
            "totalItems": stats.total_items,
            "totalStock": stats.total_stock,
            "lowStockCount": stats.low_stock_count,
            "totalValue": str(stats.total_value),
        }

    @app.post("/api/inventory/upload")
    def upload_inventory(
        session: Session,
        file: Annotated[UploadFile, File()],
        layout: Annotated[Literal["sectioned", "upload"], Form()] = "sectioned",
    ) -> JSONResponse:
        contents = file.file.read()
        result = run_spreadsheet_file_import(
            store, contents, file.filename or "upload.xlsx", layout, session.user_id, rules
        )
        if result.status == "format_error":
            return JSONResponse({"message": result.summary}, status_code=400)
        return JSONResponse(
            {
                "message": result.summary,
                "itemCount": len(result.created),
                "duplicatesSkipped": result.duplicates_skipped,
                "rowsSkipped": len(result.rows_skipped),
                "categoriesCreated": result.categories_created,
                "strategy": result.strategy,
            }
        )

    @app.get("/api/inventory/export")
    def export_inventory(session: Session, layout: Literal["flat", "sectioned"] = "flat") -> Response:
        export = run_inventory_export(store, layout, session.user_id)
        return Response(
            content=export.content,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.post("/api/inventory/clear")
    def clear_all(session: Session) -> dict[str, Any]:
        removed = clear_inventory(store, session.user_id)
        return {"message": "All inventory data has been cleared", "removed": removed}

    @app.post("/api/inventory", status_code=201)
    def create_item(session: Session, body: ItemBody) -> dict[str, Any]:
        return item_json(add_inventory_item(store, body.to_form(), session.user_id))

    @app.get("/api/inventory/{item_id}/edit-form")
    def edit_form(session: Session, item_id: str) -> dict[str, Any]:
        form = build_edit_form(store.get_inventory_item(item_id))
        return {
            "itemName": form.item_name,
            "price": form.price,
            "stock": form.stock,
            "category": form.category,
            "bulkQuantity": form.bulk_quantity,
            "bulkPrice": form.bulk_price,
        }

    @app.put("/api/inventory/{item_id}")
    def update_item(session: Session, item_id: str, body: ItemBody) -> dict[str, Any]:
        return item_json(update_inventory_item(store, item_id, body.to_form(), session.user_id))

    @app.delete("/api/inventory/{item_id}")
    def delete_item(session: Session, item_id: str) -> dict[str, str]:
        record = delete_inventory_item(store, item_id, session.user_id)
        return {"message": f'Deleted "{record.item_name}"'}

    @app.post("/api/price-check")
    def price_check(session: Session, body: PriceCheckBody) -> dict[str, Any]:
        quote = run_price_check(store, body.query, rules)
        return {
            "status": quote.status,
            "message": quote.message,
            "quantity": quote.quantity,
            "total": None if quote.total is None else str(quote.total),
            "candidates": [candidate.item.item_name for candidate in quote.candidates],
        }

    @app.get("/api/categories")
    def get_categories(session: Session) -> list[dict[str, Any]]:
        return [category.to_dict() for category in store.list_categories()]

    @app.post("/api/categories", status_code=201)
    def post_category(session: Session, body: CategoryBody) -> dict[str, Any]:
        return create_category(store, body.name, body.description, session.user_id).to_dict()

    @app.put("/api/categories/{category_id}")
    def put_category(session: Session, category_id: str, body: CategoryUpdateBody) -> dict[str, Any]:
        result = update_category(store, category_id, body.name, body.description, session.user_id)
        payload = result.category.to_dict()
        payload["itemsUpdated"] = result.items_updated
        return payload

    @app.delete("/api/categories/{category_id}")
    def remove_category(session: Session, category_id: str) -> dict[str, str]:
        category = delete_category(store, category_id, session.user_id)
        return {"message": f'Deleted category "{category.name}"'}

    @app.get("/api/sales")
    def get_sales(session: Session, month: str | None = None) -> list[dict[str, Any]]:
        return [record.to_dict() for record in sales_summary(store, month).records]

    @app.get("/api/sales/summary")
    def get_sales_summary(session: Session, month: str | None = None) -> dict[str, Any]:
        summary = sales_summary(store, month)
        return {
            "totalSales": str(summary.totals.total_sales),
            "totalProfit": str(summary.totals.total_profit),
            "totalPurchases": str(summary.totals.total_purchases),
            "recordCount": summary.totals.record_count,
            "months": summary.months,
        }

    @app.get("/api/sales/export")
    def export_sales(session: Session, month: str | None = None) -> Response:
        export = run_sales_export(store, month, session.user_id)
        return Response(
            content=export.content,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.post("/api/sales", status_code=201)
    def create_sales(session: Session, body: SalesBody) -> dict[str, Any]:
        return add_sales_record(store, body.to_form(), session.user_id, rules).to_dict()

    @app.put("/api/sales/{record_id}")
    def put_sales(session: Session, record_id: str, body: SalesBody) -> dict[str, Any]:
        return update_sales_record(store, record_id, body.to_form(), session.user_id, rules).to_dict()

    @app.delete("/api/sales/{record_id}")
    def remove_sales(session: Session, record_id: str) -> dict[str, str]:
        record = delete_sales_record(store, record_id, session.user_id)
        return {"message": f"Deleted sales record for {record.date}"}

    @app.get("/api/activity-logs")
    def activity_logs(session: Session, limit: int = 50) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in store.list_activity(limit)]

    return app
