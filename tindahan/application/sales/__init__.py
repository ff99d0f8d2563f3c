"""Daily sales workflows."""

from tindahan.application.sales.export import SalesExport, run_sales_export
from tindahan.application.sales.records import (
    SalesForm,
    SalesSummary,
    add_sales_record,
    delete_sales_record,
    form_to_sales_draft,
    sales_summary,
    update_sales_record,
)

__all__ = [
    "SalesExport",
    "SalesForm",
    "SalesSummary",
    "add_sales_record",
    "delete_sales_record",
    "form_to_sales_draft",
    "run_sales_export",
    "sales_summary",
    "update_sales_record",
]
