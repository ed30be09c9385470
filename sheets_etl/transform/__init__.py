"""Flatteners from upstream JSON records to fixed-width sheet rows.

Handles:
- Product rows (summary and detailed)
- Order rows aggregated per order
- Order rows per line item with a shared row cursor
"""

from .columns import Column, SheetRow, headers, render_row
from .orders import (
    ORDER_COLUMNS,
    ORDER_DETAILED_COLUMNS,
    CheckTotals,
    RowCursor,
    flatten_order,
    flatten_order_detailed,
    flatten_orders,
    flatten_orders_detailed,
    summarize_checks,
)
from .products import (
    PRODUCT_COLUMNS,
    PRODUCT_DETAILED_COLUMNS,
    build_custom_fields,
    flatten_product,
    flatten_product_detailed,
    flatten_products,
)

__all__ = [
    # Column tables
    "Column",
    "SheetRow",
    "headers",
    "render_row",
    "PRODUCT_COLUMNS",
    "PRODUCT_DETAILED_COLUMNS",
    "ORDER_COLUMNS",
    "ORDER_DETAILED_COLUMNS",
    # Products
    "build_custom_fields",
    "flatten_product",
    "flatten_product_detailed",
    "flatten_products",
    # Orders
    "CheckTotals",
    "RowCursor",
    "summarize_checks",
    "flatten_order",
    "flatten_order_detailed",
    "flatten_orders",
    "flatten_orders_detailed",
]
