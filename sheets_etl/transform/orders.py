"""Order flatteners.

Two views of the same order:
- Summary: one row per order, aggregating amounts and items across checks
- Detailed: one row per selection, or a fallback row for an empty check

The two views pick payments differently on purpose. The summary row takes
the first payment of the first check that has any payment; a detailed row
takes the first payment of its own check.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional

from sheets_etl.config import FIRST_DATA_ROW
from sheets_etl.models import Check, Order, Selection
from sheets_etl.transform.columns import Column, SheetRow, render_row
from sheets_etl.transform.values import (
    format_quantity,
    join_text,
    parse_business_date,
    parse_timestamp,
    yes_no,
)

logger = logging.getLogger(__name__)

NO_ITEMS_LABEL = "No items"


# ============================================
# Summary
# ============================================

@dataclass
class CheckTotals:
    """Aggregates of all checks of one order."""

    check_count: int = 0
    total_amount: float = 0
    tax_amount: float = 0
    payment_type: Optional[Any] = None
    payment_status: Optional[Any] = None
    total_items: float = 0
    item_lines: list = field(default_factory=list)

    @property
    def order_summary(self) -> str:
        return ", ".join(self.item_lines)


def summarize_checks(order: Order) -> CheckTotals:
    """Aggregate an order's checks in source order.

    A selection with no quantity counts as 0 toward total_items but is
    listed as "1x" in the item summary.
    """
    totals = CheckTotals(check_count=len(order.checks))
    payment_captured = False

    for check in order.checks:
        totals.total_amount += check.total_amount or 0
        totals.tax_amount += check.tax_amount or 0

        if not payment_captured and check.payments:
            totals.payment_type = check.first_payment.type
            totals.payment_status = check.payment_status
            payment_captured = True

        for selection in check.selections:
            totals.total_items += selection.quantity or 0
            name = selection.display_name if selection.display_name is not None else ""
            totals.item_lines.append(f"{format_quantity(selection.quantity or 1)}x {name}")

    return totals


class OrderSource(NamedTuple):
    """Row source for the summary order table."""

    order: Order
    totals: CheckTotals


ORDER_COLUMNS = [
    Column("Order ID", lambda s: s.order.guid),
    Column("Order Number", lambda s: s.order.display_number),
    Column("Source", lambda s: s.order.source),
    Column("Business Date", lambda s: parse_business_date(s.order.business_date)),
    Column("Opened", lambda s: parse_timestamp(s.order.opened_date)),
    Column("Paid", lambda s: parse_timestamp(s.order.paid_date)),
    Column("Closed", lambda s: parse_timestamp(s.order.closed_date)),
    Column("Duration", lambda s: s.order.duration),
    Column("Guests", lambda s: s.order.number_of_guests),
    Column("Voided", lambda s: yes_no(s.order.voided)),
    Column("Approval Status", lambda s: s.order.approval_status),
    Column("Server", lambda s: s.order.server),
    Column("Device", lambda s: s.order.device),
    Column("Test Mode", lambda s: yes_no(s.order.test_mode)),
    Column("Checks", lambda s: f"{s.totals.check_count} check(s)"),
    Column("Total Amount", lambda s: s.totals.total_amount, default=0),
    Column("Tax Amount", lambda s: s.totals.tax_amount, default=0),
    Column("Payment Type", lambda s: s.totals.payment_type),
    Column("Payment Status", lambda s: s.totals.payment_status),
    Column("Total Items", lambda s: s.totals.total_items, default=0),
    Column("Order Summary", lambda s: s.totals.order_summary),
]


def flatten_order(raw: Any) -> list:
    """Flatten one raw order into an Orders row (21 columns)."""
    order = Order.from_dict(raw)
    return render_row(ORDER_COLUMNS, OrderSource(order=order, totals=summarize_checks(order)))


# ============================================
# Detailed
# ============================================

@dataclass
class RowCursor:
    """Hands out 1-based sheet row indexes in increasing order.

    One cursor is shared by every order of a run so that row numbers keep
    increasing across checks and orders.
    """

    next_row: int = FIRST_DATA_ROW

    def take(self) -> int:
        index = self.next_row
        self.next_row += 1
        return index

    @property
    def rows_taken(self) -> int:
        return self.next_row - FIRST_DATA_ROW


class SelectionSource(NamedTuple):
    """Row source for the detailed order table.

    selection is None for the fallback row of a check with no selections.
    """

    order: Order
    check: Check
    selection: Optional[Selection]


def _item(getter):
    def read(s: SelectionSource):
        return getter(s.selection) if s.selection is not None else None
    return read


def _item_name(s: SelectionSource):
    if s.selection is None:
        return NO_ITEMS_LABEL
    return s.selection.display_name


def _item_total(s: SelectionSource):
    if s.selection is None:
        return 0
    return (s.selection.quantity or 0) * (s.selection.price or 0)


def _check_payment(getter):
    def read(s: SelectionSource):
        payment = s.check.first_payment
        return getter(payment) if payment is not None else None
    return read


ORDER_DETAILED_COLUMNS = [
    Column("Order ID", lambda s: s.order.guid),
    Column("Order Number", lambda s: s.order.display_number),
    Column("Business Date", lambda s: parse_business_date(s.order.business_date)),
    Column("Opened", lambda s: parse_timestamp(s.order.opened_date)),
    Column("Server", lambda s: s.order.server),
    Column("Check ID", lambda s: s.check.guid),
    Column("Check Number", lambda s: s.check.display_number),
    Column("Check Total", lambda s: s.check.total_amount),
    Column("Payment Status", lambda s: s.check.payment_status),
    Column("Payment Type", _check_payment(lambda p: p.type)),
    Column("Payment Amount", _check_payment(lambda p: p.amount)),
    Column("Item ID", _item(lambda sel: sel.guid)),
    Column("Item Name", _item_name),
    Column("Quantity", _item(lambda sel: sel.quantity), default=0),
    Column("Unit Price", _item(lambda sel: sel.price), default=0),
    Column("Item Total", _item_total, default=0),
    Column("Sales Category", _item(lambda sel: sel.sales_category)),
    Column("Item Group", _item(lambda sel: sel.item_group)),
    Column("Fulfillment Status", _item(lambda sel: sel.fulfillment_status)),
    Column("Modifiers", _item(lambda sel: join_text(sel.modifiers))),
]


def flatten_order_detailed(raw: Any, cursor: RowCursor) -> list[SheetRow]:
    """Flatten one raw order into Orders Detailed rows (20 columns each).

    Checks are walked in array order and selections within a check in
    array order. Every produced row takes the next index from the cursor.
    """
    order = Order.from_dict(raw)
    rows = []

    for check in order.checks:
        sources = [SelectionSource(order, check, sel) for sel in check.selections]
        if not sources:
            sources = [SelectionSource(order, check, None)]

        for source in sources:
            rows.append(SheetRow(cursor.take(), render_row(ORDER_DETAILED_COLUMNS, source)))

    return rows


def flatten_orders(records: list) -> list[list]:
    """Flatten a batch of raw orders into summary rows in source order."""
    rows = [flatten_order(record) for record in records]
    logger.debug(f"Flattened {len(rows)} orders")
    return rows


def flatten_orders_detailed(records: list, cursor: Optional[RowCursor] = None) -> list[SheetRow]:
    """Flatten a batch of raw orders into detailed rows sharing one cursor."""
    cursor = cursor or RowCursor()
    rows = []
    for record in records:
        rows.extend(flatten_order_detailed(record, cursor))
    logger.debug(
        f"Flattened {len(records)} orders into {len(rows)} detailed rows",
        extra={"input_count": len(records), "output_count": len(rows)}
    )
    return rows
