"""Import entry points: API → Transform → Workbook.

Usage:
    python -m sheets_etl.imports
    python -m sheets_etl.imports --operation products
    python -m sheets_etl.imports --operation orders_detailed --business-date 20250115
"""

import argparse
import logging
import sys
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from dotenv import load_dotenv

from sheets_etl.clients import OrdersClient, ProductsClient
from sheets_etl.config import (
    FIRST_DATA_ROW,
    ORDERS_DETAILED_SHEET,
    ORDERS_SHEET,
    PRODUCTS_DETAILED_SHEET,
    PRODUCTS_SHEET,
    Settings,
    today_business_date,
    validate_business_date,
)
from sheets_etl.exceptions import SheetsETLError
from sheets_etl.transform import (
    ORDER_COLUMNS,
    ORDER_DETAILED_COLUMNS,
    PRODUCT_COLUMNS,
    PRODUCT_DETAILED_COLUMNS,
    Column,
    RowCursor,
    SheetRow,
    flatten_orders,
    flatten_orders_detailed,
    flatten_products,
    headers,
)
from sheets_etl.utils import PipelineLogger, WorkbookWriter, setup_logging, timed_operation

logger = logging.getLogger(__name__)

OPERATIONS = ["products", "orders", "orders_detailed"]
ORDER_OPERATIONS = {"orders", "orders_detailed"}


@dataclass
class SheetTarget:
    """One worksheet an operation rewrites, and how to build its rows."""

    sheet: str
    columns: list[Column]
    build_rows: Callable[[list], list[SheetRow]]


def _numbered(rows: list[list]) -> list[SheetRow]:
    return [SheetRow(index, row) for index, row in enumerate(rows, start=FIRST_DATA_ROW)]


def _new_run_id() -> str:
    return uuid.uuid4().hex[:12]


def _run_operation(
    operation: str,
    targets: list[SheetTarget],
    fetch: Callable[[], list],
    writer: Optional[WorkbookWriter],
    run_id: Optional[str],
    settings: Settings,
) -> dict:
    """Clear target sheets, fetch once, flatten and write.

    Sheets are cleared and given their header before the fetch, so a
    failed fetch leaves header-only sheets behind. Any exception raised
    while building the client or fetching becomes an error result.
    """
    run_id = run_id or _new_run_id()
    owns_writer = writer is None
    writer = writer or WorkbookWriter(settings.workbook_path)
    plog = PipelineLogger(operation, run_id)
    sheet_names = [t.sheet for t in targets]

    logger.info(f"Starting import for {operation}", extra={"run_id": run_id, "sheets": sheet_names})
    plog.start(operation)

    for target in targets:
        writer.clear_or_create_sheet(target.sheet)
        writer.write_header(target.sheet, headers(target.columns))

    try:
        with timed_operation("fetch", logger) as timer:
            records = fetch()
        plog.log_fetch(len(records), timer.duration_ms)

    except Exception as e:
        logger.error(f"Failed to import {operation}: {e}", exc_info=True)
        plog.error(operation, e)
        result = {
            "operation": operation,
            "run_id": run_id,
            "status": "error",
            "error": str(e),
            "records_fetched": 0,
            "rows_written": 0,
            "sheets": {sheet: 0 for sheet in sheet_names},
        }

    else:
        written = {}
        for target in targets:
            with timed_operation("transform", logger) as timer:
                rows = target.build_rows(records)
            plog.log_transform(len(records), len(rows), timer.duration_ms)

            with timed_operation("sheet_write", logger) as timer:
                written[target.sheet] = writer.write_rows(target.sheet, rows)
            plog.log_sheet_write(target.sheet, written[target.sheet], timer.duration_ms)

        result = {
            "operation": operation,
            "run_id": run_id,
            "status": "success",
            "records_fetched": len(records),
            "rows_written": sum(written.values()),
            "sheets": written,
        }
        plog.success(operation, row_count=result["rows_written"])

    for target in targets:
        writer.autosize_columns(target.sheet)

    if owns_writer:
        writer.save()

    logger.info(f"Completed import for {operation}", extra=result)
    return result


def import_products(
    writer: Optional[WorkbookWriter] = None,
    run_id: Optional[str] = None,
    client: Optional[ProductsClient] = None,
    settings: Optional[Settings] = None,
) -> dict:
    """Rewrite the Products and Products Detailed sheets from one catalog fetch.

    Args:
        writer: Workbook to write into; opened from settings and saved when omitted
        run_id: Run identifier for logs (auto-generated if not provided)
        client: Products client (built from environment if not provided)
        settings: Run settings (read from environment if not provided)

    Returns:
        Import result metadata
    """
    settings = settings or Settings.from_env()

    def fetch() -> list:
        products_client = client or ProductsClient(timeout=settings.request_timeout)
        return products_client.fetch()

    targets = [
        SheetTarget(PRODUCTS_SHEET, PRODUCT_COLUMNS,
                    lambda records: _numbered(flatten_products(records))),
        SheetTarget(PRODUCTS_DETAILED_SHEET, PRODUCT_DETAILED_COLUMNS,
                    lambda records: _numbered(flatten_products(records, detailed=True))),
    ]
    return _run_operation("products", targets, fetch, writer, run_id, settings)


def _orders_fetch(
    business_date: str,
    client: Optional[OrdersClient],
    settings: Settings,
) -> Callable[[], list]:
    def fetch() -> list:
        orders_client = client or OrdersClient(timeout=settings.request_timeout)
        return orders_client.fetch(business_date)
    return fetch


def import_orders(
    business_date: str,
    writer: Optional[WorkbookWriter] = None,
    run_id: Optional[str] = None,
    client: Optional[OrdersClient] = None,
    settings: Optional[Settings] = None,
) -> dict:
    """Rewrite the Orders sheet with one summary row per order.

    Args:
        business_date: Business date in yyyyMMdd form

    Raises:
        ConfigError: If business_date is malformed; no sheet is touched
    """
    validate_business_date(business_date)
    settings = settings or Settings.from_env()

    targets = [
        SheetTarget(ORDERS_SHEET, ORDER_COLUMNS,
                    lambda records: _numbered(flatten_orders(records))),
    ]
    return _run_operation(
        "orders", targets, _orders_fetch(business_date, client, settings), writer, run_id, settings
    )


def import_orders_detailed(
    business_date: str,
    writer: Optional[WorkbookWriter] = None,
    run_id: Optional[str] = None,
    client: Optional[OrdersClient] = None,
    settings: Optional[Settings] = None,
) -> dict:
    """Rewrite the Orders Detailed sheet with one row per line item.

    Args:
        business_date: Business date in yyyyMMdd form

    Raises:
        ConfigError: If business_date is malformed; no sheet is touched
    """
    validate_business_date(business_date)
    settings = settings or Settings.from_env()

    targets = [
        SheetTarget(ORDERS_DETAILED_SHEET, ORDER_DETAILED_COLUMNS,
                    lambda records: flatten_orders_detailed(records, RowCursor(FIRST_DATA_ROW))),
    ]
    return _run_operation(
        "orders_detailed", targets, _orders_fetch(business_date, client, settings),
        writer, run_id, settings,
    )


def run_imports(
    operations: Optional[list[str]] = None,
    business_date: Optional[str] = None,
    run_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> dict:
    """Run several import operations against one workbook.

    Args:
        operations: Operations to run (default: all)
        business_date: yyyyMMdd date for the order operations (default: today)
        run_id: Optional run ID (auto-generated if not provided)
        settings: Run settings (read from environment if not provided)

    Returns:
        Combined results for all operations

    Raises:
        ConfigError: If business_date is malformed
        ValueError: If an operation name is unknown
    """
    run_id = run_id or _new_run_id()
    operations = operations or list(OPERATIONS)
    unknown = [op for op in operations if op not in OPERATIONS]
    if unknown:
        raise ValueError(f"Unknown operations: {unknown}")

    business_date = business_date or today_business_date()
    if ORDER_OPERATIONS.intersection(operations):
        validate_business_date(business_date)

    settings = settings or Settings.from_env()
    start_time = datetime.now(timezone.utc)

    logger.info(
        "Starting import run",
        extra={
            "run_id": run_id,
            "operations": operations,
            "business_date": business_date,
            "workbook": str(settings.workbook_path),
        }
    )

    writer = WorkbookWriter(settings.workbook_path)
    results = {}

    if "products" in operations:
        results["products"] = import_products(writer, run_id, settings=settings)

    if "orders" in operations:
        results["orders"] = import_orders(business_date, writer, run_id, settings=settings)

    if "orders_detailed" in operations:
        results["orders_detailed"] = import_orders_detailed(
            business_date, writer, run_id, settings=settings
        )

    writer.save()

    end_time = datetime.now(timezone.utc)
    duration_seconds = (end_time - start_time).total_seconds()
    total_rows = sum(r.get("rows_written", 0) for r in results.values())
    all_success = all(r.get("status") == "success" for r in results.values())

    summary = {
        "run_id": run_id,
        "status": "success" if all_success else "partial_failure",
        "operations": operations,
        "business_date": business_date,
        "workbook": str(settings.workbook_path),
        "total_rows_written": total_rows,
        "duration_seconds": duration_seconds,
        "started_at": start_time.isoformat(),
        "completed_at": end_time.isoformat(),
        "results": results,
    }

    logger.info(
        f"Import run complete: {total_rows} rows written in {duration_seconds:.2f}s",
        extra=summary
    )

    return summary


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Import POS products and orders into workbook sheets"
    )
    parser.add_argument(
        "--operation",
        choices=OPERATIONS + ["all"],
        default="all",
        help="Import to run (default: all)",
    )
    parser.add_argument(
        "--business-date",
        type=str,
        default=None,
        help="Order business date as yyyyMMdd (default: today)",
    )
    parser.add_argument(
        "--workbook",
        type=str,
        default=None,
        help="Workbook path (default: SHEETS_WORKBOOK_PATH or pos_sheets.xlsx)",
    )
    parser.add_argument(
        "--run-id",
        type=str,
        default=None,
        help="Run ID (auto-generated if not provided)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    args = parser.parse_args(argv)

    load_dotenv()

    try:
        settings = Settings.from_env(workbook_path=args.workbook)
    except SheetsETLError as e:
        parser.error(str(e))

    setup_logging(level=args.log_level or settings.log_level, json_format=args.json_logs)

    operations = None if args.operation == "all" else [args.operation]

    try:
        result = run_imports(
            operations=operations,
            business_date=args.business_date,
            run_id=args.run_id,
            settings=settings,
        )
    except SheetsETLError as e:
        parser.error(str(e))

    if result["status"] != "success":
        sys.exit(1)


if __name__ == "__main__":
    main()
