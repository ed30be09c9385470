"""POS Sheets Import DAG.

Runs the three import operations once a day:
1. Products → Products, Products Detailed
2. Orders → Orders
3. Orders detailed → Orders Detailed

Orders are imported for the day before the run's logical date, which is
the business day that closed overnight.

Schedule: Daily at 06:00
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Any

from airflow.providers.standard.operators.empty import EmptyOperator
from airflow.providers.standard.operators.python import PythonOperator
from airflow.sdk import DAG

logger = logging.getLogger(__name__)

DAG_ID = "pos_sheets_import"

default_args = {
    "owner": "data-engineering",
    "depends_on_past": False,
    "email_on_failure": False,
    "email_on_retry": False,
    "retries": 0,
}


def on_failure_callback(context: dict[str, Any]) -> None:
    """Log task failure with enough context to rerun it by hand."""
    task_instance = context.get("task_instance")

    error_message = {
        "event": "task_failure",
        "dag_id": context.get("dag").dag_id,
        "task_id": task_instance.task_id,
        "logical_date": str(context.get("logical_date")),
        "try_number": task_instance.try_number,
        "error": str(context.get("exception")),
    }

    logger.error(f"Task failed: {json.dumps(error_message)}")


def run_import(operation: str, **context) -> dict:
    """Run one import operation for the previous business date.

    Raises:
        RuntimeError: If the import reported an error
    """
    from sheets_etl.imports import run_imports
    from sheets_etl.utils import setup_logging

    setup_logging(level="INFO", json_format=True)

    business_date = (context["logical_date"] - timedelta(days=1)).strftime("%Y%m%d")

    result = run_imports(
        operations=[operation],
        business_date=business_date,
        run_id=context["run_id"],
    )

    context["ti"].xcom_push(key="import_result", value=result)

    if result["status"] != "success":
        raise RuntimeError(f"Import {operation} failed: {result['results'][operation].get('error')}")

    return result


with DAG(
    dag_id=DAG_ID,
    default_args=default_args,
    description="Import POS products and orders into workbook sheets",
    schedule="0 6 * * *",
    start_date=datetime(2025, 1, 1),
    catchup=False,
    max_active_runs=1,
    dagrun_timeout=timedelta(minutes=30),
    tags=["pos", "sheets", "import"],
    on_failure_callback=on_failure_callback,
) as dag:

    start = EmptyOperator(task_id="start")

    import_tasks = [
        PythonOperator(
            task_id=f"import_{operation}",
            python_callable=run_import,
            op_kwargs={"operation": operation},
            on_failure_callback=on_failure_callback,
        )
        for operation in ["products", "orders", "orders_detailed"]
    ]

    end = EmptyOperator(task_id="end")

    # The three imports share one workbook file, so they run one after another
    start >> import_tasks[0] >> import_tasks[1] >> import_tasks[2] >> end
