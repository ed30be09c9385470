"""Structured logging for import operations.

Every step record carries the same fields:
- operation
- run_id
- step
- row_count
- sheet
- duration_ms
"""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class PipelineLogContext:
    """Fields logged for one step of an import operation."""

    operation: str
    run_id: str
    step: str = ""
    row_count: int = 0
    sheet: Optional[str] = None
    duration_ms: Optional[float] = None
    status: str = "started"
    error: Optional[str] = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging, dropping unset fields."""
        data = asdict(self)
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        return {k: v for k, v in data.items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class PipelineLogger:
    """Step logger for one import operation."""

    def __init__(self, operation: str, run_id: str):
        """Initialize pipeline logger.

        Args:
            operation: Import operation name (e.g. 'products', 'orders')
            run_id: Identifier shared by all operations of one run
        """
        self.operation = operation
        self.run_id = run_id
        self.logger = logging.getLogger(f"sheets_etl.pipeline.{operation}")
        self._start_time: Optional[float] = None

    def _log(self, level: int, step: str, **kwargs) -> None:
        ctx = PipelineLogContext(
            operation=self.operation,
            run_id=self.run_id,
            step=step,
            **kwargs
        )
        self.logger.log(level, ctx.to_json(), extra=ctx.to_dict())

    def _elapsed_ms(self) -> Optional[float]:
        if self._start_time is None:
            return None
        return round((time.time() - self._start_time) * 1000, 2)

    def start(self, step: str) -> None:
        """Log step start."""
        self._start_time = time.time()
        self._log(logging.INFO, step, status="started")

    def success(self, step: str, **kwargs) -> None:
        """Log step success with the time since start()."""
        self._log(logging.INFO, step, status="success", duration_ms=self._elapsed_ms(), **kwargs)

    def error(self, step: str, error: Exception, **kwargs) -> None:
        """Log step failure with the time since start()."""
        self._log(
            logging.ERROR,
            step,
            status="error",
            error=str(error),
            duration_ms=self._elapsed_ms(),
            **kwargs
        )

    def log_fetch(self, record_count: int, duration_ms: float) -> None:
        """Log the fetch step."""
        self._log(
            logging.INFO,
            step="fetch",
            status="success",
            row_count=record_count,
            duration_ms=round(duration_ms, 2),
        )

    def log_transform(self, input_count: int, output_count: int, duration_ms: float) -> None:
        """Log a flattening step."""
        self._log(
            logging.INFO,
            step="transform",
            status="success",
            row_count=output_count,
            duration_ms=round(duration_ms, 2),
            extra={"input_count": input_count, "output_count": output_count},
        )

    def log_sheet_write(self, sheet: str, row_count: int, duration_ms: float) -> None:
        """Log rows written to one worksheet."""
        self._log(
            logging.INFO,
            step="sheet_write",
            status="success",
            sheet=sheet,
            row_count=row_count,
            duration_ms=round(duration_ms, 2),
        )


class Timer:
    """Elapsed time of a timed_operation block."""

    def __init__(self):
        self.start_time = time.time()
        self.end_time: Optional[float] = None
        self.duration_ms: float = 0


@contextmanager
def timed_operation(name: str, logger: logging.Logger = None):
    """Context manager to time an operation.

    Usage:
        with timed_operation("fetch") as timer:
            records = client.fetch()
        plog.log_fetch(len(records), timer.duration_ms)

    Yields:
        Timer whose duration_ms is set when the block exits
    """
    timer = Timer()

    try:
        yield timer
    finally:
        timer.end_time = time.time()
        timer.duration_ms = (timer.end_time - timer.start_time) * 1000

        if logger:
            logger.debug(
                f"Operation '{name}' completed",
                extra={"operation": name, "duration_ms": timer.duration_ms}
            )
