"""Utility modules for the import runs.

Includes:
- Logging configuration
- Structured pipeline logging
- Workbook writer
"""

from .logging_config import setup_logging
from .pipeline_logger import PipelineLogger, timed_operation
from .workbook_writer import WorkbookWriter

__all__ = [
    "setup_logging",
    "PipelineLogger",
    "timed_operation",
    "WorkbookWriter",
]
