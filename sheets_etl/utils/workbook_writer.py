"""Workbook writer: the tabular output for the import operations."""

import logging
from pathlib import Path
from typing import Any, Iterable, Union

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from sheets_etl.config import FIRST_DATA_ROW, HEADER_ROW

logger = logging.getLogger(__name__)

MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 60


class WorkbookWriter:
    """Writes named worksheets of an .xlsx workbook.

    The workbook is loaded once (or created when the file does not exist)
    and written back by save(). Sheets that are not cleared keep their
    contents, so each import operation only rewrites its own sheets.
    """

    def __init__(self, path: Union[str, Path]):
        """Open or start a workbook.

        Args:
            path: Workbook file path
        """
        self.path = Path(path)

        if self.path.exists():
            self.workbook = load_workbook(self.path)
            self._placeholder = None
            logger.debug(f"Loaded workbook {self.path}", extra={"sheets": self.workbook.sheetnames})
        else:
            self.workbook = Workbook()
            # A new workbook starts with an empty default sheet
            self._placeholder = self.workbook.active
            logger.debug(f"Started new workbook {self.path}")

    @property
    def sheet_names(self) -> list[str]:
        return self.workbook.sheetnames

    def clear_or_create_sheet(self, name: str) -> None:
        """Empty a sheet, creating it when missing.

        A cleared sheet keeps its position among the other sheets.
        """
        if name in self.workbook.sheetnames:
            position = self.workbook.sheetnames.index(name)
            self.workbook.remove(self.workbook[name])
            self.workbook.create_sheet(name, position)
            logger.info(f"Cleared sheet '{name}'")
        else:
            self.workbook.create_sheet(name)
            logger.info(f"Created sheet '{name}'")

        if self._placeholder is not None:
            self.workbook.remove(self._placeholder)
            self._placeholder = None

    def write_header(self, name: str, columns: list[str]) -> None:
        """Write a bold header row and freeze it."""
        sheet = self.workbook[name]
        bold = Font(bold=True)
        for col, header in enumerate(columns, start=1):
            cell = sheet.cell(row=HEADER_ROW, column=col, value=header)
            cell.font = bold
        sheet.freeze_panes = sheet.cell(row=FIRST_DATA_ROW, column=1)

    def write_row(self, name: str, row_index: int, values: list) -> None:
        """Write one data row at a 1-based row index.

        Raises:
            ValueError: If the index would overwrite the header row
        """
        if row_index < FIRST_DATA_ROW:
            raise ValueError(f"Data rows start at {FIRST_DATA_ROW}, got {row_index}")

        sheet = self.workbook[name]
        for col, value in enumerate(values, start=1):
            sheet.cell(row=row_index, column=col, value=_cell_value(value))

    def write_rows(self, name: str, rows: Iterable[tuple[int, list]]) -> int:
        """Write (row_index, values) pairs; returns the number written."""
        count = 0
        for row_index, values in rows:
            self.write_row(name, row_index, values)
            count += 1
        return count

    def autosize_columns(self, name: str) -> None:
        """Fit column widths to the longest value in each column."""
        sheet = self.workbook[name]
        for col, cells in enumerate(sheet.iter_cols(values_only=True), start=1):
            longest = max((len(str(v)) for v in cells if v is not None), default=0)
            width = min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
            sheet.column_dimensions[get_column_letter(col)].width = width

    def save(self) -> Path:
        """Write the workbook to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.workbook.save(self.path)
        logger.info(f"Saved workbook {self.path}", extra={"sheets": self.workbook.sheetnames})
        return self.path


def _cell_value(value: Any) -> Any:
    # XLSX cannot store control characters; upstream text occasionally has them
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value
