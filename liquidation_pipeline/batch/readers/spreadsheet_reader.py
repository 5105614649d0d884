"""
Spreadsheet to delimited text conversion.
"""

import csv
import io
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from liquidation_pipeline.core.errors import UnsupportedFileError

SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm")


def is_spreadsheet(file_name: str) -> bool:
    return file_name.lower().endswith(SPREADSHEET_EXTENSIONS)


class SpreadsheetConverter(ABC):
    """
    Turns spreadsheet bytes into delimited text the parser understands.
    """

    @abstractmethod
    def convert(self, data: bytes, file_name: str) -> bytes:
        """
        Args:
            data: Raw spreadsheet bytes
            file_name: Original file name, for error messages

        Returns:
            UTF-8 encoded comma-delimited text

        Raises:
            UnsupportedFileError: If the bytes are not a readable workbook
        """


def format_cell(value) -> str:
    """Render a cell the way a CSV export of the sheet would."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%m/%d/%Y")
        return value.strftime("%m/%d/%Y %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%m/%d/%Y")
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class OpenpyxlConverter(SpreadsheetConverter):
    """
    Converts one worksheet (the first, unless named) of an .xlsx/.xlsm
    workbook. Formula cells contribute their cached values.
    """

    def __init__(self, sheet_name: str | None = None):
        self.sheet_name = sheet_name

    def convert(self, data: bytes, file_name: str) -> bytes:
        try:
            workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
            raise UnsupportedFileError(
                f"Cannot read spreadsheet (is it corrupted or wrong format?): {e}",
                file_name=file_name,
            ) from e

        try:
            if self.sheet_name:
                if self.sheet_name not in workbook.sheetnames:
                    raise UnsupportedFileError(
                        f"Worksheet '{self.sheet_name}' not found",
                        file_name=file_name,
                    )
                sheet = workbook[self.sheet_name]
            else:
                sheet = workbook.worksheets[0]

            out = io.StringIO(newline="")
            writer = csv.writer(out, lineterminator="\n")
            for row in sheet.iter_rows(values_only=True):
                writer.writerow([format_cell(value) for value in row])
        finally:
            workbook.close()

        return out.getvalue().encode("utf-8")
