from abc import ABC, abstractmethod
from typing import Dict, Optional

import pandas as pd

INVALID_SHEET_CHARS = [":", "\\", "/", "?", "*", "[", "]"]


class FileStorageInterface(ABC):
    """Abstract base class for reading upload tables and writing assignment workbooks."""

    @abstractmethod
    def read_csv(self, filename: str, **kwargs) -> pd.DataFrame:
        """
        Read CSV file and return as DataFrame.

        Args:
            filename: Name of the csv file to read
            **kwargs: Passed on to pandas.read_csv (e.g. header=None for roster files)

        Returns:
            pandas DataFrame containing the file data

        Raises:
            FileNotFoundError: If the file does not exist or cannot be read
        """
        pass

    @abstractmethod
    def read_excel(self, filename: str, **kwargs) -> pd.DataFrame:
        """
        Read the first sheet of an Excel workbook.

        Args:
            filename: Name of the workbook to read
            **kwargs: Passed on to pandas.read_excel

        Raises:
            FileNotFoundError: If the file does not exist or cannot be read
        """
        pass

    @abstractmethod
    def write_excel(
        self, filename: str, sheets: Optional[Dict[str, pd.DataFrame]] = None, **kwargs: pd.DataFrame
    ) -> None:
        """
        Write DataFrame(s) to Excel file with support for multiple sheets.

        Args:
            filename: Name or path of the output file
            sheets: Dictionary mapping sheet names to DataFrames
            **kwargs: Alternative way to specify sheets as keyword arguments
                     (e.g., Assignments=df1, Extra=df2)

        Examples:
            storage.write_excel("assignments.xlsx",
                               Assignments=assignments_df,
                               Extra=extra_df,
                               Summary=summary_df)

        Raises:
            ValueError: If no DataFrames provided or invalid sheet names
            Exception: For storage-specific errors
        """
        pass

    @abstractmethod
    def list_files(self, pattern: Optional[str] = None) -> list[str]:
        """
        List files in storage.

        Args:
            pattern: Optional filter pattern (e.g., "*.xlsx")
        """
        pass

    @abstractmethod
    def file_exists(self, filename: str) -> bool:
        pass

    @staticmethod
    def merge_sheets(sheets: Optional[Dict[str, pd.DataFrame]], kwargs: Dict[str, pd.DataFrame]):
        """Combine both ways of passing sheets and check the names Excel accepts."""
        all_sheets = {}
        if sheets:
            all_sheets.update(sheets)
        if kwargs:
            all_sheets.update(kwargs)

        if not all_sheets:
            raise ValueError("No DataFrames provided. Use either 'sheets' parameter or keyword arguments")

        for sheet_name in all_sheets.keys():
            if len(sheet_name) > 31:
                raise ValueError(f"Sheet name '{sheet_name}' exceeds Excel's 31 character limit")
            if any(char in sheet_name for char in INVALID_SHEET_CHARS):
                raise ValueError(f"Sheet name '{sheet_name}' contains invalid characters: ': \\ / ? * [ ]'")
        return all_sheets
