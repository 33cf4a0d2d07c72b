import fnmatch
import logging
import os
from typing import Dict, Optional

import pandas as pd

from file_storage.file_storage_interface import FileStorageInterface


class LocalStorageRW(FileStorageInterface):
    """Files in a local directory, created on first write."""

    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        logging.info(f"Initialized LocalStorageRW: base_dir='{base_dir}'")

    def _get_path(self, filename: str) -> str:
        return os.path.join(self.base_dir, filename)

    def read_csv(self, filename: str, **kwargs) -> pd.DataFrame:
        path = self._get_path(filename)
        try:
            df = pd.read_csv(path, **kwargs)
        except (OSError, ValueError) as e:
            logging.error(f"Error reading {path}: {str(e)}")
            raise FileNotFoundError(f"Could not read {path}") from e
        logging.info(f"Successfully read {path} ({len(df)} rows, {len(df.columns)} columns)")
        return df

    def read_excel(self, filename: str, **kwargs) -> pd.DataFrame:
        path = self._get_path(filename)
        try:
            df = pd.read_excel(path, **kwargs)
        except (OSError, ValueError) as e:
            logging.error(f"Error reading {path}: {str(e)}")
            raise FileNotFoundError(f"Could not read {path}") from e
        logging.info(f"Successfully read {path} ({len(df)} rows, {len(df.columns)} columns)")
        return df

    def write_excel(
        self, filename: str, sheets: Optional[Dict[str, pd.DataFrame]] = None, **kwargs: pd.DataFrame
    ) -> None:
        all_sheets = self.merge_sheets(sheets, kwargs)
        path = self._get_path(filename)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
            for sheet_name, df in all_sheets.items():
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                logging.debug(f"Added sheet '{sheet_name}': {len(df)} rows, {len(df.columns)} columns")

        sheet_summary = ", ".join(f"'{name}' ({len(df)} rows)" for name, df in all_sheets.items())
        logging.info(f"Successfully wrote {path} with {len(all_sheets)} sheet(s): {sheet_summary}")

    def list_files(self, pattern: Optional[str] = None) -> list[str]:
        try:
            names = sorted(
                name for name in os.listdir(self.base_dir) if os.path.isfile(os.path.join(self.base_dir, name))
            )
        except OSError as e:
            logging.error(f"Error listing files: {str(e)}")
            return []
        return [name for name in names if pattern is None or fnmatch.fnmatch(name, pattern)]

    def file_exists(self, filename: str) -> bool:
        return os.path.isfile(self._get_path(filename))
