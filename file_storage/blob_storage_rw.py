import fnmatch
import io
import logging
from typing import Dict, Optional

import pandas as pd
from azure.storage.blob import BlobServiceClient

from file_storage.file_storage_interface import FileStorageInterface


class BlobStorageRW(FileStorageInterface):
    def __init__(self, connection_string: str, container_name: str, folder_path: str = ""):
        self.connection_string = connection_string
        self.container_name = container_name
        self.folder_path = folder_path.rstrip("/") if folder_path else ""
        self.blob_service_client = BlobServiceClient.from_connection_string(connection_string)
        self.container_client = self.blob_service_client.get_container_client(container_name)
        logging.info(f"Initialized BlobStorageRW: container='{container_name}', folder='{folder_path}'")

    def _get_blob_path(self, filename: str) -> str:
        """Construct full blob path including folder."""
        if self.folder_path:
            return f"{self.folder_path}/{filename}"
        return filename

    def _download(self, blob_path: str) -> io.BytesIO:
        blob_client = self.container_client.get_blob_client(blob_path)
        stream = io.BytesIO()
        blob_client.download_blob().readinto(stream)
        stream.seek(0)
        return stream

    def read_csv(self, filename: str, **kwargs) -> pd.DataFrame:
        blob_path = self._get_blob_path(filename)
        try:
            df = pd.read_csv(self._download(blob_path), **kwargs)
        except Exception as e:
            logging.error(f"Error reading {blob_path} from blob storage: {str(e)}")
            raise FileNotFoundError(f"Could not read {blob_path} from container {self.container_name}") from e
        logging.info(f"Successfully read {blob_path} ({len(df)} rows, {len(df.columns)} columns)")
        return df

    def read_excel(self, filename: str, **kwargs) -> pd.DataFrame:
        blob_path = self._get_blob_path(filename)
        try:
            df = pd.read_excel(self._download(blob_path), **kwargs)
        except Exception as e:
            logging.error(f"Error reading {blob_path} from blob storage: {str(e)}")
            raise FileNotFoundError(f"Could not read {blob_path} from container {self.container_name}") from e
        logging.info(f"Successfully read {blob_path} ({len(df)} rows, {len(df.columns)} columns)")
        return df

    def write_excel(
        self, filename: str, sheets: Optional[Dict[str, pd.DataFrame]] = None, **kwargs: pd.DataFrame
    ) -> None:
        """Write the workbook in memory, then upload it over any existing blob."""
        blob_path = self._get_blob_path(filename)
        all_sheets = self.merge_sheets(sheets, kwargs)

        try:
            output = io.BytesIO()
            with pd.ExcelWriter(output, engine="openpyxl") as writer:
                for sheet_name, df in all_sheets.items():
                    df.to_excel(writer, sheet_name=sheet_name, index=False)
            output.seek(0)

            blob_client = self.container_client.get_blob_client(blob_path)
            blob_client.upload_blob(output, overwrite=True)

            sheet_summary = ", ".join(f"'{name}' ({len(df)} rows)" for name, df in all_sheets.items())
            logging.info(f"Successfully wrote {blob_path} with {len(all_sheets)} sheet(s): {sheet_summary}")
        except Exception as e:
            logging.error(f"Error writing {blob_path} to blob storage: {str(e)}")
            raise Exception(f"Could not write {blob_path} to container {self.container_name}") from e

    def list_files(self, pattern: Optional[str] = None) -> list[str]:
        try:
            prefix = f"{self.folder_path}/" if self.folder_path else ""
            filenames = []
            for blob in self.container_client.list_blobs(name_starts_with=prefix):
                name = blob.name[len(prefix) :] if prefix else blob.name
                if pattern is None or fnmatch.fnmatch(name, pattern):
                    filenames.append(name)
            return filenames
        except Exception as e:
            logging.error(f"Error listing files: {str(e)}")
            return []

    def file_exists(self, filename: str) -> bool:
        blob_path = self._get_blob_path(filename)
        try:
            return self.container_client.get_blob_client(blob_path).exists()
        except Exception as e:
            logging.error(f"Error checking if {blob_path} exists: {str(e)}")
            return False
