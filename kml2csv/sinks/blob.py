"""Azure Blob Storage sink.

Uploads converted CSV files into the output container under
``csv/{YYYY}/{MM}/{name}.csv`` with a ``text/csv`` content type.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from kml2csv.core.constants import BLOB_SINK, CSV_CONTENT_TYPE
from kml2csv.sinks.base import CsvSink, SinkError
from kml2csv.utils.blob_paths import build_csv_blob_path

if TYPE_CHECKING:
    from azure.storage.blob import BlobServiceClient

logger = logging.getLogger("kml2csv.sinks.blob")


class BlobStorageSink(CsvSink):
    """Upload CSV files to an Azure Blob Storage container.

    Args:
        blob_service: Client for the storage account.
        container: Output container name.
        timestamp: Fixed timestamp for path generation (defaults to
            the current UTC time at each save).
    """

    name = BLOB_SINK

    def __init__(
        self,
        blob_service: BlobServiceClient,
        container: str,
        *,
        timestamp: datetime | None = None,
    ) -> None:
        self._blob_service = blob_service
        self._container = container
        self._timestamp = timestamp

    @property
    def container(self) -> str:
        return self._container

    def save(self, data: bytes, filename: str) -> str:
        from azure.core.exceptions import AzureError
        from azure.storage.blob import ContentSettings

        blob_path = build_csv_blob_path(filename, timestamp=self._timestamp or datetime.now(UTC))
        blob_client = self._blob_service.get_blob_client(
            container=self._container,
            blob=blob_path,
        )
        try:
            blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=CSV_CONTENT_TYPE),
            )
        except AzureError as exc:
            msg = f"Upload to {self._container}/{blob_path} failed: {exc}"
            raise SinkError(self.name, msg) from exc

        logger.info(
            "CSV uploaded | container=%s | blob=%s | bytes=%d",
            self._container,
            blob_path,
            len(data),
        )
        return f"{self._container}/{blob_path}"
