"""CSV export and artifact delivery."""

from expense_pumpkin.services.export.csv_export import (
    CSV_HEADERS,
    CSV_MEDIA_TYPE,
    CsvArtifact,
    ExportWithNoDataError,
    build_csv_artifact,
    escape_csv_field,
    generate_filename,
    to_csv,
)
from expense_pumpkin.services.export.delivery import (
    ArtifactSink,
    DeliveryError,
    DirectorySink,
    DownloadUnsupportedError,
    MemorySink,
)

__all__ = [
    "CSV_HEADERS",
    "CSV_MEDIA_TYPE",
    "CsvArtifact",
    "ExportWithNoDataError",
    "build_csv_artifact",
    "escape_csv_field",
    "generate_filename",
    "to_csv",
    "ArtifactSink",
    "DeliveryError",
    "DirectorySink",
    "DownloadUnsupportedError",
    "MemorySink",
]
