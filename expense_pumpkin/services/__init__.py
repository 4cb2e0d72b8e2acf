"""Services package."""

from expense_pumpkin.services.export import (
    ArtifactSink,
    CsvArtifact,
    DeliveryError,
    DirectorySink,
    DownloadUnsupportedError,
    ExportWithNoDataError,
    MemorySink,
)
from expense_pumpkin.services.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistentValue,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Export services
    "ArtifactSink",
    "CsvArtifact",
    "DeliveryError",
    "DirectorySink",
    "DownloadUnsupportedError",
    "ExportWithNoDataError",
    "MemorySink",
    # Storage services
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PersistentValue",
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
]
