"""
Artifact delivery.

Getting a generated file to the user (a browser download, a save dialog,
a file in a folder) is a capability the core does not own. A sink reports
whether it has what it needs before anything is handed to it.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from expense_pumpkin.services.export.csv_export import CsvArtifact


class DeliveryError(Exception):
    """Base exception for artifact delivery."""
    pass


class DownloadUnsupportedError(DeliveryError):
    """The sink lacks a primitive it needs to deliver files."""
    pass


class ArtifactSink(ABC):
    """Abstract destination for exported files."""

    @abstractmethod
    def is_supported(self) -> bool:
        """Whether this sink can currently deliver files."""
        pass

    @abstractmethod
    def deliver(self, artifact: CsvArtifact) -> str:
        """
        Deliver an artifact.

        Returns:
            Where the artifact ended up (path, URL or identifier)

        Raises:
            DownloadUnsupportedError: If the sink cannot deliver at all
            DeliveryError: If this particular delivery failed
        """
        pass


class DirectorySink(ArtifactSink):
    """Writes artifacts as files into an existing, writable directory."""

    def __init__(self, directory: Optional[Path]):
        self._directory = Path(directory) if directory is not None else None

    def is_supported(self) -> bool:
        return (
            self._directory is not None
            and self._directory.is_dir()
            and os.access(self._directory, os.W_OK)
        )

    def deliver(self, artifact: CsvArtifact) -> str:
        if not self.is_supported():
            raise DownloadUnsupportedError(
                f"Cannot save files to {self._directory}: directory missing or not writable"
            )

        path = self._directory / artifact.filename
        try:
            path.write_text(artifact.content, encoding="utf-8")
        except OSError as e:
            raise DeliveryError(f"Failed to write {path}: {e}") from e
        return str(path)


class MemorySink(ArtifactSink):
    """Keeps delivered artifacts in a list, e.g. for an HTTP handler to stream."""

    def __init__(self):
        self.artifacts: list[CsvArtifact] = []

    def is_supported(self) -> bool:
        return True

    def deliver(self, artifact: CsvArtifact) -> str:
        self.artifacts.append(artifact)
        return f"memory://{artifact.filename}"
