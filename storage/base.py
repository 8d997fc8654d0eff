"""Base classes for storage drivers.

This module defines the abstract interface that inbox and outbox backends must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


@dataclass
class FileInfo:
    """Information about a file in storage.

    Attributes:
        path: Relative path within the storage root
        name: Filename only (no directory)
        size: File size in bytes (optional)
    """
    path: str
    name: str
    size: Optional[int] = None


class StorageDriver(ABC):
    """Abstract base class for storage backends.

    Read operations are required; write operations may raise
    NotImplementedError for read-only backends.
    """

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for this storage (e.g., 'scans (local)')."""
        pass

    # =========================================================================
    # Read Operations (required for all drivers)
    # =========================================================================

    @abstractmethod
    def list_files(self, path: str = "", recursive: bool = False,
                   extension: Optional[str] = None) -> List[FileInfo]:
        """List files at the given path.

        Args:
            path: Relative path within storage (empty string for root)
            recursive: If True, include files in subdirectories
            extension: Filter by file extension (e.g., ".pdf"), case-insensitive

        Returns:
            List of FileInfo objects, sorted by path

        Raises:
            StorageError: If path doesn't exist or can't be accessed
        """
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Read a file and return its raw contents.

        Raises:
            StorageError: If file doesn't exist or can't be read
        """
        pass

    def read_text(self, path: str) -> str:
        """Read a text file and return its contents (UTF-8 decoded).

        Raises:
            StorageError: If file doesn't exist, can't be read or isn't UTF-8
        """
        try:
            return self.read_bytes(path).decode('utf-8')
        except UnicodeDecodeError as e:
            raise StorageError(f"File is not UTF-8 text {path}: {e}")

    # =========================================================================
    # Write Operations (optional - raise NotImplementedError if read-only)
    # =========================================================================

    def write_bytes(self, dest_path: str, data: bytes) -> None:
        """Write a file, creating parent directories as needed.

        Raises:
            StorageError: If the write fails
            NotImplementedError: If storage is read-only
        """
        raise NotImplementedError(f"{self.display_name} does not support write operations")

    def append_text(self, dest_path: str, text: str) -> None:
        """Append text to a file, creating it if needed."""
        try:
            existing = self.read_text(dest_path) if self.file_exists(dest_path) else ""
        except StorageError:
            existing = ""
        self.write_bytes(dest_path, (existing + text).encode('utf-8'))

    # =========================================================================
    # Filename Handling
    # =========================================================================

    @abstractmethod
    def sanitize_filename(self, name: str) -> str:
        """Sanitize a filename for this storage backend."""
        pass
