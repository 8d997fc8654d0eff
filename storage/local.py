"""Local filesystem storage driver."""

import os
import re
from typing import List, Optional

from .base import StorageDriver, StorageError, FileInfo


class LocalDriver(StorageDriver):
    """Storage driver for local filesystem.

    All paths are relative to the root_path provided at construction.
    """

    def __init__(self, root_path: str, create: bool = False) -> None:
        """Initialize local storage driver.

        Args:
            root_path: Path to the root directory
            create: Create the root directory if it doesn't exist (outboxes)

        Raises:
            StorageError: If root_path doesn't exist (and create is False)
        """
        self.root_path = os.path.abspath(root_path)
        if create and not os.path.exists(self.root_path):
            try:
                os.makedirs(self.root_path)
            except OSError as e:
                raise StorageError(f"Failed to create directory {self.root_path}: {e}")
        if not os.path.exists(self.root_path):
            raise StorageError(f"Directory does not exist: {self.root_path}")
        if not os.path.isdir(self.root_path):
            raise StorageError(f"Not a directory: {self.root_path}")

    @property
    def display_name(self) -> str:
        return f"{self.root_path} (local)"

    def _full_path(self, path: str) -> str:
        """Convert relative path to absolute path."""
        if not path:
            return self.root_path
        return os.path.join(self.root_path, path)

    def list_files(self, path: str = "", recursive: bool = False,
                   extension: Optional[str] = None) -> List[FileInfo]:
        """List files at the given path."""
        full_path = self._full_path(path)

        if not os.path.exists(full_path):
            raise StorageError(f"Path does not exist: {path}")
        if not os.path.isdir(full_path):
            raise StorageError(f"Not a directory: {path}")

        extension_lower = extension.lower() if extension else None
        results = []

        if recursive:
            candidates = [
                os.path.join(root, filename)
                for root, dirs, files in os.walk(full_path)
                for filename in files
            ]
        else:
            candidates = [
                os.path.join(full_path, filename)
                for filename in os.listdir(full_path)
                if os.path.isfile(os.path.join(full_path, filename))
            ]

        for abs_path in candidates:
            filename = os.path.basename(abs_path)
            if extension_lower and not filename.lower().endswith(extension_lower):
                continue

            try:
                size = os.path.getsize(abs_path)
            except OSError:
                size = None

            results.append(FileInfo(
                path=os.path.relpath(abs_path, self.root_path),
                name=filename,
                size=size
            ))

        return sorted(results, key=lambda f: f.path)

    def file_exists(self, path: str) -> bool:
        """Check if a file exists at the given path."""
        return os.path.isfile(self._full_path(path))

    def read_bytes(self, path: str) -> bytes:
        """Read a file and return its contents."""
        full_path = self._full_path(path)

        if not os.path.exists(full_path):
            raise StorageError(f"File does not exist: {path}")
        if not os.path.isfile(full_path):
            raise StorageError(f"Not a file: {path}")

        try:
            with open(full_path, 'rb') as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Failed to read file {path}: {e}")

    def write_bytes(self, dest_path: str, data: bytes) -> None:
        """Write bytes to the storage location."""
        full_dest = self._full_path(dest_path)

        # Create parent directories
        dest_dir = os.path.dirname(full_dest)
        if dest_dir:
            os.makedirs(dest_dir, exist_ok=True)

        try:
            with open(full_dest, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise StorageError(f"Failed to write file {dest_path}: {e}")

    def append_text(self, dest_path: str, text: str) -> None:
        """Append text to a file without rewriting it."""
        full_dest = self._full_path(dest_path)

        dest_dir = os.path.dirname(full_dest)
        if dest_dir:
            os.makedirs(dest_dir, exist_ok=True)

        try:
            with open(full_dest, 'a', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            raise StorageError(f"Failed to append to {dest_path}: {e}")

    def sanitize_filename(self, name: str) -> str:
        """Sanitize a filename for local filesystem.

        Replaces characters that are invalid on most filesystems
        (/ \\ : * ? \" < > | and control characters) with underscores.
        """
        name = re.sub(r'[\\/:*?"<>|\x00-\x1f\x7f]', '_', name).strip()

        # Leading dots would hide the file on Unix
        name = name.lstrip('.')

        return name or "_"
