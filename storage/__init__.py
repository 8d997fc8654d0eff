"""Storage driver abstraction for mailsort.

Provides a uniform interface for reading scanned bundles from an inbox and
writing sorted outputs to an outbox:
- LocalDriver: Local filesystem

Usage:
    from storage import create_storage

    driver = create_storage("local:/path/to/folder")
"""

from .base import StorageDriver, StorageError, FileInfo
from .local import LocalDriver


def create_storage(uri: str, create: bool = False) -> StorageDriver:
    """Create a storage driver from a URI.

    Args:
        uri: Storage URI, e.g. local:/path/to/folder
        create: Create the location if it doesn't exist (for outboxes)

    Returns:
        StorageDriver instance for the specified backend

    Raises:
        ValueError: If URI format is invalid
    """
    storage_type, value = parse_storage_uri(uri)
    if storage_type == "local":
        return LocalDriver(value, create=create)
    raise ValueError(f"Unsupported storage type: {storage_type}")


def parse_storage_uri(uri: str) -> tuple:
    """Parse a storage URI into (type, value) tuple.

    Args:
        uri: Storage URI (e.g., 'local:/path')

    Returns:
        Tuple of (storage_type, value)

    Raises:
        ValueError: If URI format is invalid
    """
    if uri.startswith("local:"):
        return ("local", uri[6:])
    else:
        raise ValueError(
            f"Invalid storage URI: {uri}. "
            "Must start with 'local:'"
        )


__all__ = [
    'StorageDriver',
    'StorageError',
    'FileInfo',
    'LocalDriver',
    'create_storage',
    'parse_storage_uri',
]
