"""
Error types raised by the bucket sync step.
"""
from typing import Optional


class BucketSyncError(Exception):
    """Base error for the sync step, carrying the context it failed in."""

    def __init__(self, message: str, bucket: Optional[str] = None,
                 key: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.bucket = bucket
        self.key = key
        self.path = path

    def context(self) -> str:
        """Render the non-empty context fields as ``name=value`` pairs."""
        fields = [('bucket', self.bucket), ('key', self.key), ('file', self.path)]
        return ', '.join(f"{name}={value}" for name, value in fields if value)

    def __str__(self) -> str:
        context = self.context()
        return f"{self.message} ({context})" if context else self.message


class ConfigurationError(BucketSyncError):
    """Invalid or missing settings, detected before any transfer starts."""


class GlobError(ConfigurationError):
    """A glob pattern could not be expanded."""


class ClientConstructionError(BucketSyncError):
    """An authenticated object storage session could not be established."""


class ListError(BucketSyncError):
    """Listing the bucket failed."""


class TransferError(BucketSyncError):
    """A single get or put call against the bucket failed."""


class LocalIOError(BucketSyncError):
    """A local file could not be opened, created or written."""
