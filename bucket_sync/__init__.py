"""
Bucket Sync - a CI build step that uploads local files to an S3 bucket or
downloads a bucket prefix to local disk.
"""

from .services.transfer_service import TransferService, execute
from .models.config import PluginConfig, MetadataRules
from .models.data_models import TransferItem, TransferMode, TransferResult

__version__ = "1.0.0"
__all__ = [
    "TransferService",
    "execute",
    "PluginConfig",
    "MetadataRules",
    "TransferItem",
    "TransferMode",
    "TransferResult"
]
