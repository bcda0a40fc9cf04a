"""
Models package for the bucket sync step.
"""
from .config import MetadataRules, PluginConfig
from .data_models import TransferItem, TransferMode, TransferResult

__all__ = [
    'MetadataRules',
    'PluginConfig',
    'TransferItem',
    'TransferMode',
    'TransferResult'
]
