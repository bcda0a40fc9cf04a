# Services package
from .key_mapper import normalize_target, resolve_key, resolve_source, resolve_target_dir
from .metadata_resolver import match_rule, resolve_content_type, resolve_metadata
from .path_matcher import match_files
from .transfer_service import TransferService, execute

__all__ = [
    'TransferService',
    'execute',
    'match_files',
    'match_rule',
    'resolve_content_type',
    'resolve_metadata',
    'normalize_target',
    'resolve_key',
    'resolve_source',
    'resolve_target_dir'
]
