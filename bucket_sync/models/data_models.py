"""
Core data models for the bucket sync step.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class TransferMode(str, Enum):
    UPLOAD = 'upload'
    DOWNLOAD = 'download'


@dataclass(frozen=True)
class TransferItem:
    """A local path paired with the object key it is transferred to or from."""
    local_path: str
    key: str
    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    cache_control: Optional[str] = None


@dataclass
class TransferResult:
    """Summary of a successful run."""
    mode: TransferMode
    files_matched: int = 0
    files_transferred: int = 0
    files_skipped: int = 0
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode.value,
            'files_matched': self.files_matched,
            'files_transferred': self.files_transferred,
            'files_skipped': self.files_skipped,
            'dry_run': self.dry_run
        }
