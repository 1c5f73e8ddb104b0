"""Data models for Git-backed content."""

from .content import ContentEntry, EntryType
from .branch import Branch, CommitInfo
from .revision import Revision
from .publish import PublishRequest, SaveResult, PublishOutcome

__all__ = [
    'ContentEntry', 'EntryType',
    'Branch', 'CommitInfo',
    'Revision',
    'PublishRequest', 'SaveResult', 'PublishOutcome'
]
