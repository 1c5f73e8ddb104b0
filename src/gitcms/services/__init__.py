"""Business logic services."""

from .publication import PublishedBranch
from .version_service import VersionService, BranchScan, sort_versions
from .content_browser import ContentBrowser
from .draft_workflow import DraftWorkflow, sanitize_name

__all__ = [
    'PublishedBranch',
    'VersionService', 'BranchScan', 'sort_versions',
    'ContentBrowser',
    'DraftWorkflow', 'sanitize_name'
]
