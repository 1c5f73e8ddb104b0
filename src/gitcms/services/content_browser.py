"""Content browsing and directory reconciliation across branches."""

import logging
from typing import Dict, List, Optional

from ..api import ContentGateway, GatewayError, ResourceNotFoundError
from ..models import ContentEntry
from .publication import PublishedBranch


logger = logging.getLogger(__name__)


class ContentBrowser:
    """Reads content on one branch, or merged across all branches."""

    def __init__(
        self,
        gateway: ContentGateway,
        content_root: str = 'content',
        published: Optional[PublishedBranch] = None
    ):
        """Initialize content browser.

        Args:
            gateway: Content gateway
            content_root: Folder the merged listing is scoped to
            published: Published branch resolver (shared per request)
        """
        self.gateway = gateway
        self.content_root = (content_root or '').strip('/')
        self.published = published or PublishedBranch(gateway)

    def resolve_path(self, path: Optional[str]) -> str:
        """Scope a browser path to the content root."""
        path = (path or '').strip('/')
        if not self.content_root or self._in_root(path):
            return path
        return f'{self.content_root}/{path}' if path else self.content_root

    def _in_root(self, path: str) -> bool:
        if not self.content_root:
            return True
        return path == self.content_root or path.startswith(self.content_root + '/')

    def get_file(self, path: str, branch: Optional[str] = None) -> Optional[ContentEntry]:
        """Read one file; None when missing, unreadable, or a directory."""
        target = branch or self.published.name

        try:
            entry = self.gateway.get_contents(path, target)
        except ResourceNotFoundError:
            logger.info(f"File {path} not found in branch {target}")
            return None
        except GatewayError as e:
            logger.error(f"Failed to read {path} on {target}: {e}")
            return None

        if isinstance(entry, list) or not entry.is_file:
            return None
        return entry.tagged(target, self.published.is_published(target))

    def list_directory(self, path: str = '', branch: Optional[str] = None) -> List[ContentEntry]:
        """List a path on a single branch."""
        target = branch or self.published.name
        is_published = self.published.is_published(target)
        return [entry.tagged(target, is_published) for entry in self._entries_on(path, target)]

    def list_merged(self, path: str = '') -> List[ContentEntry]:
        """List a directory as the union of the published and draft branches.

        Entries are keyed by path. Published entries are never replaced by a
        draft entry with the same path; draft-only entries are marked
        unpublished and tagged with the first draft branch that has them.
        """
        search_path = self.resolve_path(path)
        published_name = self.published.name
        merged: Dict[str, ContentEntry] = {}

        for entry in self._entries_on(search_path, published_name):
            if self._in_root(entry.path):
                merged[entry.path] = entry.tagged(published_name, True)

        try:
            branches = self.gateway.list_branches()
        except GatewayError as e:
            logger.error(f"Failed to list branches, showing published content only: {e}")
            branches = []

        for branch in branches:
            if branch.name == published_name:
                continue

            for entry in self._entries_on(search_path, branch.name):
                if self._in_root(entry.path) and entry.path not in merged:
                    merged[entry.path] = entry.tagged(branch.name, False)

        return sorted(merged.values(), key=lambda e: (not e.is_dir, e.name.lower()))

    def _entries_on(self, path: str, branch: str) -> List[ContentEntry]:
        try:
            contents = self.gateway.get_contents(path, branch)
        except ResourceNotFoundError:
            logger.debug(f"Path {path} not found in branch {branch}")
            return []
        except GatewayError as e:
            logger.warning(f"Skipping branch {branch} for {path}: {e}")
            return []

        if isinstance(contents, list):
            return contents
        return [contents]
