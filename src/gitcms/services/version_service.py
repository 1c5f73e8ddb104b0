"""Cross-branch version reconciliation."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..api import ContentGateway, GatewayError, ResourceNotFoundError
from ..models import CommitInfo, Revision
from .publication import PublishedBranch


logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = 'Unknown'
NO_COMMIT_MESSAGE = 'No commit message'


@dataclass
class BranchScan:
    """Result of looking for a file on one branch."""
    branch: str
    revision: Optional[Revision] = None
    skip_reason: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.revision is not None


def sort_versions(revisions: List[Revision]) -> List[Revision]:
    """Order revisions published first, then newest first."""
    newest_first = sorted(revisions, key=lambda r: r.last_modified_at, reverse=True)
    return sorted(newest_first, key=lambda r: not r.is_published)


class VersionService:
    """Builds the list of versions of a file across all branches."""

    def __init__(
        self,
        gateway: ContentGateway,
        published: Optional[PublishedBranch] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize version service.

        Args:
            gateway: Content gateway
            published: Published branch resolver (shared per request)
            clock: Returns the current time; used for commits with no metadata
        """
        self.gateway = gateway
        self.published = published or PublishedBranch(gateway)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def list_versions(self, path: str) -> List[Revision]:
        """List one revision per branch on which ``path`` exists.

        Branches where the file is missing or cannot be read are left out
        without aborting the scan.
        """
        revisions = [scan.revision for scan in self.scan_branches(path) if scan.found]
        logger.info(f"Found {len(revisions)} version(s) of {path}")
        return sort_versions(revisions)

    def scan_branches(self, path: str) -> List[BranchScan]:
        """Look for ``path`` on every branch, one result per branch."""
        try:
            branches = self.gateway.list_branches()
        except GatewayError as e:
            logger.error(f"Failed to list branches while scanning {path}: {e}")
            return []

        return [self._scan_branch(path, branch.name) for branch in branches]

    def _scan_branch(self, path: str, branch: str) -> BranchScan:
        try:
            entry = self.gateway.get_contents(path, branch)
        except ResourceNotFoundError:
            logger.debug(f"File {path} not found in branch {branch}")
            return BranchScan(branch, skip_reason='not found')
        except GatewayError as e:
            logger.warning(f"Skipping branch {branch} for {path}: {e}")
            return BranchScan(branch, skip_reason=str(e))

        if isinstance(entry, list) or not entry.is_file:
            return BranchScan(branch, skip_reason='not a file')

        commit = self._latest_commit(path, branch)

        revision = Revision(
            branch=branch,
            revision_id=entry.revision_id,
            content=entry.content or b'',
            last_modified_at=commit.committed_at or self.clock(),
            author_name=commit.author_name or UNKNOWN_AUTHOR,
            commit_message=commit.message or NO_COMMIT_MESSAGE,
            is_published=self.published.is_published(branch)
        )
        return BranchScan(branch, revision=revision)

    def _latest_commit(self, path: str, branch: str) -> CommitInfo:
        """Most recent commit touching ``path``, or an empty placeholder."""
        try:
            commits = self.gateway.list_commits(path, branch, limit=1)
        except GatewayError as e:
            logger.warning(f"No commit metadata for {path} on {branch}: {e}")
            commits = []

        if commits:
            return commits[0]
        return CommitInfo(revision_id='')
