"""Abstract content gateway over a Git hosting provider."""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from ..models import Branch, CommitInfo, ContentEntry, PublishRequest


class ContentGateway(ABC):
    """Repository operations the CMS needs from a Git hosting provider.

    Any provider that satisfies this contract is interchangeable. All
    methods raise ``GatewayError`` subclasses on failure; degrading those
    errors to failure results is the job of the services layer.
    """

    @abstractmethod
    def verify_authentication(self):
        """Check that the configured credentials are accepted.

        Raises:
            AuthenticationError: If the provider rejects the token
        """
        ...

    @abstractmethod
    def get_default_branch(self) -> str:
        """Return the repository's default (published) branch name."""
        ...

    @abstractmethod
    def list_branches(self) -> List[Branch]:
        ...

    @abstractmethod
    def get_branch_head(self, name: str) -> str:
        """Return the revision id at the head of a branch."""
        ...

    @abstractmethod
    def create_branch(self, name: str, base_branch: Optional[str] = None) -> bool:
        """Create a branch from ``base_branch`` (default branch when omitted)."""
        ...

    @abstractmethod
    def delete_branch(self, name: str) -> bool:
        ...

    @abstractmethod
    def get_contents(self, path: str, ref: str) -> Union[List[ContentEntry], ContentEntry]:
        """Read a path at a branch ref.

        Returns a list of entries for a directory, or a single entry with
        decoded content for a file.
        """
        ...

    @abstractmethod
    def create_or_update_file(
        self,
        path: str,
        content: bytes,
        message: str,
        prior_revision_id: Optional[str] = None,
        branch: Optional[str] = None
    ) -> str:
        """Commit file content and return the new revision id.

        Omitting ``prior_revision_id`` signals creation; a stale id is
        rejected with ``ConflictError``.
        """
        ...

    @abstractmethod
    def delete_file(self, path: str, prior_revision_id: str, message: str, branch: str) -> bool:
        ...

    @abstractmethod
    def list_commits(self, path: str, ref: str, limit: int = 1) -> List[CommitInfo]:
        """Return the most recent commits touching ``path`` on ``ref``."""
        ...

    @abstractmethod
    def create_pull_request(
        self,
        title: str,
        source_branch: str,
        target_branch: str,
        body: Optional[str] = None
    ) -> PublishRequest:
        ...

    @abstractmethod
    def merge_pull_request(self, number: int, commit_title: Optional[str] = None) -> bool:
        ...

    @abstractmethod
    def list_pull_requests(self, state: str = 'open') -> List[PublishRequest]:
        ...
