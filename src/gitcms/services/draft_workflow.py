"""Draft lifecycle: branch per draft, pull request to publish."""

import re
import time
import logging
from typing import Callable, List, Optional, Union

from ..api import ContentGateway, GatewayError
from ..models import Branch, PublishOutcome, PublishRequest, SaveResult
from ..utils.logger import OperationLogger
from .publication import PublishedBranch


logger = logging.getLogger(__name__)

UNSAFE_BRANCH_CHARS = re.compile(r'[^a-zA-Z0-9-]')


def sanitize_name(name: str) -> str:
    """Make a file name safe to embed in a branch name."""
    return UNSAFE_BRANCH_CHARS.sub('-', name).lower()


class DraftWorkflow:
    """Create, update, delete and publish content through Git branches.

    Every gateway failure is logged and reported as a failure result
    (``False``, ``None``, ``[]`` or ``SaveResult(success=False)``); no
    gateway exception escapes this class.
    """

    def __init__(
        self,
        gateway: ContentGateway,
        published: Optional[PublishedBranch] = None,
        branch_prefix: str = 'content/',
        clock: Optional[Callable[[], float]] = None
    ):
        """Initialize draft workflow.

        Args:
            gateway: Content gateway
            published: Published branch resolver (shared per request)
            branch_prefix: Prefix for synthesized draft branch names
            clock: Returns epoch seconds; used for draft branch names
        """
        self.gateway = gateway
        self.published = published or PublishedBranch(gateway)
        self.branch_prefix = branch_prefix
        self.clock = clock or time.time

    def generate_branch_name(self, path: str) -> str:
        """Derive a draft branch name from a file path and the current time."""
        file_name = path.split('/')[-1] or 'new-content'
        millis = int(self.clock() * 1000)
        return f"{self.branch_prefix}{sanitize_name(file_name)}-{millis}"

    # File operations
    def save_file(
        self,
        path: str,
        content: Union[str, bytes],
        message: str,
        prior_revision_id: Optional[str] = None,
        branch: Optional[str] = None,
        is_new_file: bool = False
    ) -> SaveResult:
        """Create or update a file.

        A new file with no explicit branch gets its own draft branch, cut
        from the published branch, and a pull request back to it. If the
        draft branch cannot be created nothing is committed.

        Args:
            path: File path in the repository
            content: New file content
            message: Commit message
            prior_revision_id: Revision being replaced (updates only)
            branch: Explicit target branch
            is_new_file: Whether this creates a brand-new file

        Returns:
            SaveResult with the branch written to and any pull request opened
        """
        if isinstance(content, str):
            content = content.encode('utf-8')

        target = branch
        if is_new_file and not branch:
            target = self.generate_branch_name(path)
            if not self.create_branch(target):
                logger.error(f"Not saving {path}: draft branch {target} could not be created")
                return SaveResult(success=False)

        target = target or self.published.name

        try:
            with OperationLogger(logger, 'commit', path=path, branch=target):
                revision_id = self.gateway.create_or_update_file(
                    path, content, message, prior_revision_id, target
                )
        except GatewayError:
            return SaveResult(success=False)

        pull_request = None
        if is_new_file and not self.published.is_published(target):
            pull_request = self.create_pull_request(
                f"New content: {path}",
                target,
                self.published.name,
                body=f"Adding new file: {path}"
            )
            if pull_request is None:
                logger.warning(f"Saved {path} on {target} but no pull request was opened")

        return SaveResult(
            success=True,
            branch=target,
            pull_request=pull_request,
            revision_id=revision_id
        )

    def delete_file(
        self,
        path: str,
        prior_revision_id: str,
        message: str,
        branch: Optional[str] = None
    ) -> bool:
        """Delete a file in a new commit.

        Args:
            path: File path in the repository
            prior_revision_id: Current revision of the file
            message: Commit message
            branch: Branch to delete on; defaults to the published branch

        Returns:
            True if the file was deleted
        """
        target = branch or self.published.name
        try:
            self.gateway.delete_file(path, prior_revision_id, message, target)
        except GatewayError as e:
            logger.error(f"Failed to delete {path} on {target}: {e}")
            return False

        logger.info(f"Deleted {path} on {target}")
        return True

    # Branch operations
    def list_branches(self) -> List[Branch]:
        """List all branches, or an empty list if the provider call fails."""
        try:
            return self.gateway.list_branches()
        except GatewayError as e:
            logger.error(f"Failed to list branches: {e}")
            return []

    def create_branch(self, name: str, base_branch: Optional[str] = None) -> bool:
        """Create a branch.

        Args:
            name: New branch name
            base_branch: Branch to cut from; defaults to the published branch

        Returns:
            True if the branch was created
        """
        base = base_branch or self.published.name
        try:
            return self.gateway.create_branch(name, base)
        except GatewayError as e:
            logger.error(f"Failed to create branch {name} from {base}: {e}")
            return False

    def delete_branch(self, name: str) -> bool:
        """Delete a draft branch.

        The published branch is never deleted; the request is refused
        before reaching the provider.

        Args:
            name: Branch to delete

        Returns:
            True if the branch was deleted
        """
        if self.published.is_published(name):
            logger.warning(f"Refusing to delete published branch {name}")
            return False

        try:
            return self.gateway.delete_branch(name)
        except GatewayError as e:
            logger.error(f"Failed to delete branch {name}: {e}")
            return False

    # Publish operations
    def list_pull_requests(self) -> List[PublishRequest]:
        """List open pull requests, or an empty list if the provider call fails."""
        try:
            return self.gateway.list_pull_requests(state='open')
        except GatewayError as e:
            logger.error(f"Failed to list pull requests: {e}")
            return []

    def create_pull_request(
        self,
        title: str,
        source_branch: str,
        target_branch: Optional[str] = None,
        body: Optional[str] = None
    ) -> Optional[PublishRequest]:
        """Open a pull request.

        Args:
            title: Pull request title
            source_branch: Draft branch with the changes
            target_branch: Branch to merge into; defaults to the published branch
            body: Optional description

        Returns:
            The new pull request, or None if it could not be opened
        """
        target = target_branch or self.published.name
        try:
            pull_request = self.gateway.create_pull_request(title, source_branch, target, body)
        except GatewayError as e:
            logger.error(f"Failed to open pull request {source_branch} -> {target}: {e}")
            return None

        logger.info(f"Opened pull request #{pull_request.number}: {source_branch} -> {target}")
        return pull_request

    def publish(self, number: int, commit_title: Optional[str] = None) -> bool:
        """Merge a pull request into the published branch.

        The source branch is left in place; deleting it is a separate step.
        """
        try:
            merged = self.gateway.merge_pull_request(number, commit_title)
        except GatewayError as e:
            logger.error(f"Failed to merge pull request #{number}: {e}")
            return False

        if merged:
            logger.info(f"Published pull request #{number}")
        else:
            logger.warning(f"Pull request #{number} was not merged")
        return merged

    def publish_and_cleanup(
        self,
        pull_request: PublishRequest,
        commit_title: Optional[str] = None,
        delete_branch: bool = True
    ) -> PublishOutcome:
        """Merge a pull request, then delete its draft branch.

        A failed branch deletion is reported on its own and does not undo
        or hide a successful merge.
        """
        outcome = PublishOutcome(number=pull_request.number, branch=pull_request.source_branch)

        outcome.merged = self.publish(
            pull_request.number,
            commit_title or f"Publish: {pull_request.title}"
        )
        if not outcome.merged or not delete_branch:
            return outcome

        outcome.branch_deleted = self.delete_branch(pull_request.source_branch)
        if not outcome.branch_deleted:
            logger.warning(
                f"Published #{pull_request.number} but branch {pull_request.source_branch} was not deleted"
            )
        return outcome
