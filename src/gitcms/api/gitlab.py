"""GitLab REST API content gateway."""

import base64
import logging
from typing import Dict, List, Any, Optional, Union
from urllib.parse import quote

from .client import RestClient
from .exceptions import GatewayError, AuthenticationError, ResourceNotFoundError, ConflictError
from ..models import Branch, CommitInfo, ContentEntry, PublishRequest


logger = logging.getLogger(__name__)

# Pull request states as GitLab spells them
GITLAB_STATE_FILTERS = {
    'open': 'opened',
    'closed': 'closed',
    'merged': 'merged',
    'all': 'all'
}


class GitLabClient(RestClient):
    """Content gateway backed by the GitLab REST API (v4)."""

    def __init__(
        self,
        url: str,
        token: str,
        project: Union[int, str],
        config: Optional[Dict[str, Any]] = None,
        verify_ssl: bool = True
    ):
        """Initialize GitLab client.

        Args:
            url: GitLab instance URL
            token: Personal access token
            project: Project ID or ``namespace/path``
            config: Optional configuration dict
            verify_ssl: Whether to verify SSL certificates
        """
        self.project = project
        super().__init__(f"{url.rstrip('/')}/api/v4", token, config=config, verify_ssl=verify_ssl)

    def _auth_headers(self) -> Dict[str, str]:
        return {'Private-Token': self.token}

    @property
    def _project(self) -> str:
        return f"projects/{quote(str(self.project), safe='')}"

    def _file_endpoint(self, path: str) -> str:
        return f"{self._project}/repository/files/{quote(path.strip('/'), safe='')}"

    def verify_authentication(self):
        """Verify that the token is valid."""
        try:
            self._request('GET', 'user')
            logger.info("GitLab authentication successful")
        except GatewayError as e:
            raise AuthenticationError(f"Authentication failed: {e}")

    # Branch operations
    def get_default_branch(self) -> str:
        """Get the project's default branch name."""
        return self._request('GET', self._project)['default_branch']

    def list_branches(self) -> List[Branch]:
        """List all branches, following X-Next-Page pagination.

        Returns:
            List of branches with their head commit id
        """
        return [
            Branch.from_gitlab_response(item)
            for item in self._paginated_get(f'{self._project}/repository/branches')
        ]

    def get_branch_head(self, name: str) -> str:
        """Get the commit id a branch points to."""
        data = self._request(
            'GET',
            f"{self._project}/repository/branches/{quote(name, safe='')}"
        )
        return data['commit']['id']

    def create_branch(self, name: str, base_branch: Optional[str] = None) -> bool:
        """Create a branch.

        Args:
            name: New branch name
            base_branch: Branch to start from; defaults to the default branch.
                Falls back to the first listed branch when it does not exist.

        Returns:
            True once the branch is created
        """
        base = base_branch or self.get_default_branch()

        try:
            ref = self.get_branch_head(base)
        except ResourceNotFoundError:
            logger.info(f"Branch '{base}' not found, falling back to first available branch")
            branches = self.list_branches()
            if not branches:
                raise ResourceNotFoundError("No branches found in repository")
            ref = branches[0].head_revision_id

        self._request(
            'POST',
            f'{self._project}/repository/branches',
            params={'branch': name, 'ref': ref}
        )
        logger.info(f"Created branch '{name}' from '{base}'")
        return True

    def delete_branch(self, name: str) -> bool:
        """Delete a branch.

        Args:
            name: Branch to delete

        Returns:
            True once the branch is gone
        """
        self._request('DELETE', f"{self._project}/repository/branches/{quote(name, safe='')}")
        logger.info(f"Deleted branch '{name}'")
        return True

    # Content operations
    def _get_file(self, path: str, ref: str) -> Dict[str, Any]:
        return self._request('GET', self._file_endpoint(path), params={'ref': ref})

    def get_contents(self, path: str, ref: str) -> Union[List[ContentEntry], ContentEntry]:
        """Read a file, or list a directory through the tree API.

        Args:
            path: Repository path; empty for the repository root
            ref: Branch to read from

        Returns:
            Entry list for a directory, or one entry with decoded content
        """
        path = path.strip('/')

        if path:
            try:
                return ContentEntry.from_gitlab_file(self._get_file(path, ref), branch=ref)
            except ResourceNotFoundError:
                # Not a file, try it as a directory
                pass

        params = {'ref': ref}
        if path:
            params['path'] = path
        items = list(self._paginated_get(f'{self._project}/repository/tree', **params))

        if not items and path:
            raise ResourceNotFoundError(f"Path not found: {path}@{ref}")
        return [ContentEntry.from_gitlab_tree_item(item, branch=ref) for item in items]

    def _check_revision(self, path: str, branch: str, prior_revision_id: str):
        """Reject writes based on a stale blob id."""
        current = self._get_file(path, branch).get('blob_id')
        if current != prior_revision_id:
            raise ConflictError(
                f"{path} on {branch} is at {current}, not {prior_revision_id}",
                status_code=409
            )

    def create_or_update_file(
        self,
        path: str,
        content: bytes,
        message: str,
        prior_revision_id: Optional[str] = None,
        branch: Optional[str] = None
    ) -> str:
        """Commit a file through the files API.

        Args:
            path: Repository path
            content: Raw file bytes, sent base64 encoded
            message: Commit message
            prior_revision_id: Blob id being replaced; omit to create
            branch: Target branch; defaults to the default branch

        Returns:
            Blob id of the committed file
        """
        branch = branch or self.get_default_branch()
        payload = {
            'branch': branch,
            'content': base64.b64encode(content).decode('ascii'),
            'encoding': 'base64',
            'commit_message': message
        }

        if prior_revision_id:
            self._check_revision(path, branch, prior_revision_id)
            self._request('PUT', self._file_endpoint(path), json=payload)
        else:
            self._request('POST', self._file_endpoint(path), json=payload)

        # The files API does not echo the new blob id
        return self._get_file(path, branch)['blob_id']

    def delete_file(self, path: str, prior_revision_id: str, message: str, branch: str) -> bool:
        """Delete a file in a new commit.

        Args:
            path: Repository path
            prior_revision_id: Current blob id of the file
            message: Commit message
            branch: Branch to commit on

        Returns:
            True once the commit is made
        """
        self._check_revision(path, branch, prior_revision_id)
        self._request(
            'DELETE',
            self._file_endpoint(path),
            json={'branch': branch, 'commit_message': message}
        )
        return True

    def list_commits(self, path: str, ref: str, limit: int = 1) -> List[CommitInfo]:
        """Get the latest commits touching a path, newest first."""
        data = self._request(
            'GET',
            f'{self._project}/repository/commits',
            params={'path': path, 'ref_name': ref, 'per_page': limit}
        )
        return [CommitInfo.from_gitlab_response(item) for item in data[:limit]]

    # Merge request operations
    def create_pull_request(
        self,
        title: str,
        source_branch: str,
        target_branch: str,
        body: Optional[str] = None
    ) -> PublishRequest:
        """Open a merge request.

        Args:
            title: Merge request title
            source_branch: Branch with the changes
            target_branch: Branch to merge into
            body: Optional description

        Returns:
            The created merge request
        """
        payload = {
            'title': title,
            'source_branch': source_branch,
            'target_branch': target_branch
        }
        if body:
            payload['description'] = body

        data = self._request('POST', f'{self._project}/merge_requests', json=payload)
        return PublishRequest.from_gitlab_response(data)

    def merge_pull_request(self, number: int, commit_title: Optional[str] = None) -> bool:
        """Merge a merge request.

        Args:
            number: Merge request iid
            commit_title: Optional merge commit message

        Returns:
            True if GitLab reports the merge request as merged
        """
        payload = {}
        if commit_title:
            payload['merge_commit_message'] = commit_title

        data = self._request('PUT', f'{self._project}/merge_requests/{number}/merge', json=payload)
        return data.get('state') == 'merged'

    def list_pull_requests(self, state: str = 'open') -> List[PublishRequest]:
        """List merge requests.

        Args:
            state: 'open', 'closed', 'merged' or 'all'; mapped to GitLab's filters

        Returns:
            Merge requests across all pages
        """
        return [
            PublishRequest.from_gitlab_response(item)
            for item in self._paginated_get(
                f'{self._project}/merge_requests',
                state=GITLAB_STATE_FILTERS.get(state, state)
            )
        ]
