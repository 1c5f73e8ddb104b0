"""GitHub REST API content gateway."""

import base64
import logging
from typing import Dict, List, Any, Optional, Union
from urllib.parse import quote

import requests

from .client import RestClient
from .exceptions import GatewayError, AuthenticationError, ResourceNotFoundError
from ..models import Branch, CommitInfo, ContentEntry, PublishRequest


logger = logging.getLogger(__name__)

GITHUB_API_URL = 'https://api.github.com'


class GitHubClient(RestClient):
    """Content gateway backed by the GitHub REST API."""

    def __init__(
        self,
        token: str,
        repository: str,
        url: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        verify_ssl: bool = True
    ):
        """Initialize GitHub client.

        Args:
            token: Personal access or fine-grained token
            repository: Repository in ``owner/name`` form
            url: API root; GitHub Enterprise hosts use ``https://host/api/v3``
            config: Optional configuration dict
            verify_ssl: Whether to verify SSL certificates
        """
        if repository.count('/') != 1:
            raise ValueError(f"GitHub repository must be 'owner/name', got '{repository}'")
        self.repository = repository
        super().__init__(url or GITHUB_API_URL, token, config=config, verify_ssl=verify_ssl)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28'
        }

    def _next_page(self, response: requests.Response, params: Dict[str, Any]) -> Optional[int]:
        if 'next' in (response.links or {}):
            return params['page'] + 1
        return None

    @property
    def _repo(self) -> str:
        return f'repos/{self.repository}'

    def _contents_endpoint(self, path: str) -> str:
        return f'{self._repo}/contents/{quote(path.strip("/"))}'

    def verify_authentication(self):
        """Verify that the token is valid."""
        try:
            self._request('GET', 'user')
            logger.info("GitHub authentication successful")
        except GatewayError as e:
            raise AuthenticationError(f"Authentication failed: {e}")

    # Branch operations
    def get_default_branch(self) -> str:
        """Get the repository's default branch name."""
        return self._request('GET', self._repo)['default_branch']

    def list_branches(self) -> List[Branch]:
        """List all branches, following Link pagination.

        Returns:
            List of branches with their head commit sha
        """
        return [
            Branch.from_github_response(item)
            for item in self._paginated_get(f'{self._repo}/branches')
        ]

    def get_branch_head(self, name: str) -> str:
        """Get the commit sha a branch points to."""
        data = self._request('GET', f'{self._repo}/git/ref/heads/{name}')
        return data['object']['sha']

    def create_branch(self, name: str, base_branch: Optional[str] = None) -> bool:
        """Create a branch ref.

        Args:
            name: New branch name
            base_branch: Branch to start from; defaults to the default branch.
                Falls back to the first listed branch when it does not exist.

        Returns:
            True once the ref is created
        """
        base = base_branch or self.get_default_branch()

        try:
            head = self.get_branch_head(base)
        except ResourceNotFoundError:
            logger.info(f"Branch '{base}' not found, falling back to first available branch")
            branches = self.list_branches()
            if not branches:
                raise ResourceNotFoundError("No branches found in repository")
            head = branches[0].head_revision_id

        self._request(
            'POST',
            f'{self._repo}/git/refs',
            json={'ref': f'refs/heads/{name}', 'sha': head}
        )
        logger.info(f"Created branch '{name}' from '{base}'")
        return True

    def delete_branch(self, name: str) -> bool:
        """Delete a branch ref.

        Args:
            name: Branch to delete

        Returns:
            True once the ref is gone
        """
        self._request('DELETE', f'{self._repo}/git/refs/heads/{name}')
        logger.info(f"Deleted branch '{name}'")
        return True

    # Content operations
    def get_contents(self, path: str, ref: str) -> Union[List[ContentEntry], ContentEntry]:
        """Read a file or directory through the contents API.

        Args:
            path: Repository path
            ref: Branch to read from

        Returns:
            Entry list for a directory, or one entry with decoded content
        """
        data = self._request('GET', self._contents_endpoint(path), params={'ref': ref})

        if isinstance(data, list):
            return [ContentEntry.from_github_response(item, branch=ref) for item in data]
        return ContentEntry.from_github_response(data, branch=ref)

    def create_or_update_file(
        self,
        path: str,
        content: bytes,
        message: str,
        prior_revision_id: Optional[str] = None,
        branch: Optional[str] = None
    ) -> str:
        """Commit a file with a PUT to the contents API.

        Args:
            path: Repository path
            content: Raw file bytes, sent base64 encoded
            message: Commit message
            prior_revision_id: Blob sha being replaced; omit to create
            branch: Target branch; defaults to the default branch

        Returns:
            Blob sha of the committed file
        """
        payload = {
            'message': message,
            'content': base64.b64encode(content).decode('ascii'),
            'branch': branch or self.get_default_branch()
        }
        if prior_revision_id:
            payload['sha'] = prior_revision_id

        data = self._request('PUT', self._contents_endpoint(path), json=payload)
        return data['content']['sha']

    def delete_file(self, path: str, prior_revision_id: str, message: str, branch: str) -> bool:
        """Delete a file in a new commit.

        Args:
            path: Repository path
            prior_revision_id: Current blob sha of the file
            message: Commit message
            branch: Branch to commit on

        Returns:
            True once the commit is made
        """
        self._request(
            'DELETE',
            self._contents_endpoint(path),
            json={'message': message, 'sha': prior_revision_id, 'branch': branch}
        )
        return True

    def list_commits(self, path: str, ref: str, limit: int = 1) -> List[CommitInfo]:
        """Get the latest commits touching a path, newest first."""
        data = self._request(
            'GET',
            f'{self._repo}/commits',
            params={'path': path, 'sha': ref, 'per_page': limit}
        )
        return [CommitInfo.from_github_response(item) for item in data[:limit]]

    # Pull request operations
    def create_pull_request(
        self,
        title: str,
        source_branch: str,
        target_branch: str,
        body: Optional[str] = None
    ) -> PublishRequest:
        """Open a pull request.

        Args:
            title: Pull request title
            source_branch: Head branch with the changes
            target_branch: Base branch to merge into
            body: Optional description

        Returns:
            The created pull request
        """
        payload = {'title': title, 'head': source_branch, 'base': target_branch}
        if body:
            payload['body'] = body

        data = self._request('POST', f'{self._repo}/pulls', json=payload)
        return PublishRequest.from_github_response(data)

    def merge_pull_request(self, number: int, commit_title: Optional[str] = None) -> bool:
        """Merge a pull request with a merge commit.

        Args:
            number: Pull request number
            commit_title: Optional merge commit title

        Returns:
            True if GitHub reports the pull request as merged
        """
        payload = {'merge_method': 'merge'}
        if commit_title:
            payload['commit_title'] = commit_title

        data = self._request('PUT', f'{self._repo}/pulls/{number}/merge', json=payload)
        return bool(data.get('merged', True))

    def list_pull_requests(self, state: str = 'open') -> List[PublishRequest]:
        """List pull requests.

        Args:
            state: 'open', 'closed' or 'all'

        Returns:
            Pull requests across all pages
        """
        return [
            PublishRequest.from_github_response(item)
            for item in self._paginated_get(f'{self._repo}/pulls', state=state)
        ]
