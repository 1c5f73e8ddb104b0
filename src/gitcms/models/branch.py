"""Branch and commit data models."""

from typing import Optional, Dict, Any
from datetime import datetime
from dataclasses import dataclass


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the hosting API."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


@dataclass
class Branch:
    """Git branch model."""
    name: str
    head_revision_id: str
    is_protected: bool = False

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> 'Branch':
        """Create Branch instance from GitHub API response."""
        return cls(
            name=data['name'],
            head_revision_id=data.get('commit', {}).get('sha', ''),
            is_protected=data.get('protected', False)
        )

    @classmethod
    def from_gitlab_response(cls, data: Dict[str, Any]) -> 'Branch':
        """Create Branch instance from GitLab API response."""
        return cls(
            name=data['name'],
            head_revision_id=data.get('commit', {}).get('id', ''),
            is_protected=data.get('protected', False)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'commit': {'sha': self.head_revision_id},
            'protected': self.is_protected
        }


@dataclass
class CommitInfo:
    """Provenance of the latest commit touching a path.

    Any field may be missing when the hosting provider has no author
    metadata for the commit.
    """
    revision_id: str
    author_name: Optional[str] = None
    committed_at: Optional[datetime] = None
    message: Optional[str] = None

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> 'CommitInfo':
        """Create CommitInfo from a GitHub commit listing item."""
        commit = data.get('commit') or {}
        author = commit.get('author') or {}
        return cls(
            revision_id=data['sha'],
            author_name=author.get('name'),
            committed_at=parse_timestamp(author.get('date')),
            message=commit.get('message')
        )

    @classmethod
    def from_gitlab_response(cls, data: Dict[str, Any]) -> 'CommitInfo':
        """Create CommitInfo from a GitLab commit listing item."""
        return cls(
            revision_id=data['id'],
            author_name=data.get('author_name'),
            committed_at=parse_timestamp(data.get('authored_date') or data.get('committed_date')),
            message=data.get('message')
        )
