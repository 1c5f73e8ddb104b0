"""Publish request and workflow result models."""

from typing import Optional, Dict, Any
from dataclasses import dataclass


# GitLab reports merge request states with different spellings
GITLAB_STATES = {
    'opened': 'open',
    'closed': 'closed',
    'locked': 'closed',
    'merged': 'merged'
}


@dataclass
class PublishRequest:
    """An open pull/merge request from a draft branch to the published branch."""
    number: int
    title: str
    state: str
    source_branch: str
    target_branch: str
    url: Optional[str] = None

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> 'PublishRequest':
        """Create PublishRequest from a GitHub pull request."""
        return cls(
            number=data['number'],
            title=data['title'],
            state=data.get('state', 'open'),
            source_branch=data['head']['ref'],
            target_branch=data['base']['ref'],
            url=data.get('html_url')
        )

    @classmethod
    def from_gitlab_response(cls, data: Dict[str, Any]) -> 'PublishRequest':
        """Create PublishRequest from a GitLab merge request."""
        state = data.get('state', 'opened')
        return cls(
            number=data['iid'],
            title=data['title'],
            state=GITLAB_STATES.get(state, state),
            source_branch=data['source_branch'],
            target_branch=data['target_branch'],
            url=data.get('web_url')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'title': self.title,
            'state': self.state,
            'head': {'ref': self.source_branch},
            'base': {'ref': self.target_branch},
            'html_url': self.url
        }


@dataclass
class SaveResult:
    """Outcome of a create/update file operation."""
    success: bool
    branch: Optional[str] = None
    pull_request: Optional[PublishRequest] = None
    revision_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'success': self.success}
        if self.branch is not None:
            data['branch'] = self.branch
        if self.pull_request is not None:
            data['pullRequest'] = self.pull_request.to_dict()
        if self.revision_id is not None:
            data['sha'] = self.revision_id
        return data


@dataclass
class PublishOutcome:
    """Outcome of merging a publish request and cleaning up its branch."""
    number: int
    merged: bool = False
    branch: Optional[str] = None
    branch_deleted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'merged': self.merged,
            'branch': self.branch,
            'branchDeleted': self.branch_deleted
        }
