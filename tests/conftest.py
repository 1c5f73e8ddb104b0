"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from unittest.mock import Mock
import json
import tempfile

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from gitcms.api import (
    ContentGateway,
    GatewayError,
    ConflictError,
    ResourceNotFoundError
)
from gitcms.models import Branch, CommitInfo, ContentEntry, EntryType, PublishRequest
from gitcms.utils import Config


def pytest_configure(config):
    config.addinivalue_line('markers', 'integration: end-to-end workflow tests')


class FakeGateway(ContentGateway):
    """In-memory repository with branches, files and pull requests.

    Methods listed in ``failing`` raise ``GatewayError``; every call is
    recorded in ``calls``.
    """

    EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __init__(self, default_branch: str = 'main'):
        self.default_branch = default_branch
        self.files: Dict[str, Dict[str, Tuple[bytes, str]]] = {default_branch: {}}
        self.commits: Dict[Tuple[str, str], CommitInfo] = {}
        self.pull_requests: Dict[int, PublishRequest] = {}
        self.calls: List[str] = []
        self.failing = set()
        self._counter = 0

    def _record(self, name: str):
        self.calls.append(name)
        if name in self.failing:
            raise GatewayError(f"{name} failed")

    def _tick(self) -> int:
        self._counter += 1
        return self._counter

    def add_file(
        self,
        branch: str,
        path: str,
        content: str,
        author: Optional[str] = 'Alice',
        committed_at: Optional[datetime] = None,
        message: Optional[str] = 'Add file',
        with_commit: bool = True
    ) -> str:
        """Seed a file without recording a call."""
        sha = f'blob{self._tick()}'
        self.files.setdefault(branch, {})[path] = (content.encode('utf-8'), sha)
        if with_commit:
            self.commits[(branch, path)] = CommitInfo(
                revision_id=f'commit{self._counter}',
                author_name=author,
                committed_at=committed_at or self.EPOCH + timedelta(minutes=self._counter),
                message=message
            )
        return sha

    def verify_authentication(self):
        self._record('verify_authentication')

    def get_default_branch(self) -> str:
        self._record('get_default_branch')
        return self.default_branch

    def list_branches(self) -> List[Branch]:
        self._record('list_branches')
        return [Branch(name=name, head_revision_id=f'head-{name}') for name in self.files]

    def get_branch_head(self, name: str) -> str:
        self._record('get_branch_head')
        if name not in self.files:
            raise ResourceNotFoundError(f"Branch {name} not found")
        return f'head-{name}'

    def create_branch(self, name: str, base_branch: Optional[str] = None) -> bool:
        self._record('create_branch')
        base = base_branch or self.default_branch
        if name in self.files:
            raise ConflictError(f"Branch {name} already exists")
        if base not in self.files:
            raise ResourceNotFoundError(f"Branch {base} not found")
        self.files[name] = dict(self.files[base])
        for (branch, path), commit in list(self.commits.items()):
            if branch == base:
                self.commits[(name, path)] = commit
        return True

    def delete_branch(self, name: str) -> bool:
        self._record('delete_branch')
        if name not in self.files:
            raise ResourceNotFoundError(f"Branch {name} not found")
        del self.files[name]
        return True

    def get_contents(self, path: str, ref: str):
        self._record('get_contents')
        if ref not in self.files:
            raise ResourceNotFoundError(f"No ref {ref}")
        files = self.files[ref]
        path = path.strip('/')

        if path in files:
            content, sha = files[path]
            return ContentEntry(
                name=path.split('/')[-1], path=path, type=EntryType.FILE,
                content=content, revision_id=sha, branch=ref
            )

        prefix = f'{path}/' if path else ''
        children: Dict[str, ContentEntry] = {}
        for file_path, (_, sha) in files.items():
            if not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix):]
            name = rest.split('/')[0]
            child_path = prefix + name
            if '/' in rest:
                children.setdefault(child_path, ContentEntry(
                    name=name, path=child_path, type=EntryType.DIR, branch=ref
                ))
            else:
                children[child_path] = ContentEntry(
                    name=name, path=child_path, type=EntryType.FILE, revision_id=sha, branch=ref
                )

        if not children:
            raise ResourceNotFoundError(f"{path} not found on {ref}")
        return sorted(children.values(), key=lambda e: e.name)

    def create_or_update_file(self, path, content, message, prior_revision_id=None, branch=None) -> str:
        self._record('create_or_update_file')
        branch = branch or self.default_branch
        if branch not in self.files:
            raise ResourceNotFoundError(f"No ref {branch}")

        existing = self.files[branch].get(path)
        if prior_revision_id is None and existing:
            raise ConflictError(f"{path} already exists on {branch}")
        if prior_revision_id is not None and (not existing or existing[1] != prior_revision_id):
            raise ConflictError(f"Stale revision for {path}")

        sha = f'blob{self._tick()}'
        self.files[branch][path] = (content, sha)
        self.commits[(branch, path)] = CommitInfo(
            revision_id=f'commit{self._counter}',
            author_name='CMS',
            committed_at=self.EPOCH + timedelta(minutes=self._counter),
            message=message
        )
        return sha

    def delete_file(self, path, prior_revision_id, message, branch) -> bool:
        self._record('delete_file')
        existing = self.files.get(branch, {}).get(path)
        if not existing:
            raise ResourceNotFoundError(f"{path} not found on {branch}")
        if existing[1] != prior_revision_id:
            raise ConflictError(f"Stale revision for {path}")
        del self.files[branch][path]
        return True

    def list_commits(self, path, ref, limit=1) -> List[CommitInfo]:
        self._record('list_commits')
        if ref not in self.files:
            raise ResourceNotFoundError(f"No ref {ref}")
        commit = self.commits.get((ref, path))
        return [commit] if commit else []

    def create_pull_request(self, title, source_branch, target_branch, body=None) -> PublishRequest:
        self._record('create_pull_request')
        if source_branch not in self.files:
            raise ConflictError(f"Unknown head {source_branch}")
        number = len(self.pull_requests) + 1
        pull_request = PublishRequest(
            number=number,
            title=title,
            state='open',
            source_branch=source_branch,
            target_branch=target_branch,
            url=f'https://git.example.com/site/pull/{number}'
        )
        self.pull_requests[number] = pull_request
        return pull_request

    def merge_pull_request(self, number, commit_title=None) -> bool:
        self._record('merge_pull_request')
        pull_request = self.pull_requests.get(number)
        if pull_request is None:
            raise ResourceNotFoundError(f"Pull request {number} not found")
        if pull_request.state != 'open':
            raise ConflictError(f"Pull request {number} is {pull_request.state}")

        source = pull_request.source_branch
        self.files[pull_request.target_branch].update(self.files[source])
        for (branch, path), commit in list(self.commits.items()):
            if branch == source:
                self.commits[(pull_request.target_branch, path)] = commit
        pull_request.state = 'merged'
        return True

    def list_pull_requests(self, state='open') -> List[PublishRequest]:
        self._record('list_pull_requests')
        return [pr for pr in self.pull_requests.values() if state == 'all' or pr.state == state]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_env(monkeypatch):
    """Mock environment variables."""
    def _mock_env(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key, value)
    return _mock_env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's GIT_CMS_* variables out of tests."""
    for key in ('GIT_CMS_PROVIDER', 'GIT_CMS_URL', 'GIT_CMS_TOKEN', 'GIT_CMS_REPOSITORY',
                'GIT_CMS_CONTENT_ROOT', 'GIT_CMS_TIMEOUT', 'GIT_CMS_RATE_LIMIT',
                'GIT_CMS_DEFAULT_BRANCH', 'GIT_CMS_LOG_LEVEL', 'GIT_CMS_CONFIG'):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr('gitcms.utils.config.load_dotenv', lambda: None)


@pytest.fixture
def test_config(temp_dir):
    """Create a test configuration."""
    config_data = {
        'gateway': {
            'provider': 'github',
            'token': 'test-token',
            'repository': 'acme/site',
            'rate_limit': 1000,
            'timeout': 5
        },
        'content': {
            'root': 'content',
            'branch_prefix': 'content/',
            'fallback_branch': 'main'
        },
        'logging': {
            'level': 'INFO',
            'file': str(temp_dir / 'test.log')
        }
    }

    config_file = temp_dir / 'config.yaml'
    import yaml
    with open(config_file, 'w') as f:
        yaml.dump(config_data, f)

    return Config(str(config_file))


@pytest.fixture
def fake_gateway():
    """In-memory gateway seeded with a published post and a draft branch."""
    gateway = FakeGateway()
    gateway.add_file('main', 'content/hello.md', '# Hello\n\nPublished', author='Alice',
                     committed_at=datetime(2024, 1, 10, tzinfo=timezone.utc), message='Publish hello')
    gateway.add_file('main', 'content/posts/first.md', '# First', author='Alice')
    gateway.add_file('main', 'README.md', '# Site')

    gateway.create_branch('content/hello-md-1700000000000', 'main')
    gateway.add_file('content/hello-md-1700000000000', 'content/hello.md', '# Hello\n\nDraft',
                     author='Bob', committed_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
                     message='Edit hello')
    gateway.add_file('content/hello-md-1700000000000', 'content/draft-only.md', '# Draft only',
                     author='Bob')
    gateway.calls.clear()
    return gateway


@pytest.fixture
def mock_gateway():
    """Create a mocked content gateway."""
    gateway = Mock(spec=ContentGateway)
    gateway.get_default_branch.return_value = 'main'
    gateway.list_branches.return_value = [
        Branch(name='main', head_revision_id='abc123', is_protected=True)
    ]
    gateway.create_branch.return_value = True
    gateway.delete_branch.return_value = True
    gateway.create_or_update_file.return_value = 'newsha'
    gateway.delete_file.return_value = True
    gateway.merge_pull_request.return_value = True
    gateway.list_pull_requests.return_value = []
    return gateway


@pytest.fixture
def mock_response():
    """Create a mock HTTP response."""
    def _mock_response(status_code=200, json_data=None, headers=None, links=None):
        response = Mock()
        response.status_code = status_code
        response.json = Mock(return_value=json_data if json_data is not None else {})
        response.headers = headers or {}
        response.links = links or {}
        response.text = json.dumps(json_data) if json_data is not None else ''
        response.reason = 'Error' if status_code >= 400 else 'OK'
        return response
    return _mock_response
