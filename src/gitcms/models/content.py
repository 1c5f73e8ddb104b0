"""Repository content data models."""

import base64
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Dict, Any


class EntryType(str, Enum):
    """Kinds of repository entries."""
    FILE = "file"
    DIR = "dir"


def decode_content(encoded: Optional[str]) -> Optional[bytes]:
    """Decode base64 file content as returned by the hosting API."""
    if encoded is None:
        return None
    # GitHub wraps base64 payloads at 60 columns
    return base64.b64decode(''.join(encoded.split()))


@dataclass
class ContentEntry:
    """A file or directory as seen on one branch snapshot.

    Identity is ``path`` within a branch; the same logical document can
    appear once per branch.
    """
    name: str
    path: str
    type: EntryType
    content: Optional[bytes] = None
    revision_id: Optional[str] = None
    branch: Optional[str] = None
    is_published: Optional[bool] = None

    @classmethod
    def from_github_response(cls, data: Dict[str, Any], branch: Optional[str] = None) -> 'ContentEntry':
        """Create ContentEntry from a GitHub contents API item."""
        entry_type = EntryType.DIR if data.get('type') == 'dir' else EntryType.FILE
        content = None
        if entry_type == EntryType.FILE and 'content' in data:
            content = decode_content(data['content'])
        return cls(
            name=data['name'],
            path=data['path'],
            type=entry_type,
            content=content,
            revision_id=data.get('sha'),
            branch=branch
        )

    @classmethod
    def from_gitlab_tree_item(cls, data: Dict[str, Any], branch: Optional[str] = None) -> 'ContentEntry':
        """Create ContentEntry from a GitLab repository tree item."""
        return cls(
            name=data['name'],
            path=data['path'],
            type=EntryType.DIR if data.get('type') == 'tree' else EntryType.FILE,
            revision_id=data.get('id'),
            branch=branch
        )

    @classmethod
    def from_gitlab_file(cls, data: Dict[str, Any], branch: Optional[str] = None) -> 'ContentEntry':
        """Create ContentEntry from a GitLab repository file response."""
        return cls(
            name=data['file_name'],
            path=data['file_path'],
            type=EntryType.FILE,
            content=decode_content(data.get('content')),
            revision_id=data.get('blob_id'),
            branch=branch
        )

    @property
    def is_file(self) -> bool:
        return self.type == EntryType.FILE

    @property
    def is_dir(self) -> bool:
        return self.type == EntryType.DIR

    @property
    def text(self) -> Optional[str]:
        """File content decoded as UTF-8."""
        if self.content is None:
            return None
        return self.content.decode('utf-8', errors='replace')

    def tagged(self, branch: str, is_published: bool) -> 'ContentEntry':
        """Return a copy annotated with its branch and publication state."""
        return replace(self, branch=branch, is_published=is_published)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served to the web UI."""
        data = {
            'name': self.name,
            'path': self.path,
            'type': self.type.value,
            'sha': self.revision_id,
            'branch': self.branch,
            'published': self.is_published,
        }
        if self.content is not None:
            data['content'] = self.text
        return data
