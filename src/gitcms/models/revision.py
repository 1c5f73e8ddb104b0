"""File revision model."""

from typing import Dict, Any
from datetime import datetime
from dataclasses import dataclass


@dataclass
class Revision:
    """One snapshot of a file's content on one branch, with provenance."""
    branch: str
    revision_id: str
    content: bytes
    last_modified_at: datetime
    author_name: str
    commit_message: str
    is_published: bool

    @property
    def text(self) -> str:
        return self.content.decode('utf-8', errors='replace')

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served to the web UI."""
        return {
            'branch': self.branch,
            'content': self.text,
            'sha': self.revision_id,
            'lastModified': self.last_modified_at.isoformat(),
            'author': self.author_name,
            'commitMessage': self.commit_message,
            'isPublished': self.is_published
        }
