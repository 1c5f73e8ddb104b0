"""Input validation utilities."""

import re
from typing import Optional, Union


class ValidationError(ValueError):
    """Custom validation error."""
    pass


# Values the web UI sends when no branch is selected
EMPTY_BRANCH_VALUES = (None, '', 'undefined', 'null')


class ContentValidator:
    """Validator for content operation inputs."""

    MAX_PATH_LENGTH = 1024
    MAX_MESSAGE_LENGTH = 10_000

    # Subset of git check-ref-format rules
    BRANCH_PATTERN = re.compile(r'^[A-Za-z0-9._/\-]+$')

    @classmethod
    def validate_path(cls, path: Optional[str], field: str = 'path') -> str:
        """Validate a repository file path."""
        if not path or not path.strip():
            raise ValidationError(f"{field} is required")

        path = path.strip().strip('/')

        if not path:
            raise ValidationError(f"{field} is required")

        if len(path) > cls.MAX_PATH_LENGTH:
            raise ValidationError(
                f"{field} too long ({len(path)} chars). Maximum: {cls.MAX_PATH_LENGTH} chars"
            )

        if '..' in path.split('/'):
            raise ValidationError(f"Invalid {field} '{path}': parent segments are not allowed")

        return path

    @classmethod
    def validate_message(cls, message: Optional[str]) -> str:
        """Validate a commit message."""
        if not message or not message.strip():
            raise ValidationError("message is required")

        if len(message) > cls.MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"message too long ({len(message)} chars). Maximum: {cls.MAX_MESSAGE_LENGTH} chars"
            )

        return message.strip()

    @staticmethod
    def validate_content(content: Union[str, bytes, None]) -> bytes:
        """Validate file content and return it as bytes."""
        if not content:
            raise ValidationError("content is required")

        if isinstance(content, str):
            return content.encode('utf-8')

        if isinstance(content, bytes):
            return content

        raise ValidationError(f"Invalid content type: {type(content).__name__}")

    @staticmethod
    def validate_revision_id(revision_id: Optional[str]) -> str:
        """Validate a revision id (blob sha) needed for updates and deletes."""
        if not revision_id or not str(revision_id).strip():
            raise ValidationError("sha is required")
        return str(revision_id).strip()

    @classmethod
    def validate_branch_name(cls, name: Optional[str], field: str = 'branchName') -> str:
        """Validate a branch name."""
        if not name or not name.strip():
            raise ValidationError(f"{field} is required")

        name = name.strip()

        if (not cls.BRANCH_PATTERN.match(name) or '..' in name
                or name.startswith('/') or name.endswith('/') or name.endswith('.lock')):
            raise ValidationError(f"Invalid {field} '{name}'")

        return name

    @classmethod
    def optional_branch(cls, name: Optional[str]) -> Optional[str]:
        """Return a validated branch name, or None when the value means 'no branch'."""
        if name in EMPTY_BRANCH_VALUES or not str(name).strip():
            return None
        return cls.validate_branch_name(name, field='branch')

    @staticmethod
    def validate_pull_number(number: Union[int, str, None]) -> int:
        """Validate a pull/merge request number."""
        if isinstance(number, bool):
            raise ValidationError("Invalid pull request id")

        try:
            value = int(str(number).strip())
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid pull request id '{number}'")

        if value <= 0:
            raise ValidationError(f"Invalid pull request id '{number}'")

        return value

    @staticmethod
    def validate_title(title: Optional[str]) -> str:
        if not title or not title.strip():
            raise ValidationError("title is required")
        return title.strip()
