"""Published-branch resolution."""

import logging
from typing import Optional

from ..api import ContentGateway, GatewayError


logger = logging.getLogger(__name__)


class PublishedBranch:
    """Single source of truth for which branch is published.

    The published branch is the repository's default branch. It is looked
    up once per instance so that every check made while serving one
    request agrees, even if the default branch changes mid-request.
    """

    def __init__(self, gateway: ContentGateway, fallback: str = 'main'):
        """Initialize published branch resolver.

        Args:
            gateway: Content gateway
            fallback: Branch name used when the default branch cannot be read
        """
        self.gateway = gateway
        self.fallback = fallback
        self._name: Optional[str] = None

    @property
    def name(self) -> str:
        if self._name is None:
            try:
                self._name = self.gateway.get_default_branch()
            except GatewayError as e:
                logger.warning(f"Could not read default branch, using '{self.fallback}': {e}")
                return self.fallback
        return self._name

    def is_published(self, branch_name: Optional[str]) -> bool:
        return branch_name == self.name

    def refresh(self):
        """Forget the cached default branch."""
        self._name = None
