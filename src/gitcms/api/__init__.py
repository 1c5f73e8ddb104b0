"""Git hosting API gateway module."""

from typing import Any, Dict

from .base import ContentGateway
from .client import RestClient, RateLimiter
from .github import GitHubClient
from .gitlab import GitLabClient
from .exceptions import (
    GatewayError,
    AuthenticationError,
    RateLimitError,
    ResourceNotFoundError,
    PermissionError,
    ConflictError
)


def create_gateway(gateway_config: Dict[str, Any]) -> ContentGateway:
    """Build a gateway client from the ``gateway`` config section."""
    provider = gateway_config.get('provider', 'github')
    token = gateway_config.get('token')
    repository = gateway_config.get('repository')
    verify_ssl = gateway_config.get('verify_ssl', True)

    if provider == 'github':
        return GitHubClient(
            token,
            repository,
            url=gateway_config.get('url'),
            config=gateway_config,
            verify_ssl=verify_ssl
        )
    if provider == 'gitlab':
        return GitLabClient(
            gateway_config.get('url') or 'https://gitlab.com',
            token,
            repository,
            config=gateway_config,
            verify_ssl=verify_ssl
        )
    raise ValueError(f"Unknown gateway provider: {provider}")


__all__ = [
    'ContentGateway', 'RestClient', 'RateLimiter',
    'GitHubClient', 'GitLabClient', 'create_gateway',
    'GatewayError', 'AuthenticationError', 'RateLimitError',
    'ResourceNotFoundError', 'PermissionError', 'ConflictError'
]
