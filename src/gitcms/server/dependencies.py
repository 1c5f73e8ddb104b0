"""Request-scoped service wiring for the HTTP API."""

from fastapi import Depends, Request

from ..api import ContentGateway
from ..services import ContentBrowser, DraftWorkflow, PublishedBranch, VersionService
from ..utils import Config


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_gateway(request: Request) -> ContentGateway:
    return request.app.state.gateway


def get_published(
    gateway: ContentGateway = Depends(get_gateway),
    config: Config = Depends(get_config)
) -> PublishedBranch:
    """One published-branch lookup shared by every service in a request."""
    return PublishedBranch(gateway, fallback=config.get_fallback_branch())


def get_workflow(
    gateway: ContentGateway = Depends(get_gateway),
    published: PublishedBranch = Depends(get_published),
    config: Config = Depends(get_config)
) -> DraftWorkflow:
    return DraftWorkflow(gateway, published=published, branch_prefix=config.get_branch_prefix())


def get_versions(
    gateway: ContentGateway = Depends(get_gateway),
    published: PublishedBranch = Depends(get_published)
) -> VersionService:
    return VersionService(gateway, published=published)


def get_browser(
    gateway: ContentGateway = Depends(get_gateway),
    published: PublishedBranch = Depends(get_published),
    config: Config = Depends(get_config)
) -> ContentBrowser:
    return ContentBrowser(gateway, content_root=config.get_content_root(), published=published)
