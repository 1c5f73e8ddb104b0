"""HTTP endpoints consumed by the web editor."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from .. import __version__
from ..services import ContentBrowser, DraftWorkflow, VersionService
from ..utils import ContentValidator
from .dependencies import get_browser, get_versions, get_workflow
from .schemas import (
    BranchCreateRequest,
    BranchDeleteRequest,
    FileSaveRequest,
    FileDeleteRequest,
    PullRequestCreateRequest,
    MergeRequest
)


logger = logging.getLogger(__name__)

router = APIRouter()


class UpstreamFailure(Exception):
    """The hosting provider did not carry out the requested operation."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFound(UpstreamFailure):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


@router.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__
    }


# Branches
@router.get("/api/branches", tags=["Branches"])
def list_branches(workflow: DraftWorkflow = Depends(get_workflow)):
    return [branch.to_dict() for branch in workflow.list_branches()]


@router.post("/api/branches", tags=["Branches"])
def create_branch(payload: BranchCreateRequest, workflow: DraftWorkflow = Depends(get_workflow)):
    name = ContentValidator.validate_branch_name(payload.branchName)
    base = ContentValidator.optional_branch(payload.baseBranch)

    if not workflow.create_branch(name, base):
        raise UpstreamFailure(f"Failed to create branch {name}")
    return {"success": True}


@router.delete("/api/branches", tags=["Branches"])
def delete_branch(payload: BranchDeleteRequest, workflow: DraftWorkflow = Depends(get_workflow)):
    name = ContentValidator.validate_branch_name(payload.branchName)

    if not workflow.delete_branch(name):
        raise UpstreamFailure(f"Failed to delete branch {name}")
    return {"success": True}


# Contents
@router.get("/api/contents", tags=["Contents"])
def list_contents(
    path: str = Query('', description="Directory path"),
    branch: Optional[str] = Query(None, description="Branch (default branch if omitted)"),
    browser: ContentBrowser = Depends(get_browser)
):
    entries = browser.list_directory(path.strip('/'), ContentValidator.optional_branch(branch))
    return [entry.to_dict() for entry in entries]


@router.get("/api/contents/merged", tags=["Contents"])
def list_merged_contents(
    path: str = Query('', description="Path relative to the content root"),
    browser: ContentBrowser = Depends(get_browser)
):
    return [entry.to_dict() for entry in browser.list_merged(path)]


# Files
@router.get("/api/files", tags=["Files"])
def get_file(
    path: Optional[str] = Query(None),
    branch: Optional[str] = Query(None),
    browser: ContentBrowser = Depends(get_browser)
):
    path = ContentValidator.validate_path(path)
    entry = browser.get_file(path, ContentValidator.optional_branch(branch))

    if entry is None:
        raise NotFound(f"File not found: {path}")
    return entry.to_dict()


@router.post("/api/files", tags=["Files"])
def save_file(payload: FileSaveRequest, workflow: DraftWorkflow = Depends(get_workflow)):
    path = ContentValidator.validate_path(payload.path)
    content = ContentValidator.validate_content(payload.content)
    message = ContentValidator.validate_message(payload.message)
    branch = ContentValidator.optional_branch(payload.branch)

    result = workflow.save_file(
        path,
        content,
        message,
        prior_revision_id=payload.sha or None,
        branch=branch,
        is_new_file=payload.isNewFile
    )

    if not result.success:
        raise UpstreamFailure(f"Failed to save {path}")
    return result.to_dict()


@router.delete("/api/files", tags=["Files"])
def delete_file(payload: FileDeleteRequest, workflow: DraftWorkflow = Depends(get_workflow)):
    path = ContentValidator.validate_path(payload.path)
    sha = ContentValidator.validate_revision_id(payload.sha)
    message = ContentValidator.validate_message(payload.message)
    branch = ContentValidator.optional_branch(payload.branch)

    if not workflow.delete_file(path, sha, message, branch):
        raise UpstreamFailure(f"Failed to delete {path}")
    return {"success": True}


@router.get("/api/file-versions", tags=["Files"])
def list_file_versions(
    path: Optional[str] = Query(None),
    versions: VersionService = Depends(get_versions)
):
    path = ContentValidator.validate_path(path)
    return [revision.to_dict() for revision in versions.list_versions(path)]


# Pull requests
@router.get("/api/pull-requests", tags=["Pull Requests"])
def list_pull_requests(workflow: DraftWorkflow = Depends(get_workflow)):
    return [pr.to_dict() for pr in workflow.list_pull_requests()]


@router.post("/api/pull-requests", tags=["Pull Requests"])
def create_pull_request(payload: PullRequestCreateRequest, workflow: DraftWorkflow = Depends(get_workflow)):
    title = ContentValidator.validate_title(payload.title)
    head = ContentValidator.validate_branch_name(payload.head, field='head')
    base = ContentValidator.optional_branch(payload.base)

    pull_request = workflow.create_pull_request(title, head, base, payload.body)
    if pull_request is None:
        raise UpstreamFailure(f"Failed to open pull request from {head}")
    return pull_request.to_dict()


@router.post("/api/pull-requests/{pr_id}/merge", tags=["Pull Requests"])
def merge_pull_request(
    pr_id: str,
    payload: Optional[MergeRequest] = None,
    workflow: DraftWorkflow = Depends(get_workflow)
):
    number = ContentValidator.validate_pull_number(pr_id)
    commit_title = payload.commitTitle if payload else None

    if not workflow.publish(number, commit_title):
        raise UpstreamFailure(f"Failed to merge pull request #{number}")
    return {"success": True}
