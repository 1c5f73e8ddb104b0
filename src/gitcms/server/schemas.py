"""Pydantic request models for the HTTP API.

Required fields are declared optional so missing values reach the
validators and come back as 400 responses with a readable message.
"""

from typing import Optional

from pydantic import BaseModel, Field


class BranchCreateRequest(BaseModel):
    branchName: Optional[str] = Field(None, description="Name of the branch to create")
    baseBranch: Optional[str] = Field(None, description="Branch to fork from (default branch if omitted)")


class BranchDeleteRequest(BaseModel):
    branchName: Optional[str] = Field(None, description="Name of the branch to delete")


class FileSaveRequest(BaseModel):
    path: Optional[str] = Field(None, description="File path in the repository")
    content: Optional[str] = Field(None, description="New file content")
    message: Optional[str] = Field(None, description="Commit message")
    sha: Optional[str] = Field(None, description="Revision being replaced; omit when creating")
    branch: Optional[str] = Field(None, description="Target branch")
    isNewFile: bool = Field(False, description="Create the file on a new draft branch")


class FileDeleteRequest(BaseModel):
    path: Optional[str] = None
    sha: Optional[str] = None
    message: Optional[str] = None
    branch: Optional[str] = None


class PullRequestCreateRequest(BaseModel):
    title: Optional[str] = None
    head: Optional[str] = Field(None, description="Source (draft) branch")
    base: Optional[str] = Field(None, description="Target branch (default branch if omitted)")
    body: Optional[str] = None


class MergeRequest(BaseModel):
    commitTitle: Optional[str] = None
