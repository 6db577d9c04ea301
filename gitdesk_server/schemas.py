from typing import Literal, Optional

from pydantic import BaseModel


class FileNode(BaseModel):
    """One entry of a workspace file tree."""
    name: str
    path: str
    type: Literal["file", "folder"]
    children: list["FileNode"] = []


FileNode.model_rebuild()


# Request bodies. Fields are optional so that a missing one surfaces as our
# own 400 payload rather than FastAPI's 422.

class AddRepoRequest(BaseModel):
    repoUrl: Optional[str] = None


class BranchRequest(BaseModel):
    """Body of /create-branch and /switch-branch."""
    repoName: Optional[str] = None
    branchName: Optional[str] = None


class SaveFileRequest(BaseModel):
    repoName: Optional[str] = None
    filePath: Optional[str] = None
    content: Optional[str] = None


class CommitPushRequest(BaseModel):
    repoName: Optional[str] = None
    branchName: Optional[str] = None
    commitMessage: Optional[str] = None


# Responses

class ActionResponse(BaseModel):
    success: bool = True
    message: str


class CreateBranchResponse(ActionResponse):
    branch: str


class SaveFileResponse(ActionResponse):
    branch: Optional[str] = None


class RepoListResponse(BaseModel):
    success: bool = True
    repos: list[str]


class BranchListResponse(BaseModel):
    success: bool = True
    branches: list[str]


class FileTreeResponse(BaseModel):
    success: bool = True
    files: list[FileNode]


class FileContentResponse(BaseModel):
    success: bool = True
    content: str
