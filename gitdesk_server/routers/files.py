"""File browsing and editing endpoints."""

from typing import Optional

from fastapi import APIRouter

from gitdesk_server import workspaces
from gitdesk_server.errors import InvalidInput
from gitdesk_server.logging_config import get_logger
from gitdesk_server.schemas import (
    FileContentResponse,
    FileTreeResponse,
    SaveFileRequest,
    SaveFileResponse,
)
from ._common import require

logger = get_logger(__name__)
router = APIRouter()


@router.get("/repo-files", response_model=FileTreeResponse)
async def repo_files(repoName: Optional[str] = None, branchName: Optional[str] = None):
    """File tree of a branch, synchronized with the remote first."""
    require("Repository name and branch name are required.", repoName, branchName)
    logger.debug(f"Listing files for repo={repoName} branch={branchName}")

    files = await workspaces.list_files(repoName, branchName)
    return FileTreeResponse(files=files)


@router.get("/file-content", response_model=FileContentResponse)
async def file_content(
    repoName: Optional[str] = None,
    branchName: Optional[str] = None,
    filePath: Optional[str] = None,
):
    """Read one file from a branch, synchronized with the remote first."""
    require("Missing parameters!", repoName, branchName, filePath)
    logger.debug(f"Reading file path={filePath} repo={repoName} branch={branchName}")

    content = await workspaces.read_file(repoName, branchName, filePath)
    return FileContentResponse(content=content)


@router.post("/save-file", response_model=SaveFileResponse)
async def save_file(req: SaveFileRequest):
    """Write a file into the working tree of the currently checked-out branch.

    The response's `branch` names that branch; saving never switches branches.
    """
    require("Missing parameters!", req.repoName, req.filePath)
    if req.content is None:
        raise InvalidInput("Missing parameters!")
    logger.debug(f"Saving file path={req.filePath} repo={req.repoName}")

    branch = await workspaces.write_file(req.repoName, req.filePath, req.content)
    return SaveFileResponse(message="File saved successfully!", branch=branch)
