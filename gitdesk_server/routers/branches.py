"""Branch endpoints."""

from typing import Optional

from fastapi import APIRouter

from gitdesk_server import workspaces
from gitdesk_server.logging_config import get_logger
from gitdesk_server.schemas import (
    ActionResponse,
    BranchListResponse,
    BranchRequest,
    CreateBranchResponse,
)
from ._common import require

logger = get_logger(__name__)
router = APIRouter()


@router.get("/list-branches", response_model=BranchListResponse)
async def list_branches(repoName: Optional[str] = None):
    """List local and remote branches, de-duplicated and sorted."""
    require("Repository name is required.", repoName)
    logger.debug(f"Listing branches for repo={repoName}")

    branches = await workspaces.list_branches(repoName)
    return BranchListResponse(branches=branches)


@router.post("/create-branch", response_model=CreateBranchResponse)
async def create_branch(req: BranchRequest):
    """Create a branch at the current commit and push it to origin."""
    require("Repository name and branch name are required.", req.repoName, req.branchName)
    logger.debug(f"Creating branch={req.branchName} in repo={req.repoName}")

    branch = await workspaces.create_branch(req.repoName, req.branchName)
    return CreateBranchResponse(
        message=f"Branch '{branch}' created and pushed.", branch=branch
    )


@router.post("/switch-branch", response_model=ActionResponse)
async def switch_branch(req: BranchRequest):
    """Check out an existing branch and track origin/<branch>."""
    require("Repository name and branch name are required.", req.repoName, req.branchName)
    logger.debug(f"Switching repo={req.repoName} to branch={req.branchName}")

    await workspaces.switch_branch(req.repoName, req.branchName)
    return ActionResponse(message=f"Switched to branch '{req.branchName.strip()}'.")
