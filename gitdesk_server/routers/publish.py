"""Commit & push endpoint."""

from fastapi import APIRouter

from gitdesk_server import workspaces
from gitdesk_server.logging_config import get_logger
from gitdesk_server.schemas import ActionResponse, CommitPushRequest
from ._common import require

logger = get_logger(__name__)
router = APIRouter()


@router.post("/commit-push", response_model=ActionResponse)
async def commit_push(req: CommitPushRequest):
    """Commit pending edits onto the requested branch, pull, then push it."""
    require("Missing parameters!", req.repoName, req.branchName, req.commitMessage)
    logger.debug(f"Commit & push repo={req.repoName} branch={req.branchName}")

    branch = req.branchName.strip()
    await workspaces.commit_and_push(req.repoName, branch, req.commitMessage)
    return ActionResponse(message=f"Changes committed and pushed to '{branch}'!")
