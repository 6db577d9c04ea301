"""Repository endpoints: clone and list workspaces."""

from fastapi import APIRouter

from gitdesk_server import workspaces
from gitdesk_server.logging_config import get_logger
from gitdesk_server.schemas import ActionResponse, AddRepoRequest, RepoListResponse
from ._common import require

logger = get_logger(__name__)
router = APIRouter()


@router.post("/add-repo", response_model=ActionResponse)
async def add_repo(req: AddRepoRequest):
    """Clone a repository into a new workspace named after the URL."""
    require("Repository URL is required.", req.repoUrl)
    logger.debug(f"Adding repository url={req.repoUrl}")

    await workspaces.add_repository(req.repoUrl)
    return ActionResponse(message="Repository added successfully.")


@router.get("/list-repos", response_model=RepoListResponse)
async def list_repos():
    """List every workspace on disk."""
    repos = await workspaces.list_repositories()
    logger.debug(f"Found {len(repos)} repositories")
    return RepoListResponse(repos=repos)
