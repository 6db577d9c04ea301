"""Publish pipeline: switch, commit, pull, push."""

from ._common import logger, require_workspace, validate_branch_name
from .git import GitRepo
from .locks import workspace_locks


async def commit_and_push(repo_name: str, branch_name: str, message: str) -> bool:
    """Commit pending edits onto `branch_name` and publish it.

    The branch is checked out *before* committing, so the commit always
    belongs to `branch_name` (committing first and switching afterwards left
    edits on whichever branch happened to be current). A failed pull keeps
    the local commit and stops before pushing.

    Returns True when a new commit was created.
    """
    branch_name = validate_branch_name(branch_name)
    repo_path = require_workspace(repo_name)

    async with workspace_locks.exclusive(repo_path):
        repo = GitRepo(repo_path)

        logger.info(f"Switching to branch: {branch_name}")
        await repo.switch(branch_name)

        committed = False
        if not await repo.is_clean():
            logger.info(f"Uncommitted changes found in {repo_name}, committing")
            await repo.commit_all(message)
            committed = True

        await repo.pull(branch_name)

        logger.info(f"Pushing to branch: {branch_name}")
        await repo.push(branch_name)

    return committed
