"""Branch listing, creation and switching."""

from gitdesk_server.errors import BranchExists
from ._common import logger, require_workspace, validate_branch_name
from .git import REMOTE, GitRepo
from .locks import workspace_locks

_LOCAL_PREFIX = "refs/heads/"
_REMOTES_PREFIX = "refs/remotes/"


def branch_names(refs: list[str]) -> list[str]:
    """Collapse full ref names into sorted, de-duplicated branch names.

    refs/heads/main and refs/remotes/origin/main both become "main"; branches
    of other remotes keep their "<remote>/" prefix; symbolic HEAD refs are
    dropped.
    """
    names = set()
    for ref in refs:
        if ref.startswith(_LOCAL_PREFIX):
            names.add(ref[len(_LOCAL_PREFIX):])
        elif ref.startswith(_REMOTES_PREFIX):
            name = ref[len(_REMOTES_PREFIX):]
            if name == "HEAD" or name.endswith("/HEAD"):
                continue
            if name.startswith(f"{REMOTE}/"):
                name = name[len(REMOTE) + 1:]
            names.add(name)
    return sorted(names)


def _conflicts(existing: str, name: str) -> bool:
    # git cannot hold both "a" and "a/b" as refs
    return (
        existing == name
        or existing.startswith(f"{name}/")
        or name.startswith(f"{existing}/")
    )


async def list_branches(repo_name: str) -> list[str]:
    """Fetch from origin and return every local and remote branch name once, sorted."""
    repo_path = require_workspace(repo_name)
    async with workspace_locks.shared(repo_path):
        repo = GitRepo(repo_path)
        await repo.fetch()
        return branch_names(await repo.branch_refs())


async def create_branch(repo_name: str, branch_name: str) -> str:
    """Create `branch_name` at the current commit, check it out and publish it."""
    branch_name = validate_branch_name(branch_name)
    repo_path = require_workspace(repo_name)
    async with workspace_locks.exclusive(repo_path):
        repo = GitRepo(repo_path)
        await repo.fetch()
        existing = branch_names(await repo.branch_refs())
        if any(_conflicts(name, branch_name) for name in existing):
            raise BranchExists(f"Branch '{branch_name}' already exists.")

        await repo.create_branch(branch_name)
        await repo.push(branch_name)

    logger.info(f"Branch '{branch_name}' created and pushed in {repo_name}")
    return branch_name


async def switch_branch(repo_name: str, branch_name: str) -> None:
    """Check out `branch_name` and make origin/<branch_name> its upstream."""
    branch_name = validate_branch_name(branch_name)
    repo_path = require_workspace(repo_name)
    async with workspace_locks.exclusive(repo_path):
        repo = GitRepo(repo_path)
        await repo.switch(branch_name)
        if await repo.has_remote_branch(branch_name):
            await repo.set_upstream(branch_name)
        else:
            logger.warning(
                f"Branch '{branch_name}' in {repo_name} has no remote counterpart, "
                f"leaving it without upstream"
            )

    logger.info(f"Switched {repo_name} to branch '{branch_name}'")
