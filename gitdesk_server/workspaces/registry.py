"""Repository registry: enumerate workspaces and clone new ones."""

import asyncio
import os
import shutil
import uuid
from pathlib import Path

from gitdesk_server.config import settings
from gitdesk_server.errors import AlreadyExists, InvalidInput
from gitdesk_server.git_utils import normalize_git_url, repo_name_from_url, validate_git_url
from ._common import logger, resolve_workspace
from .git import GitRepo
from .locks import workspace_locks


async def add_repository(repo_url: str) -> str:
    """Clone `repo_url` into a new workspace and return the workspace name.

    Raises AlreadyExists when a workspace of the derived name is already on
    disk; the existing workspace is left untouched. The clone is made in a
    hidden sibling directory and renamed into place once complete, so
    listings never see a half-cloned workspace.
    """
    valid, error = validate_git_url(repo_url, allow_local=settings.allow_local_remotes)
    if not valid:
        raise InvalidInput(error or "Invalid repository URL.")

    url = normalize_git_url(repo_url)
    repo_name = repo_name_from_url(url)
    repo_path = resolve_workspace(repo_name)

    async with workspace_locks.exclusive(repo_path):
        if repo_path.exists():
            raise AlreadyExists("Repository already exists.")
        repo_path.parent.mkdir(parents=True, exist_ok=True)

        staging = repo_path.parent / f".{repo_name}.tmp-{uuid.uuid4().hex}"
        await GitRepo.clone(url, staging)
        try:
            await asyncio.to_thread(os.rename, staging, repo_path)
        except OSError:
            shutil.rmtree(staging, ignore_errors=True)
            raise

    logger.info(f"Repository '{repo_name}' cloned into {repo_path}")
    return repo_name


async def list_repositories() -> list[str]:
    """Names of the directories directly under the base path, sorted.

    Dot-prefixed entries are clones in progress and are skipped.
    """
    base = settings.base_path
    if not base.is_dir():
        return []

    entries = await asyncio.to_thread(
        lambda: [entry for entry in base.iterdir() if not entry.name.startswith(".")]
    )
    # Type checks run concurrently and are all awaited before filtering
    is_dir = await asyncio.gather(
        *(asyncio.to_thread(_is_real_dir, entry) for entry in entries)
    )
    return sorted(entry.name for entry, keep in zip(entries, is_dir) if keep)


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()
