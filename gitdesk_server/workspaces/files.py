"""Workspace file tree, file reads and file writes."""

import asyncio
import os
from pathlib import Path
from typing import Optional

from gitdesk_server.errors import FileNotFound
from gitdesk_server.schemas import FileNode
from ._common import logger, require_workspace, resolve_file, validate_branch_name
from .git import GitRepo
from .locks import workspace_locks


async def sync_branch(repo: GitRepo, branch_name: str) -> None:
    """Check out `branch_name` and fast-forward it to the remote tip."""
    logger.info(f"Checking out branch: {branch_name}")
    await repo.switch(branch_name)
    await repo.pull(branch_name, ff_only=True)


def build_tree(root: Path, directory: Optional[Path] = None) -> list[FileNode]:
    """Recursive listing of `directory` (default: `root`), excluding .git.

    Symlinks are listed as files and never followed.
    """
    directory = directory or root
    nodes = []
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.name == ".git" and directory == root:
            continue
        is_folder = entry.is_dir(follow_symlinks=False)
        full = Path(entry.path)
        nodes.append(
            FileNode(
                name=entry.name,
                path=full.relative_to(root).as_posix(),
                type="folder" if is_folder else "file",
                children=build_tree(root, full) if is_folder else [],
            )
        )
    return nodes


async def list_files(repo_name: str, branch_name: str) -> list[FileNode]:
    """File tree of `branch_name` as it is on the remote."""
    branch_name = validate_branch_name(branch_name)
    repo_path = require_workspace(repo_name)
    async with workspace_locks.exclusive(repo_path):
        await sync_branch(GitRepo(repo_path), branch_name)
        return await asyncio.to_thread(build_tree, repo_path)


async def read_file(repo_name: str, branch_name: str, file_path: str) -> str:
    """Content of `file_path` on `branch_name` after synchronizing with the remote."""
    branch_name = validate_branch_name(branch_name)
    repo_path = require_workspace(repo_name)
    resolve_file(repo_path, file_path)

    async with workspace_locks.exclusive(repo_path):
        await sync_branch(GitRepo(repo_path), branch_name)
        # The pull may have changed symlinks, so check containment again
        full_path = resolve_file(repo_path, file_path)
        if not full_path.is_file():
            logger.debug(f"File not found: path={file_path}")
            raise FileNotFound("File not found!")
        try:
            return await asyncio.to_thread(
                full_path.read_text, encoding="utf-8", errors="replace"
            )
        except OSError as e:
            logger.warning(f"Unreadable file {file_path} in {repo_name}: {e}")
            raise FileNotFound("File not found!")


async def write_file(repo_name: str, file_path: str, content: str) -> Optional[str]:
    """Overwrite `file_path` with `content` on whatever branch is checked out.

    No synchronization happens here: the edit lands on the workspace's current
    branch, which is returned so callers can tell where it went.
    """
    repo_path = require_workspace(repo_name)
    resolve_file(repo_path, file_path)

    async with workspace_locks.exclusive(repo_path):
        # A sync holding the lock may have pulled new symlinks
        full_path = resolve_file(repo_path, file_path)
        if full_path.is_dir():
            raise FileNotFound(f"'{file_path}' is a directory.")

        def _write() -> None:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(full_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)

        await asyncio.to_thread(_write)
        branch = await GitRepo(repo_path).current_branch()

    logger.info(f"Saved {file_path} in {repo_name} on branch '{branch}'")
    return branch
