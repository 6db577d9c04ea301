"""Shared helpers for workspace operations: path resolution and validation."""

import re
from pathlib import Path

from gitdesk_server.config import settings
from gitdesk_server.errors import InvalidInput, InvalidPath, RepositoryNotFound
from gitdesk_server.logging_config import get_logger

logger = get_logger(__name__)

__all__ = [
    "resolve_workspace",
    "require_workspace",
    "resolve_file",
    "validate_branch_name",
    "logger",
]

# Characters and sequences git refuses in branch names (see git-check-ref-format)
_BAD_REF_CHARS = re.compile(r'[\x00-\x20\x7f~^:?*\[\\]')


def _is_within(path: Path, root: Path) -> bool:
    """Component-wise containment: /repos/a is not within /repos/ab."""
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def resolve_workspace(repo_name: str) -> Path:
    """Map a repository name to its workspace directory, refusing sandbox escapes.

    A workspace is always a direct child of the base directory, so names with
    separators or parent segments are rejected even when they would resolve
    somewhere inside the base.
    """
    base = settings.base_path
    if not repo_name or "\x00" in repo_name:
        raise InvalidPath("Invalid repository name!")

    resolved = (base / repo_name).resolve()
    # Dot-prefixed directories are reserved for clones in progress
    if (
        resolved.parent != base
        or not _is_within(resolved, base)
        or resolved.name.startswith(".")
    ):
        logger.warning(f"Rejected repository name: {repo_name!r}")
        raise InvalidPath("Invalid repository name!")
    return resolved


def require_workspace(repo_name: str) -> Path:
    """Like resolve_workspace, but the workspace must already exist."""
    path = resolve_workspace(repo_name)
    if not path.is_dir():
        raise RepositoryNotFound(f"Repository '{repo_name}' not found.")
    return path


def resolve_file(workspace: Path, rel_path: str) -> Path:
    """Resolve a client-supplied path inside a workspace, preventing directory traversal.

    Symlinks are followed before the containment check, and nothing under the
    repository's .git directory is reachable.
    """
    if not rel_path or "\x00" in rel_path:
        raise InvalidPath("Invalid file path!")

    resolved = (workspace / rel_path).resolve()
    if resolved == workspace or not _is_within(resolved, workspace):
        logger.warning(f"Rejected file path outside workspace {workspace.name}: {rel_path!r}")
        raise InvalidPath("Invalid file path!")

    if resolved.relative_to(workspace).parts[0] == ".git":
        logger.warning(f"Rejected file path inside .git of {workspace.name}: {rel_path!r}")
        raise InvalidPath("Invalid file path!")
    return resolved


def validate_branch_name(name: str) -> str:
    """Reject branch names git would refuse or could mistake for an option."""
    name = (name or "").strip()
    if (
        not name
        or name.startswith(("-", "/", "."))
        or name.endswith(("/", ".", ".lock"))
        or ".." in name
        or "//" in name
        or "@{" in name
        or "/." in name
        or name == "@"
        or _BAD_REF_CHARS.search(name)
    ):
        raise InvalidInput(f"Invalid branch name: {name!r}")
    return name
