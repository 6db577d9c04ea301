"""Repository workspace management.

Each operation resolves a sandboxed workspace path, takes that workspace's
lock and drives git through a fresh GitRepo handle:
- registry.py: clone / list workspaces
- branches.py: list / create / switch branches
- files.py: file tree, reads and writes
- publish.py: commit and push
"""

from .branches import create_branch, list_branches, switch_branch
from .files import list_files, read_file, write_file
from .locks import workspace_locks
from .publish import commit_and_push
from .registry import add_repository, list_repositories

__all__ = [
    "add_repository",
    "list_repositories",
    "list_branches",
    "create_branch",
    "switch_branch",
    "list_files",
    "read_file",
    "write_file",
    "commit_and_push",
    "workspace_locks",
]
