"""Async git invocation for workspace operations.

A ``GitRepo`` is a thin handle bound to one workspace directory. Handles are
cheap and built per operation; callers hold the workspace lock while using one.
"""
import asyncio
import base64
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gitdesk_server.config import settings
from gitdesk_server.errors import (
    BranchNotFound,
    CloneFailed,
    ExternalToolFailure,
    PullConflict,
    Timeout,
)
from gitdesk_server.git_utils import scrub_credentials
from gitdesk_server.logging_config import get_logger

logger = get_logger(__name__)

REMOTE = "origin"


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(
    command: list[str],
    cwd: Optional[str] = None,
    env: Optional[dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """Run a command as a subprocess; raise Timeout if it outlives `timeout`."""
    process = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=env,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise Timeout(f"'{' '.join(command[:2])}' timed out after {timeout:g}s")
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise
    return CommandResult(
        returncode=process.returncode or 0,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def git_env() -> dict[str, str]:
    """Environment for git subprocesses.

    Credentials travel as an ``http.<url>.extraHeader`` entry injected through
    GIT_CONFIG_* variables, so they never land in .git/config or argv. The
    URL scoping means only remotes under ``git_credential_url`` receive them.
    """
    env = {
        **os.environ,
        "GIT_TERMINAL_PROMPT": "0",  # Disable interactive prompts
        "GIT_MERGE_AUTOEDIT": "no",
        "GIT_AUTHOR_NAME": settings.commit_author_name,
        "GIT_AUTHOR_EMAIL": settings.commit_author_email,
        "GIT_COMMITTER_NAME": settings.commit_author_name,
        "GIT_COMMITTER_EMAIL": settings.commit_author_email,
    }
    if settings.github_token and settings.git_credential_url:
        basic = base64.b64encode(
            f"{settings.github_user}:{settings.github_token}".encode()
        ).decode()
        index = int(env.get("GIT_CONFIG_COUNT", "0") or 0)
        env[f"GIT_CONFIG_KEY_{index}"] = f"http.{settings.git_credential_url}.extraHeader"
        env[f"GIT_CONFIG_VALUE_{index}"] = f"Authorization: Basic {basic}"
        env["GIT_CONFIG_COUNT"] = str(index + 1)
    return env


class GitRepo:
    """Operations on a single workspace's repository."""

    def __init__(self, path: Path, timeout: Optional[float] = None):
        self.path = Path(path)
        self.timeout = timeout if timeout is not None else settings.git_timeout_seconds

    async def run(self, *args: str, check: bool = True) -> CommandResult:
        logger.debug(f"git {' '.join(args)} (cwd={self.path})")
        result = await run_command(
            ["git", *args], cwd=str(self.path), env=git_env(), timeout=self.timeout
        )
        if check and not result.ok:
            raise ExternalToolFailure(
                f"git {args[0]} failed: {scrub_credentials(result.stderr.strip())}"
            )
        return result

    @classmethod
    async def clone(cls, url: str, dest: Path) -> "GitRepo":
        """Clone `url` into `dest`, removing `dest` again if the clone fails."""
        timeout = settings.git_timeout_seconds
        logger.info(f"Cloning {scrub_credentials(url)} into {dest}")
        try:
            result = await run_command(
                ["git", "clone", "--", url, str(dest)],
                cwd=str(dest.parent),
                env=git_env(),
                timeout=timeout,
            )
        except Timeout:
            shutil.rmtree(dest, ignore_errors=True)
            raise
        if not result.ok:
            shutil.rmtree(dest, ignore_errors=True)
            logger.warning(f"Clone failed: {scrub_credentials(result.stderr.strip())}")
            raise CloneFailed("Failed to clone repository.")
        return cls(dest)

    async def fetch(self) -> None:
        await self.run("fetch", "--prune", REMOTE)

    async def branch_refs(self) -> list[str]:
        """Full ref names of every local and remote-tracking branch."""
        result = await self.run(
            "for-each-ref", "--format=%(refname)", "refs/heads", "refs/remotes"
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    async def current_branch(self) -> Optional[str]:
        """Name of the checked-out branch, or None when HEAD is detached."""
        result = await self.run("symbolic-ref", "--quiet", "--short", "HEAD", check=False)
        return result.stdout.strip() if result.ok else None

    async def has_remote_branch(self, name: str) -> bool:
        result = await self.run(
            "rev-parse", "--verify", "--quiet", f"refs/remotes/{REMOTE}/{name}", check=False
        )
        return result.ok

    async def switch(self, branch: str) -> None:
        """Check out `branch`, creating it from origin/<branch> when only the remote has it."""
        result = await self.run("switch", branch, check=False)
        if result.ok:
            return
        stderr = result.stderr.lower()
        if "invalid reference" in stderr or "did not match" in stderr:
            raise BranchNotFound(f"Branch '{branch}' not found.")
        if "would be overwritten" in stderr:
            raise ExternalToolFailure(
                f"Uncommitted changes would be overwritten by switching to '{branch}'."
            )
        raise ExternalToolFailure(
            f"git switch failed: {scrub_credentials(result.stderr.strip())}"
        )

    async def create_branch(self, name: str) -> None:
        await self.run("switch", "-c", name)

    async def set_upstream(self, name: str) -> None:
        await self.run("branch", f"--set-upstream-to={REMOTE}/{name}", name)

    async def pull(self, branch: str, ff_only: bool = False) -> bool:
        """Pull `branch` from origin into the current branch.

        Returns False when the remote has no such branch yet. Any other
        failure aborts an in-progress merge and raises PullConflict; commits
        made before the pull stay in place.
        """
        mode = "--ff-only" if ff_only else "--no-rebase"
        try:
            result = await self.run("pull", mode, "--no-edit", REMOTE, branch, check=False)
        except Timeout:
            # A killed pull can leave a merge half-done
            await self.abort_merge()
            raise
        if result.ok:
            return True
        if "couldn't find remote ref" in result.stderr.lower():
            logger.info(f"Remote has no branch '{branch}' yet, nothing to pull")
            return False
        logger.warning(
            f"Pull of '{branch}' failed in {self.path}: "
            f"{scrub_credentials(result.stderr.strip())}"
        )
        await self.abort_merge()
        raise PullConflict(
            "Failed to pull latest changes. Resolve conflicts before pushing."
        )

    async def abort_merge(self) -> None:
        if (self.path / ".git" / "MERGE_HEAD").exists():
            await self.run("merge", "--abort", check=False)

    async def push(self, branch: str) -> None:
        await self.run("push", "-u", REMOTE, branch)

    async def is_clean(self) -> bool:
        result = await self.run("status", "--porcelain")
        return not result.stdout.strip()

    async def commit_all(self, message: str) -> None:
        await self.run("add", "-A")
        await self.run("commit", "-m", message)
