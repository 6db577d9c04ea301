"""Pytest configuration and fixtures for the server tests.

API tests run against real git repositories: a bare "remote" in tmp_path,
seeded from a scratch clone that tests can also use to simulate other
collaborators pushing to the remote.
"""
import os
import shutil
import subprocess
from pathlib import Path
from types import SimpleNamespace

# Set test environment before importing the app
os.environ.setdefault("GITHUB_TOKEN", "test-token")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from gitdesk_server.config import settings
from gitdesk_server.main import app
from gitdesk_server.workspaces import workspace_locks

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Seed Author",
    "GIT_AUTHOR_EMAIL": "seed@example.com",
    "GIT_COMMITTER_NAME": "Seed Author",
    "GIT_COMMITTER_EMAIL": "seed@example.com",
    "GIT_TERMINAL_PROMPT": "0",
}


def git(*args: str, cwd: Path) -> str:
    """Run git synchronously for test setup and inspection."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
        env={**os.environ, **GIT_ENV},
    )
    return result.stdout


def remote_file(remote: Path, branch: str, path: str) -> str | None:
    """Content of `path` on `branch` of a bare repository, None if absent."""
    result = subprocess.run(
        ["git", "show", f"{branch}:{path}"],
        cwd=remote,
        capture_output=True,
        text=True,
    )
    return result.stdout if result.returncode == 0 else None


def remote_branches(remote: Path) -> list[str]:
    out = git("for-each-ref", "--format=%(refname:short)", "refs/heads", cwd=remote)
    return sorted(line for line in out.splitlines() if line)


def write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point the server at a fresh workspace root for every test."""
    base = tmp_path / "repos"
    base.mkdir()
    monkeypatch.setattr(settings, "repo_base_path", str(base))
    monkeypatch.setattr(settings, "github_token", "test-token")
    monkeypatch.setattr(settings, "github_user", "x-access-token")
    monkeypatch.setattr(settings, "git_credential_url", "https://github.com/")
    monkeypatch.setattr(settings, "allow_local_remotes", True)
    monkeypatch.setattr(settings, "git_timeout_seconds", 30.0)
    # Isolate from signing setups on the host; the server appends its own entries
    monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
    monkeypatch.setenv("GIT_CONFIG_KEY_0", "commit.gpgsign")
    monkeypatch.setenv("GIT_CONFIG_VALUE_0", "false")
    workspace_locks.reset()
    yield settings
    workspace_locks.reset()


@pytest.fixture
def remote(tmp_path):
    """A bare remote named demo.git with branches main and develop."""
    bare = tmp_path / "remote" / "demo.git"
    bare.mkdir(parents=True)
    git("init", "--bare", cwd=bare)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=bare)

    seed = tmp_path / "seed"
    seed.mkdir()
    git("init", cwd=seed)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=seed)
    git("config", "commit.gpgsign", "false", cwd=seed)
    write(seed / "README.md", "# Demo\n")
    write(seed / "docs" / "guide.md", "guide\n")
    git("add", "-A", cwd=seed)
    git("commit", "-m", "Initial commit", cwd=seed)
    git("remote", "add", "origin", str(bare), cwd=seed)
    git("push", "origin", "main", cwd=seed)
    git("push", "origin", "main:develop", cwd=seed)

    return SimpleNamespace(url=str(bare), path=bare, seed=seed)


def push_from_seed(remote, branch: str, path: str, content: str, message: str) -> None:
    """Simulate another collaborator publishing a change to `branch`."""
    seed = remote.seed
    git("fetch", "origin", cwd=seed)
    git("checkout", "-B", branch, f"origin/{branch}", cwd=seed)
    write(seed / path, content)
    git("add", "-A", cwd=seed)
    git("commit", "-m", message, cwd=seed)
    git("push", "origin", f"{branch}:{branch}", cwd=seed)


@pytest_asyncio.fixture
async def client():
    """Client talking to the ASGI app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def workspace(client, remote, test_settings):
    """The demo remote cloned through the API; yields its workspace path."""
    response = await client.post("/add-repo", json={"repoUrl": remote.url})
    assert response.json()["success"] is True
    return test_settings.base_path / "demo"
