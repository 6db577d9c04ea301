"""Tests for /commit-push."""
import pytest
from httpx import AsyncClient

from tests.server.conftest import git, push_from_seed, remote_file, requires_git


async def _save(client: AsyncClient, path: str, content: str):
    response = await client.post(
        "/save-file", json={"repoName": "demo", "filePath": path, "content": content}
    )
    assert response.status_code == 200
    return response.json()


async def _publish(client: AsyncClient, branch: str, message: str = "Update"):
    return await client.post(
        "/commit-push",
        json={"repoName": "demo", "branchName": branch, "commitMessage": message},
    )


@requires_git
@pytest.mark.asyncio
async def test_commit_push_current_branch(client: AsyncClient, remote, workspace):
    await _save(client, "README.md", "# Edited\n")
    response = await _publish(client, "main", "Edit readme")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Changes committed and pushed to 'main'!",
    }
    assert remote_file(remote.path, "main", "README.md") == "# Edited\n"
    log = git("log", "-1", "--format=%s|%an", "main", cwd=remote.path).strip()
    assert log == "Edit readme|gitdesk"


@requires_git
@pytest.mark.asyncio
async def test_commit_push_lands_on_requested_branch(client: AsyncClient, remote, workspace):
    # Edit while main is checked out, publish to develop
    saved = await _save(client, "feature.txt", "new work\n")
    assert saved["branch"] == "main"

    response = await _publish(client, "develop", "Add feature")
    assert response.status_code == 200

    assert remote_file(remote.path, "develop", "feature.txt") == "new work\n"
    assert remote_file(remote.path, "main", "feature.txt") is None
    assert git("symbolic-ref", "--short", "HEAD", cwd=workspace).strip() == "develop"


@requires_git
@pytest.mark.asyncio
async def test_commit_push_to_new_branch_after_switching_away(
    client: AsyncClient, remote, workspace
):
    response = await client.post(
        "/create-branch", json={"repoName": "demo", "branchName": "feature-x"}
    )
    assert response.json()["success"] is True
    await client.post("/switch-branch", json={"repoName": "demo", "branchName": "main"})

    await _save(client, "docs/feature.md", "x\n")
    response = await _publish(client, "feature-x", "Document feature")
    assert response.status_code == 200

    assert remote_file(remote.path, "feature-x", "docs/feature.md") == "x\n"
    assert remote_file(remote.path, "main", "docs/feature.md") is None


@requires_git
@pytest.mark.asyncio
async def test_commit_push_with_clean_tree(client: AsyncClient, remote, workspace):
    before = git("rev-parse", "main", cwd=remote.path)
    response = await _publish(client, "main")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert git("rev-parse", "main", cwd=remote.path) == before


@requires_git
@pytest.mark.asyncio
async def test_commit_push_merges_remote_changes(client: AsyncClient, remote, workspace):
    push_from_seed(remote, "main", "docs/other.md", "theirs\n", "Their change")
    await _save(client, "mine.txt", "mine\n")

    response = await _publish(client, "main", "My change")
    assert response.status_code == 200
    assert remote_file(remote.path, "main", "docs/other.md") == "theirs\n"
    assert remote_file(remote.path, "main", "mine.txt") == "mine\n"


@requires_git
@pytest.mark.asyncio
async def test_commit_push_conflict(client: AsyncClient, remote, workspace):
    push_from_seed(remote, "main", "README.md", "# Theirs\n", "Their readme")
    await _save(client, "README.md", "# Mine\n")

    response = await _publish(client, "main", "My readme")
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "PULL_CONFLICT"
    assert data["error"] == "Failed to pull latest changes. Resolve conflicts before pushing."

    # Nothing was pushed, the local commit is kept and no merge is left half-done
    assert remote_file(remote.path, "main", "README.md") == "# Theirs\n"
    assert git("log", "-1", "--format=%s", cwd=workspace).strip() == "My readme"
    assert not (workspace / ".git" / "MERGE_HEAD").exists()
    assert git("status", "--porcelain", cwd=workspace).strip() == ""


@requires_git
@pytest.mark.asyncio
async def test_read_after_publish(client: AsyncClient, workspace):
    await _save(client, "docs/guide.md", "updated guide\n")
    await _publish(client, "main", "Update guide")
    response = await client.get(
        "/file-content",
        params={"repoName": "demo", "branchName": "main", "filePath": "docs/guide.md"},
    )
    assert response.json()["content"] == "updated guide\n"


@requires_git
@pytest.mark.asyncio
async def test_commit_push_unknown_branch(client: AsyncClient, workspace):
    response = await _publish(client, "nope")
    assert response.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"branchName": "main", "commitMessage": "m"},
        {"repoName": "demo", "commitMessage": "m"},
        {"repoName": "demo", "branchName": "main"},
        {"repoName": "demo", "branchName": "main", "commitMessage": "  "},
    ],
)
async def test_commit_push_requires_parameters(client: AsyncClient, body):
    response = await client.post("/commit-push", json=body)
    assert response.status_code == 400
    assert response.json()["message"] == "Missing parameters!"


@pytest.mark.asyncio
async def test_malformed_body(client: AsyncClient):
    response = await client.post(
        "/commit-push", content="not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid request parameters!"}
