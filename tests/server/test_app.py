"""Tests for app-level wiring: health route, CORS policy, error payloads."""
import pytest
from httpx import AsyncClient

from gitdesk_server.errors import AlreadyExists, BranchExists, InvalidPath, NotFound
from gitdesk_server.main import cors_policy


@pytest.mark.asyncio
async def test_status(client: AsyncClient, test_settings):
    (test_settings.base_path / "one").mkdir()
    response = await client.get("/status")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["repos"] == 1
    assert data["repo_base_path"] == str(test_settings.base_path)


def test_cors_policy():
    assert cors_policy("*") == (["*"], False)
    assert cors_policy("  ") == (["*"], False)
    assert cors_policy("http://a.test, https://b.test") == (
        ["http://a.test", "https://b.test"],
        True,
    )


def test_error_classes_carry_http_mapping():
    assert (BranchExists.status_code, BranchExists.payload_key) == (200, "message")
    assert issubclass(BranchExists, AlreadyExists)
    assert (InvalidPath.status_code, InvalidPath.payload_key) == (400, "error")
    assert NotFound("gone").message == "gone"
    assert (NotFound.status_code, NotFound.code) == (500, "NOT_FOUND")


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient):
    response = await client.options(
        "/list-repos",
        headers={"Origin": "http://ui.test", "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_unknown_repository_is_a_server_failure(client: AsyncClient):
    response = await client.get("/list-branches", params={"repoName": "ghost"})
    assert response.status_code == 500
    assert response.json()["code"] == "NOT_FOUND"


ENDPOINTS = [
    ("GET", "/list-branches", {}),
    ("GET", "/repo-files", {"branchName": "main"}),
    ("GET", "/file-content", {"branchName": "main", "filePath": "README.md"}),
    ("POST", "/create-branch", {"branchName": "feature"}),
    ("POST", "/switch-branch", {"branchName": "main"}),
    ("POST", "/save-file", {"filePath": "a.txt", "content": "x"}),
    ("POST", "/commit-push", {"branchName": "main", "commitMessage": "m"}),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path,params", ENDPOINTS)
@pytest.mark.parametrize("repo_name", ["../outside", "/etc", "nested/name", ".hidden"])
async def test_every_endpoint_rejects_escaping_repo_names(
    client: AsyncClient, test_settings, method, path, params, repo_name
):
    payload = {"repoName": repo_name, **params}
    if method == "GET":
        response = await client.get(path, params=payload)
    else:
        response = await client.post(path, json=payload)
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Invalid repository name!",
        "code": "INVALID_PATH",
    }
    assert list(test_settings.base_path.iterdir()) == []
