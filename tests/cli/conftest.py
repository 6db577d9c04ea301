"""Shared test fixtures for the gitdesk CLI tests."""

import pytest
import respx

from gitdesk.client import GitDeskClient


@pytest.fixture
def mock_api():
    """respx mock router scoped to the default base URL."""
    with respx.mock(
        base_url="http://localhost:5000", assert_all_called=False
    ) as router:
        yield router


@pytest.fixture
def client():
    """GitDeskClient instance."""
    c = GitDeskClient(base_url="http://localhost:5000")
    yield c
    c.close()


# ── Sample API response data matching actual server shapes ──────────


SAMPLE_STATUS = {
    "status": "ok",
    "version": "0.1.0",
    "repo_base_path": "/srv/repos",
    "repos": 2,
}

SAMPLE_REPOS = {"success": True, "repos": ["demo", "tools"]}

SAMPLE_BRANCHES = {"success": True, "branches": ["develop", "feature/login", "main"]}

SAMPLE_FILES = {
    "success": True,
    "files": [
        {"name": "README.md", "path": "README.md", "type": "file", "children": []},
        {
            "name": "docs",
            "path": "docs",
            "type": "folder",
            "children": [
                {"name": "guide.md", "path": "docs/guide.md", "type": "file", "children": []},
            ],
        },
    ],
}

SAMPLE_CONTENT = {"success": True, "content": "# Demo\nHello\n"}

SAMPLE_SAVED = {"success": True, "message": "File saved successfully!", "branch": "main"}

SAMPLE_NOT_FOUND = {
    "success": False,
    "error": "Repository 'ghost' not found.",
    "code": "NOT_FOUND",
}

SAMPLE_EXISTS = {
    "success": False,
    "message": "Repository already exists.",
    "code": "ALREADY_EXISTS",
}
