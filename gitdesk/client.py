"""HTTP client for the gitdesk API."""

import httpx
from typing import Optional


class GitDeskError(Exception):
    """The server reported a failed operation (`success: false`)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitDeskClient:
    """Client for communicating with the gitdesk API server.

    Every endpoint answers with a `success` flag; a false flag is raised as
    GitDeskError carrying the server's message, whatever the HTTP status.
    """

    def __init__(self, base_url: str = "http://localhost:5000", timeout: float = 300.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None

    def _handle(self, response: httpx.Response) -> dict:
        """Decode a response, raising GitDeskError for any logical failure."""
        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise GitDeskError(
                f"Unexpected response from server: {response.text[:200]}",
                response.status_code,
            )
        if not isinstance(data, dict):
            raise GitDeskError("Unexpected response from server", response.status_code)
        if response.is_error or data.get("success") is False:
            message = data.get("error") or data.get("message") or response.reason_phrase
            raise GitDeskError(message, response.status_code)
        return data

    # ── Status ──────────────────────────────────────────────────────────

    def get_status(self) -> dict:
        """Get server health status."""
        return self._handle(self.client.get("/status"))

    # ── Repositories ────────────────────────────────────────────────────

    def add_repo(self, repo_url: str) -> dict:
        """Clone a repository on the server."""
        return self._handle(self.client.post("/add-repo", json={"repoUrl": repo_url}))

    def list_repos(self) -> list[str]:
        """List the repositories cloned on the server."""
        return self._handle(self.client.get("/list-repos"))["repos"]

    # ── Branches ────────────────────────────────────────────────────────

    def list_branches(self, repo_name: str) -> list[str]:
        """List local and remote branches of a repository."""
        response = self.client.get("/list-branches", params={"repoName": repo_name})
        return self._handle(response)["branches"]

    def create_branch(self, repo_name: str, branch_name: str) -> dict:
        """Create a branch and push it to the remote."""
        response = self.client.post(
            "/create-branch", json={"repoName": repo_name, "branchName": branch_name}
        )
        return self._handle(response)

    def switch_branch(self, repo_name: str, branch_name: str) -> dict:
        """Check out a branch in the server's workspace."""
        response = self.client.post(
            "/switch-branch", json={"repoName": repo_name, "branchName": branch_name}
        )
        return self._handle(response)

    # ── Files ───────────────────────────────────────────────────────────

    def list_files(self, repo_name: str, branch_name: str) -> list[dict]:
        """File tree of a branch."""
        response = self.client.get(
            "/repo-files", params={"repoName": repo_name, "branchName": branch_name}
        )
        return self._handle(response)["files"]

    def read_file(self, repo_name: str, branch_name: str, file_path: str) -> str:
        """Content of one file on a branch."""
        response = self.client.get(
            "/file-content",
            params={"repoName": repo_name, "branchName": branch_name, "filePath": file_path},
        )
        return self._handle(response)["content"]

    def save_file(self, repo_name: str, file_path: str, content: str) -> dict:
        """Write a file on the workspace's current branch."""
        response = self.client.post(
            "/save-file",
            json={"repoName": repo_name, "filePath": file_path, "content": content},
        )
        return self._handle(response)

    # ── Publish ─────────────────────────────────────────────────────────

    def commit_push(self, repo_name: str, branch_name: str, message: str) -> dict:
        """Commit pending edits onto a branch and push it."""
        response = self.client.post(
            "/commit-push",
            json={
                "repoName": repo_name,
                "branchName": branch_name,
                "commitMessage": message,
            },
        )
        return self._handle(response)
