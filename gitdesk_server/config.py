"""Server configuration, read from environment variables (and a local .env)."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Centralised configuration read from env vars at import time."""

    # Credential for the remote git host. Required.
    github_token: str = field(default_factory=lambda: os.getenv("GITHUB_TOKEN", ""))

    # Username sent alongside the token (GitHub accepts any non-empty value).
    github_user: str = field(
        default_factory=lambda: os.getenv("GITHUB_USER", "x-access-token")
    )

    # The token is only sent to remotes under this URL prefix.
    git_credential_url: str = field(
        default_factory=lambda: os.getenv("GIT_CREDENTIAL_URL", "https://github.com/")
    )

    # Every workspace is a direct child of this directory.
    repo_base_path: str = field(
        default_factory=lambda: os.getenv("REPO_BASE_PATH", "./repos")
    )

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "5000")))

    # Upper bound for a single git invocation (clone, fetch, pull, push, ...)
    git_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("GIT_TIMEOUT_SECONDS", "120"))
    )

    # Local paths and file:// URLs let a client read any repository on the
    # server's disk, so they are off unless explicitly enabled.
    allow_local_remotes: bool = field(
        default_factory=lambda: _env_bool("ALLOW_LOCAL_REMOTES")
    )

    commit_author_name: str = field(
        default_factory=lambda: os.getenv("COMMIT_AUTHOR_NAME", "gitdesk")
    )
    commit_author_email: str = field(
        default_factory=lambda: os.getenv("COMMIT_AUTHOR_EMAIL", "gitdesk@localhost")
    )

    # "*" or a comma-separated list of origins
    cors_origins: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))

    @property
    def base_path(self) -> Path:
        return Path(self.repo_base_path).resolve()

    def validate(self) -> None:
        """Raise if the server cannot run with the current settings."""
        if not self.github_token:
            raise RuntimeError(
                "GITHUB_TOKEN is missing! Add it to the environment or the .env file."
            )
        if self.git_timeout_seconds <= 0:
            raise RuntimeError("GIT_TIMEOUT_SECONDS must be a positive number")


# Singleton, imported everywhere.
settings = Settings()
