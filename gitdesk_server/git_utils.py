"""Git repository URL validation, normalization and naming utilities."""
import re
from typing import Optional
from urllib.parse import urlparse

_SSH_SCP_PATTERN = re.compile(r'^[\w\.-]+@[\w\.-]+:[\w\-\.\/~]+$')
_SHORTHAND_PATTERN = re.compile(r'^([\w\.-]+)\/([\w\-\.]+)\/([\w\-\.]+)$')
_USERINFO_PATTERN = re.compile(r'([a-z][a-z0-9+.-]*://)[^/@\s]+@', re.IGNORECASE)

REMOTE_SCHEMES = ('https', 'http', 'ssh', 'git')


def validate_git_url(url: str, allow_local: bool = False) -> tuple[bool, Optional[str]]:
    """
    Validate a Git repository URL.

    Args:
        url: URL to validate
        allow_local: Accept file:// URLs and absolute filesystem paths

    Returns:
        (is_valid, error_message)

    Supported formats:
        - https://github.com/user/repo.git (also http://, ssh://, git://)
        - git@github.com:user/repo.git
        - github.com/user/repo (auto-converted to https)
        - file:///srv/git/repo.git and /srv/git/repo.git (allow_local only)
    """
    if not url or not url.strip():
        return False, "Repository URL is required."

    url = url.strip()
    if url.startswith('-'):
        return False, "Invalid Git URL format"

    if _SSH_SCP_PATTERN.match(url):
        return True, None

    parsed = urlparse(url)
    if parsed.scheme in REMOTE_SCHEMES:
        if not parsed.netloc:
            return False, "Invalid URL format"
        if not parsed.path.strip('/'):
            return False, "URL has no repository path"
        return True, None

    if parsed.scheme == 'file' or url.startswith('/'):
        if not allow_local:
            return False, "Local repositories are not allowed on this server"
        return True, None

    if _SHORTHAND_PATTERN.match(url):
        return True, None  # Will be normalized in normalize_git_url()

    return False, "Invalid Git URL format. Supported: https://, ssh://, git@, or github.com/user/repo"


def normalize_git_url(url: str) -> str:
    """
    Normalize a Git URL to something `git clone` accepts.

    Examples:
        github.com/user/repo → https://github.com/user/repo.git
        https://github.com/user/repo → https://github.com/user/repo (unchanged)
    """
    url = url.strip()
    if _SHORTHAND_PATTERN.match(url) and not url.startswith('/'):
        if not url.endswith('.git'):
            url += '.git'
        return f'https://{url}'
    return url


def repo_name_from_url(url: str) -> str:
    """
    Derive the workspace name from a repository URL.

    The name is the final path segment with a trailing ".git" removed:
        https://github.com/user/repo.git → repo
        git@github.com:user/repo.git     → repo
        /srv/git/repo/                   → repo
    """
    path = url.strip().rstrip('/')
    # scp-like syntax separates host and path with ':'
    if _SSH_SCP_PATTERN.match(path):
        path = path.split(':', 1)[1]
    else:
        parsed = urlparse(path)
        if parsed.scheme:
            path = parsed.path.rstrip('/')

    name = re.split(r'[/\\]', path)[-1]
    if name.endswith('.git'):
        name = name[:-len('.git')]
    return name


def scrub_credentials(text: str) -> str:
    """Remove userinfo (user:token@) from any URL embedded in text."""
    return _USERINFO_PATTERN.sub(r'\1', text)
