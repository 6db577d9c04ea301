"""Error taxonomy for workspace operations.

Services raise these; the exception handlers in ``gitdesk_server.main`` turn
them into ``{"success": false, ...}`` payloads with the class's status code.
"""


class WorkspaceError(Exception):
    """Base class for every failure a workspace operation can report."""

    code: str = "UNKNOWN"
    status_code: int = 500
    # Which key of the JSON payload carries the message
    payload_key: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(WorkspaceError):
    """A required parameter is missing or malformed."""

    code = "INVALID_INPUT"
    status_code = 400
    payload_key = "message"


class InvalidPath(WorkspaceError):
    """A repository name or file path escapes its sandbox."""

    code = "INVALID_PATH"
    status_code = 400


class AlreadyExists(WorkspaceError):
    """Idempotent conflict: reported as a logical failure, not an HTTP error."""

    code = "ALREADY_EXISTS"
    status_code = 200
    payload_key = "message"


class BranchExists(AlreadyExists):
    code = "BRANCH_EXISTS"


class NotFound(WorkspaceError):
    """A workspace, branch or file does not exist."""

    code = "NOT_FOUND"


class RepositoryNotFound(NotFound):
    pass


class BranchNotFound(NotFound):
    pass


class FileNotFound(NotFound):
    pass


class PullConflict(WorkspaceError):
    """The remote has diverged; manual resolution is required."""

    code = "PULL_CONFLICT"


class Timeout(WorkspaceError):
    code = "TIMEOUT"


class ExternalToolFailure(WorkspaceError):
    """git exited non-zero for a reason not covered by a narrower error."""

    code = "GIT_FAILURE"


class CloneFailed(ExternalToolFailure):
    code = "CLONE_FAILED"
