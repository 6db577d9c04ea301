"""Shared utilities for the API routers."""

from gitdesk_server.errors import InvalidInput


def require(message: str, *values) -> None:
    """Raise InvalidInput(message) unless every value is present and non-blank."""
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInput(message)
