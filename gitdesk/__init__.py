"""gitdesk CLI - client for the gitdesk repository workspace API."""

__version__ = "0.1.0"
