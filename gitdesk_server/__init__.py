"""gitdesk server: clone, browse, edit and push git repositories over HTTP."""

__version__ = "0.1.0"
