"""Single-endpoint chat relay in front of a hosted chat-completion API."""

__version__ = "0.1.0"
