"""Validation, update builders, API payload converters and WSGI/logging middleware for a Google Tag Manager tool server."""

__version__ = "1.5.8"

__all__ = [
    "converters",
    "mcplog",
    "ratelimit",
    "tag_updates",
    "templates",
    "types",
    "updates",
    "validation",
]