"""Email validation tokens for CMS user accounts."""

__all__ = [
    "domain",
    "infrastructure",
    "ports",
    "services",
]
