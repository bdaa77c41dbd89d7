"""
relatable.commands - CLI command implementations
"""

__all__ = [
    "export",
    "summary",
    "tags",
]
