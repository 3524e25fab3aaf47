"""
.. include:: ../README.md
"""

__all__ = [
    "addon",
    "bundle",
    "config",
    "exceptions",
    "helm",
    "manifest",
    "rctl",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
