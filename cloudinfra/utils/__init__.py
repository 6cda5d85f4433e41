"""Utility module for common helper functions.

Note: Import directly from submodules when needed:
  - from cloudinfra.utils.logging_setup import ...
  - from cloudinfra.utils.files import ...
"""

# Only export module names, not individual functions
__all__ = [
    "files",
    "logging_setup",
]
