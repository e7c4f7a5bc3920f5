"""
Version information for the Job Board application.

This file is the single source of truth for version numbers.
The frontend health endpoint reports it.
"""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)

# Build metadata (set by CI/CD or manually)
BUILD_DATE = "2026-10-19"
GIT_COMMIT = None  # Will be set at runtime if available
