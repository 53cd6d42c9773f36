"""GitLab API client module.

This module provides:
- GitLabClient: python-gitlab wrapper returning validated schemas
- Client exceptions mapped from python-gitlab/requests errors
"""

from .client import GitLabClient
from .exceptions import (
    GitLabAuthenticationError,
    GitLabClientError,
    GitLabConnectionError,
    GitLabNotFoundError,
)

__all__ = [
    # Client
    "GitLabClient",
    # Exceptions
    "GitLabAuthenticationError",
    "GitLabClientError",
    "GitLabConnectionError",
    "GitLabNotFoundError",
]
