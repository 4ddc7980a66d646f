"""
Policy authority client package.

This package contains the HTTP client that retrieves RBAC snapshots.
"""

from .http_client import SnapshotFetcher, AuthorizationProvider

__all__ = [
    "SnapshotFetcher",
    "AuthorizationProvider",
]
