"""
Client-side materializer for RBAC policy snapshots.

Fetches the flat snapshot exported by a policy authority and rebuilds the
in-memory graph of items, parents, rules and assignments.
"""

from rbac_client.core import BaseManager, Rule, RuleFactory, SnapshotMaterializer, WebManager
from rbac_client.client import SnapshotFetcher
from rbac_client.exceptions import RBACClientError, ReadOnlyManagerError
from rbac_client.models import Assignment, Item, ItemType, Permission, Role, Snapshot

__version__ = "0.1.0"

__all__ = [
    "BaseManager",
    "WebManager",
    "Rule",
    "RuleFactory",
    "SnapshotMaterializer",
    "SnapshotFetcher",
    "RBACClientError",
    "ReadOnlyManagerError",
    "Assignment",
    "Item",
    "ItemType",
    "Permission",
    "Role",
    "Snapshot",
]
