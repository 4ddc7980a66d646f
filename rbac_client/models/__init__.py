"""
RBAC data models.

This package contains the in-memory item models and the wire models of
the snapshot served by the policy authority.
"""

from .items import Assignment, Item, ItemType, Permission, Role, create_item
from .snapshot import ItemDescriptor, RuleData, RuleDescriptor, Snapshot

__all__ = [
    "Assignment",
    "Item",
    "ItemType",
    "Permission",
    "Role",
    "create_item",
    "ItemDescriptor",
    "RuleData",
    "RuleDescriptor",
    "Snapshot",
]
