"""
RBAC item models.

Items are the roles and permissions of the policy graph. They are plain
dataclasses so the same instance can be shared between the items mapping
and the parents index.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional


class ItemType(str, Enum):
    """Item type enumeration."""
    PERMISSION = "permission"
    ROLE = "role"


@dataclass
class Item:
    """Role or permission in the RBAC hierarchy."""
    name: str
    description: Optional[str] = None
    rule_name: Optional[str] = None
    type: ItemType = field(default=ItemType.ROLE, init=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Render the item in wire form (without children)."""
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "ruleName": self.rule_name,
        }


@dataclass
class Permission(Item):
    """Permission item."""
    type: ItemType = field(default=ItemType.PERMISSION, init=False)


@dataclass
class Role(Item):
    """Role item."""
    type: ItemType = field(default=ItemType.ROLE, init=False)


def create_item(
    item_type: str,
    name: str,
    description: Optional[str] = None,
    rule_name: Optional[str] = None
) -> Item:
    """Construct a Permission for the permission tag and a Role for any other tag."""
    item_class = Permission if item_type == ItemType.PERMISSION else Role
    return item_class(name=name, description=description, rule_name=rule_name)


@dataclass
class Assignment:
    """Binding of one user to one item."""
    username: str
    item_name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
