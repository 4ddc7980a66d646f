"""
Wire models for the RBAC snapshot.

The authority exports its whole policy state as one document with three
top-level mappings: ``items``, ``rules`` and ``assignments``.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemDescriptor(BaseModel):
    """Item entry of a snapshot."""
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., description="Item variant; anything but \"permission\" is a role")
    description: Optional[str] = Field(default=None, description="Item description")
    rule_name: Optional[str] = Field(default=None, alias="ruleName", description="Name of the attached rule")
    children: Optional[List[str]] = Field(default=None, description="Names of child items")


class RuleData(BaseModel):
    """Serialized rule payload."""
    model_config = ConfigDict(populate_by_name=True)

    type_name: str = Field(..., alias="typeName", description="Rule type discriminator")
    rule_data: str = Field(..., alias="ruleData", description="JSON-encoded rule configuration")


class RuleDescriptor(BaseModel):
    """Rule entry of a snapshot."""
    data: RuleData


class Snapshot(BaseModel):
    """Point-in-time export of the full RBAC policy state."""
    items: Dict[str, ItemDescriptor] = Field(default_factory=dict)
    rules: Dict[str, RuleDescriptor] = Field(default_factory=dict)
    assignments: Dict[str, List[str]] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Snapshot":
        """Snapshot used when the authority has no data yet."""
        return cls(items={}, rules={}, assignments={})
