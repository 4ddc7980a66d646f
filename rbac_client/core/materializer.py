"""
Snapshot materialization.

Turns the flat snapshot document into the cross-referenced structures the
manager holds:

- items: item name -> Item
- parents: child name -> (parent name -> parent Item), sharing Item instances
  with ``items``
- rules: rule name -> Rule, constructed through the RuleFactory
- assignments: username -> (item name -> Assignment)

All four are built into a fresh ``RBACState``; nothing is written to the
caller's state, so a failure part-way leaves the previous state intact.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from rbac_client.config.logging import StructuredLogger
from rbac_client.core.rules import Rule, RuleFactory, parse_rule_data
from rbac_client.models.items import Assignment, Item, create_item
from rbac_client.models.snapshot import Snapshot

materializer_logger = StructuredLogger(__name__)

ItemMap = Dict[str, Item]
ParentMap = Dict[str, Dict[str, Item]]
RuleMap = Dict[str, Rule]
AssignmentMap = Dict[str, Dict[str, Assignment]]


@dataclass
class RBACState:
    """The four materialized RBAC structures."""
    items: ItemMap = field(default_factory=dict)
    parents: ParentMap = field(default_factory=dict)
    rules: RuleMap = field(default_factory=dict)
    assignments: AssignmentMap = field(default_factory=dict)


class SnapshotMaterializer:
    """Builds an ``RBACState`` from a ``Snapshot``."""

    def __init__(self, rule_factory: Optional[RuleFactory] = None):
        self.rule_factory = rule_factory or RuleFactory()

    def materialize(self, snapshot: Snapshot) -> RBACState:
        """
        Materialize a snapshot.

        Args:
            snapshot: Parsed snapshot document

        Returns:
            A new state holding items, parents, rules and assignments

        Raises:
            json.JSONDecodeError: If a rule's embedded configuration is malformed
        """
        items = self.build_items(snapshot)
        state = RBACState(
            items=items,
            parents=self.build_parents(snapshot, items),
            rules=self.build_rules(snapshot),
            assignments=self.build_assignments(snapshot)
        )

        materializer_logger.log_materialization(
            items=len(state.items),
            parents=len(state.parents),
            rules=len(state.rules),
            assignments=len(state.assignments)
        )
        return state

    def build_items(self, snapshot: Snapshot) -> ItemMap:
        """Construct one Permission or Role per item descriptor."""
        items: ItemMap = {}
        for name, descriptor in snapshot.items.items():
            items[name] = create_item(
                descriptor.type,
                name=name,
                description=descriptor.description,
                rule_name=descriptor.rule_name
            )
        return items

    def build_parents(self, snapshot: Snapshot, items: ItemMap) -> ParentMap:
        """
        Invert the declared children lists into a parents index.

        Edges pointing at children missing from ``items`` are dropped.
        """
        parents: ParentMap = {}
        for name, descriptor in snapshot.items.items():
            if not descriptor.children:
                continue

            for child_name in descriptor.children:
                if child_name not in items:
                    materializer_logger.debug(
                        "Dropping edge to unknown child",
                        parent=name,
                        child=child_name
                    )
                    continue

                parent = items.get(name)
                if parent is None:
                    continue

                parents.setdefault(child_name, {})[name] = parent
        return parents

    def build_rules(self, snapshot: Snapshot) -> RuleMap:
        """Deserialize each rule's configuration and construct it via the factory."""
        rules: RuleMap = {}
        for name, descriptor in snapshot.rules.items():
            data = parse_rule_data(descriptor.data.rule_data)
            rules[name] = self.rule_factory.create(name, descriptor.data.type_name, data)
        return rules

    def build_assignments(self, snapshot: Snapshot) -> AssignmentMap:
        """Group assignments per user; a repeated item name replaces the earlier one."""
        assignments: AssignmentMap = {}
        for username, item_names in snapshot.assignments.items():
            for item_name in item_names:
                assignments.setdefault(username, {})[item_name] = Assignment(username, item_name)
        return assignments
