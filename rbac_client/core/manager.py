"""
RBAC managers.

``BaseManager`` declares the full authorization surface. ``WebManager``
backs it with a snapshot fetched from the policy authority: it answers
direct lookups over the materialized state and is read-only, so every
mutation raises ``ReadOnlyManagerError``. Hierarchy traversal queries are
left to managers with a real decision engine.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, Union

import httpx

from rbac_client.client.http_client import AuthorizationProvider, SnapshotFetcher
from rbac_client.config import ClientConfig, get_logger
from rbac_client.core.materializer import RBACState, SnapshotMaterializer
from rbac_client.core.rules import Rule, RuleFactory
from rbac_client.exceptions import ReadOnlyManagerError
from rbac_client.models.items import Assignment, Item, ItemType, Permission, Role
from rbac_client.models.snapshot import Snapshot

logger = get_logger(__name__)


class BaseManager(ABC):
    """Authorization manager interface."""

    def __init__(self, rule_classes: Optional[Dict[str, Type[Rule]]] = None):
        self.rule_factory = RuleFactory(rule_classes)
        self.items: Dict[str, Item] = {}
        self.parents: Dict[str, Dict[str, Item]] = {}
        self.rules: Dict[str, Rule] = {}

    @abstractmethod
    async def load(self) -> None:
        """Load the authorization data."""

    # Queries

    @abstractmethod
    async def get_item(self, name: str) -> Optional[Item]:
        pass

    @abstractmethod
    async def get_items(self, item_type: ItemType) -> Dict[str, Item]:
        pass

    @abstractmethod
    async def get_rule(self, name: str) -> Optional[Rule]:
        pass

    @abstractmethod
    async def get_rules(self) -> Dict[str, Rule]:
        pass

    @abstractmethod
    async def get_children(self, name: str) -> Dict[str, Item]:
        pass

    @abstractmethod
    async def has_child(self, parent: Item, child: Item) -> bool:
        pass

    @abstractmethod
    async def get_assignment(self, item_name: str, username: str) -> Optional[Assignment]:
        pass

    @abstractmethod
    async def get_assignments(self, username: str) -> Dict[str, Assignment]:
        pass

    @abstractmethod
    async def get_usernames_by_role(self, role_name: str) -> List[str]:
        pass

    @abstractmethod
    async def get_roles_by_user(self, username: str) -> Dict[str, Role]:
        pass

    @abstractmethod
    async def get_child_roles(self, role_name: str) -> Dict[str, Role]:
        pass

    @abstractmethod
    async def get_permissions_by_role(self, role_name: str) -> Dict[str, Permission]:
        pass

    @abstractmethod
    async def get_permissions_by_user(self, username: str) -> Dict[str, Permission]:
        pass

    @abstractmethod
    async def can_add_child(self, parent: Item, child: Item) -> bool:
        pass

    # Mutations

    @abstractmethod
    async def add_item(self, item: Item) -> bool:
        pass

    @abstractmethod
    async def update_item(self, name: str, item: Item) -> bool:
        pass

    @abstractmethod
    async def remove_item(self, item: Item) -> bool:
        pass

    @abstractmethod
    async def add_rule(self, rule: Rule) -> bool:
        pass

    @abstractmethod
    async def update_rule(self, name: str, rule: Rule) -> bool:
        pass

    @abstractmethod
    async def remove_rule(self, rule: Rule) -> bool:
        pass

    @abstractmethod
    async def add_child(self, parent: Item, child: Item) -> bool:
        pass

    @abstractmethod
    async def remove_child(self, parent: Item, child: Item) -> bool:
        pass

    @abstractmethod
    async def remove_children(self, parent: Item) -> bool:
        pass

    @abstractmethod
    async def assign(self, item: Union[Role, Permission], username: str) -> Assignment:
        pass

    @abstractmethod
    async def revoke(self, item: Union[Role, Permission], username: str) -> bool:
        pass

    @abstractmethod
    async def revoke_all(self, username: str) -> bool:
        pass

    @abstractmethod
    async def remove_all(self) -> None:
        pass

    @abstractmethod
    async def remove_all_permissions(self) -> None:
        pass

    @abstractmethod
    async def remove_all_roles(self) -> None:
        pass

    @abstractmethod
    async def remove_all_rules(self) -> None:
        pass

    @abstractmethod
    async def remove_all_assignments(self) -> None:
        pass


class WebManager(BaseManager):
    """Manager materialized from the policy authority's RBAC snapshot."""

    def __init__(
        self,
        base_url: str = "",
        authorization: Optional[AuthorizationProvider] = None,
        rule_classes: Optional[Dict[str, Type[Rule]]] = None,
        snapshot_path: str = "/rbac",
        timeout: Optional[Dict[str, float]] = None,
        headers: Optional[Dict[str, str]] = None,
        fetcher: Optional[SnapshotFetcher] = None
    ):
        """
        Initialize the manager.

        Args:
            base_url: Base URL of the policy authority
            authorization: Zero-argument callable returning a bearer token or None
            rule_classes: Rule classes keyed by rule type discriminator
            snapshot_path: Path of the snapshot endpoint
            timeout: Timeout configuration in seconds
            headers: Additional headers to send with every request
            fetcher: Preconfigured fetcher; the other transport arguments are ignored
        """
        super().__init__(rule_classes)
        self.assignments: Dict[str, Dict[str, Assignment]] = {}
        self.materializer = SnapshotMaterializer(self.rule_factory)
        self.fetcher = fetcher or SnapshotFetcher(
            base_url=base_url,
            snapshot_path=snapshot_path,
            authorization=authorization,
            timeout=timeout,
            headers=headers
        )
        self.last_loaded_at: Optional[datetime] = None

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        authorization: Optional[AuthorizationProvider] = None,
        rule_classes: Optional[Dict[str, Type[Rule]]] = None,
        client: Optional[httpx.AsyncClient] = None
    ) -> "WebManager":
        """Create a manager from client configuration."""
        fetcher = SnapshotFetcher.from_config(config.authority, authorization=authorization, client=client)
        return cls(rule_classes=rule_classes, fetcher=fetcher)

    @property
    def is_loaded(self) -> bool:
        """Whether at least one load has completed."""
        return self.last_loaded_at is not None

    async def load(
        self,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Fetch the snapshot and replace the held state.

        A 404 from the authority loads an empty snapshot. Any other failure
        propagates and leaves the previous state untouched.
        """
        snapshot = await self.fetcher.fetch(params=params, headers=headers)
        if snapshot is None:
            logger.warning("Policy authority has no RBAC data, loading empty snapshot")
            snapshot = Snapshot.empty()

        try:
            state = self.materializer.materialize(snapshot)
        except ValueError as e:
            logger.error(f"Failed to materialize RBAC snapshot: {e}")
            raise

        self._apply_state(state)

    def _apply_state(self, state: RBACState) -> None:
        self.items = state.items
        self.parents = state.parents
        self.rules = state.rules
        self.assignments = state.assignments
        self.last_loaded_at = datetime.now(timezone.utc)
        logger.info(
            f"Loaded RBAC snapshot: {len(self.items)} items, {len(self.rules)} rules, "
            f"{len(self.assignments)} users"
        )

    async def close(self) -> None:
        """Close the underlying fetcher."""
        await self.fetcher.aclose()

    # Lookups

    async def get_item(self, name: str) -> Optional[Item]:
        return self.items.get(name)

    async def get_items(self, item_type: ItemType) -> Dict[str, Item]:
        item_type = ItemType(item_type)
        return {name: item for name, item in self.items.items() if item.type == item_type}

    async def get_rule(self, name: str) -> Optional[Rule]:
        return self.rules.get(name)

    async def get_rules(self) -> Dict[str, Rule]:
        return dict(self.rules)

    async def get_parents(self, name: str) -> Dict[str, Item]:
        """Direct parents of an item."""
        return dict(self.parents.get(name, {}))

    async def get_children(self, name: str) -> Dict[str, Item]:
        """Direct children of an item, read off the parents index."""
        return {
            child_name: self.items[child_name]
            for child_name, item_parents in self.parents.items()
            if name in item_parents and child_name in self.items
        }

    async def has_child(self, parent: Item, child: Item) -> bool:
        return parent.name in self.parents.get(child.name, {})

    async def get_assignment(self, item_name: str, username: str) -> Optional[Assignment]:
        return self.assignments.get(username, {}).get(item_name)

    async def get_assignments(self, username: str) -> Dict[str, Assignment]:
        return dict(self.assignments.get(username, {}))

    async def get_usernames_by_role(self, role_name: str) -> List[str]:
        """Users directly assigned to ``role_name``."""
        return [
            username for username, user_assignments in self.assignments.items()
            if role_name in user_assignments
        ]

    # Hierarchy traversal

    async def get_roles_by_user(self, username: str) -> Dict[str, Role]:
        raise NotImplementedError("get_roles_by_user requires hierarchy traversal")

    async def get_child_roles(self, role_name: str) -> Dict[str, Role]:
        raise NotImplementedError("get_child_roles requires hierarchy traversal")

    async def get_permissions_by_role(self, role_name: str) -> Dict[str, Permission]:
        raise NotImplementedError("get_permissions_by_role requires hierarchy traversal")

    async def get_permissions_by_user(self, username: str) -> Dict[str, Permission]:
        raise NotImplementedError("get_permissions_by_user requires hierarchy traversal")

    async def can_add_child(self, parent: Item, child: Item) -> bool:
        raise NotImplementedError("can_add_child requires hierarchy traversal")

    # Mutations

    def _read_only(self, operation: str) -> ReadOnlyManagerError:
        return ReadOnlyManagerError(f"{operation} is not supported: {type(self).__name__} is read-only")

    async def add_item(self, item: Item) -> bool:
        raise self._read_only("add_item")

    async def update_item(self, name: str, item: Item) -> bool:
        raise self._read_only("update_item")

    async def remove_item(self, item: Item) -> bool:
        raise self._read_only("remove_item")

    async def add_rule(self, rule: Rule) -> bool:
        raise self._read_only("add_rule")

    async def update_rule(self, name: str, rule: Rule) -> bool:
        raise self._read_only("update_rule")

    async def remove_rule(self, rule: Rule) -> bool:
        raise self._read_only("remove_rule")

    async def add_child(self, parent: Item, child: Item) -> bool:
        raise self._read_only("add_child")

    async def remove_child(self, parent: Item, child: Item) -> bool:
        raise self._read_only("remove_child")

    async def remove_children(self, parent: Item) -> bool:
        raise self._read_only("remove_children")

    async def assign(self, item: Union[Role, Permission], username: str) -> Assignment:
        raise self._read_only("assign")

    async def revoke(self, item: Union[Role, Permission], username: str) -> bool:
        raise self._read_only("revoke")

    async def revoke_all(self, username: str) -> bool:
        raise self._read_only("revoke_all")

    async def remove_all(self) -> None:
        raise self._read_only("remove_all")

    async def remove_all_permissions(self) -> None:
        raise self._read_only("remove_all_permissions")

    async def remove_all_roles(self) -> None:
        raise self._read_only("remove_all_roles")

    async def remove_all_rules(self) -> None:
        raise self._read_only("remove_all_rules")

    async def remove_all_assignments(self) -> None:
        raise self._read_only("remove_all_assignments")
