"""
Rule objects and the rule type registry.

Rules are named predicates attached to items. The snapshot declares a
type discriminator for every rule; the hosting application registers a
rule class per discriminator and anything unregistered falls back to the
generic ``Rule``.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from rbac_client.config.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Rule:
    """Generic rule carrying its deserialized configuration as-is."""
    name: str
    data: Any = field(default_factory=dict)

    type_name = "Rule"

    def to_dict(self) -> Dict[str, Any]:
        """Render the rule for logging and inspection."""
        return {
            "name": self.name,
            "typeName": self.type_name,
            "data": self.data,
        }


def parse_rule_data(raw: str) -> Any:
    """
    Deserialize the JSON-encoded rule configuration.

    Raises:
        json.JSONDecodeError: If ``raw`` is not well-formed JSON
    """
    return json.loads(raw)


class RuleFactory:
    """Registry of rule type discriminators to rule classes."""

    def __init__(self, rule_classes: Optional[Dict[str, Type[Rule]]] = None):
        self._registry: Dict[str, Type[Rule]] = {}
        for type_name, rule_class in (rule_classes or {}).items():
            self.register(type_name, rule_class)

    def register(self, type_name: str, rule_class: Type[Rule]) -> None:
        """Register ``rule_class`` for ``type_name``, replacing any previous class."""
        if not isinstance(rule_class, type) or not issubclass(rule_class, Rule):
            raise TypeError(f"Rule class for '{type_name}' must be a Rule subclass")
        self._registry[type_name] = rule_class
        logger.debug(f"Registered rule type: {type_name}")

    def unregister(self, type_name: str) -> bool:
        """Remove a registered rule type."""
        if type_name in self._registry:
            del self._registry[type_name]
            return True
        return False

    def resolve(self, type_name: str) -> Type[Rule]:
        """Return the class registered for ``type_name``, or the generic ``Rule``."""
        rule_class = self._registry.get(type_name)
        if rule_class is None:
            logger.debug(f"No rule class registered for '{type_name}', using generic rule")
            return Rule
        return rule_class

    def create(self, name: str, type_name: str, data: Any) -> Rule:
        """Construct a rule of the class resolved for ``type_name``."""
        rule_class = self.resolve(type_name)
        return rule_class(name, data)

    def registered_types(self) -> List[str]:
        """List registered discriminators."""
        return sorted(self._registry)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._registry
