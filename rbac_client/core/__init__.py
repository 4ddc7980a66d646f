"""
RBAC core package.

This package contains the rule registry, the snapshot materializer and
the manager facade built on top of them.
"""

from .rules import Rule, RuleFactory, parse_rule_data
from .materializer import RBACState, SnapshotMaterializer
from .manager import BaseManager, WebManager

__all__ = [
    "Rule",
    "RuleFactory",
    "parse_rule_data",
    "RBACState",
    "SnapshotMaterializer",
    "BaseManager",
    "WebManager",
]
