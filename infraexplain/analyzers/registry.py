"""
Rule Registry for InfraExplain.

Provides registration and lookup of resource rules:
- Decorator-based registration of rule classes
- Kind-based lookup with default-bucket fallback
- Merging of built-in and externally loaded rule sets
"""

from typing import Dict, Iterable, List, Optional, Type
import logging

from .base import ResourceRule, covered_kinds

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    An ordered collection of resource rules.

    Rules fire in registration order. Specific rules are looked up by
    resource kind; default rules (no kinds) apply only to kinds that no
    specific rule in the same registry covers.
    """

    def __init__(self, rules: Optional[Iterable[ResourceRule]] = None):
        self._rules: List[ResourceRule] = []
        self._by_id: Dict[str, ResourceRule] = {}
        for rule in rules or ():
            self.add(rule)

    def register(self, rule_class: Type[ResourceRule]) -> Type[ResourceRule]:
        """
        Decorator to register a rule class.

        Usage:
            @registry.register
            class OpenIngressRule(PropertyContainsRule):
                ...
        """
        self.add(rule_class())
        return rule_class

    def add(self, rule: ResourceRule) -> None:
        if rule.rule_id in self._by_id:
            logger.warning(f"Replacing rule with duplicate id {rule.rule_id}")
            self._rules.remove(self._by_id[rule.rule_id])
        self._rules.append(rule)
        self._by_id[rule.rule_id] = rule
        logger.debug(f"Registered rule {rule.rule_id} for {sorted(rule.kinds) or 'default'}")

    def extend(self, rules: Iterable[ResourceRule]) -> None:
        for rule in rules:
            self.add(rule)

    def copy(self) -> "RuleRegistry":
        return RuleRegistry(self._rules)

    @property
    def rules(self) -> List[ResourceRule]:
        return list(self._rules)

    @property
    def specific_rules(self) -> List[ResourceRule]:
        return [r for r in self._rules if not r.is_default]

    @property
    def default_rules(self) -> List[ResourceRule]:
        return [r for r in self._rules if r.is_default]

    def get_rule(self, rule_id: str) -> Optional[ResourceRule]:
        return self._by_id.get(rule_id)

    def rules_for_kind(self, kind: str) -> List[ResourceRule]:
        """Rules that evaluate for a resource of the given kind"""
        specific = [r for r in self.specific_rules if r.applies_to(kind)]
        if specific:
            return specific
        return self.default_rules

    def is_covered(self, kind: str) -> bool:
        return kind in covered_kinds(self.specific_rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._by_id
