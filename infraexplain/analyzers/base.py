"""
Base classes for InfraExplain resource rules.

A rule is bound to a set of resource kinds (or to none, which places it in
the default bucket) and inspects one ResourceDeclaration at a time.
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, List, Optional

from ..models import Finding, FindingCategory, ResourceDeclaration

logger = logging.getLogger(__name__)


class ResourceRule(ABC):
    """
    Abstract base class for all resource rules.

    Subclasses must implement:
    - rule_id: Unique identifier for the rule
    - kinds: Resource kinds the rule applies to (empty for the default bucket)
    - check: Inspect a resource and return a finding or None
    """

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier."""
        pass

    @property
    @abstractmethod
    def kinds(self) -> FrozenSet[str]:
        """Resource kinds this rule applies to."""
        pass

    @property
    def category(self) -> FindingCategory:
        return FindingCategory.SECURITY

    @property
    def is_default(self) -> bool:
        """Default rules only run for kinds no specific rule covers."""
        return not self.kinds

    def applies_to(self, kind: str) -> bool:
        return kind in self.kinds

    @abstractmethod
    def check(self, resource: ResourceDeclaration) -> Optional[Finding]:
        """
        Inspect a single resource.

        Args:
            resource: The resource to check

        Returns:
            A Finding when the rule's condition holds, otherwise None
        """
        pass

    def safe_check(self, resource: ResourceDeclaration) -> Optional[Finding]:
        """Run check() and turn any exception into "no finding"."""
        try:
            return self.check(resource)
        except Exception as e:
            logger.warning(f"Rule {self.rule_id} failed on {resource.address}: {e}")
            return None

    def _create_finding(self, resource: ResourceDeclaration, message: str) -> Finding:
        return Finding(
            category=self.category,
            message=message,
            rule_id=self.rule_id,
            resource_name=resource.name,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_id})"


class PropertyContainsRule(ResourceRule, ABC):
    """
    Fires when any of a set of properties contains a marker substring.

    Subclasses declare the properties to inspect, the marker and the
    message template; ``{name}`` and ``{kind}`` are substituted. Override
    describe() when the wording depends on more than that.
    """

    properties: Iterable[str] = ()
    marker: str = ""
    message_template: str = ""

    def check(self, resource: ResourceDeclaration) -> Optional[Finding]:
        for key in self.properties:
            value = resource.properties.get(key)
            if value is not None and self.marker in value:
                return self._create_finding(resource, self.describe(resource))
        return None

    def describe(self, resource: ResourceDeclaration) -> str:
        return self.message_template.format(name=resource.name, kind=resource.kind)


def covered_kinds(rules: Iterable[ResourceRule]) -> FrozenSet[str]:
    """All kinds claimed by at least one specific rule"""
    kinds: List[str] = []
    for rule in rules:
        kinds.extend(rule.kinds)
    return frozenset(kinds)
