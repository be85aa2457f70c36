"""
Built-in resource rules.

Security checks for AWS network ingress and IAM policies, plus the
default improvement hint for resources with no properties.
"""

from typing import FrozenSet, Optional

from .base import PropertyContainsRule, ResourceRule
from .registry import RuleRegistry
from ..models import Finding, FindingCategory, ResourceDeclaration

UNRESTRICTED_RANGE = "0.0.0.0/0"

builtin_rules = RuleRegistry()


@builtin_rules.register
class OpenIngressRule(PropertyContainsRule):
    """Security group allowing ingress from any address."""

    properties = ('cidr_blocks', 'cidr_block', 'cidr_ipv4')
    marker = UNRESTRICTED_RANGE
    message_template = "Security group '{name}' allows 0.0.0.0/0 ingress"

    @property
    def rule_id(self) -> str:
        return "OPEN-INGRESS"

    @property
    def kinds(self) -> FrozenSet[str]:
        return frozenset({
            'aws_security_group',
            'aws_security_group_rule',
            'aws_vpc_security_group_ingress_rule',
        })


@builtin_rules.register
class WildcardPolicyRule(PropertyContainsRule):
    """IAM policy document granting '*'."""

    properties = ('assume_role_policy', 'policy')
    marker = "*"
    message_template = "{label} '{name}' grants '*' permissions"

    labels = {
        'aws_iam_role': "IAM role",
        'aws_iam_policy': "IAM policy",
        'aws_iam_role_policy': "IAM role policy",
    }

    @property
    def rule_id(self) -> str:
        return "WILDCARD-POLICY"

    @property
    def kinds(self) -> FrozenSet[str]:
        return frozenset(self.labels)

    def describe(self, resource: ResourceDeclaration) -> str:
        label = self.labels.get(resource.kind, resource.kind)
        return self.message_template.format(label=label, name=resource.name)


@builtin_rules.register
class EmptyPropertiesRule(ResourceRule):
    """Resource declared without any attributes."""

    @property
    def rule_id(self) -> str:
        return "EMPTY-PROPERTIES"

    @property
    def kinds(self) -> FrozenSet[str]:
        return frozenset()

    @property
    def category(self) -> FindingCategory:
        return FindingCategory.IMPROVEMENT

    def check(self, resource: ResourceDeclaration) -> Optional[Finding]:
        if resource.properties:
            return None
        return self._create_finding(
            resource, f"Resource '{resource.name}' has no properties defined"
        )
