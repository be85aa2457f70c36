"""
InfraExplain Analyzers Package

Components:
- base: Abstract rule classes
- registry: Ordered rule collections with kind-based lookup
- builtin: The built-in security and improvement rules
- analyzer: Runs a rule set over parsed resources
"""

from .base import ResourceRule, PropertyContainsRule
from .registry import RuleRegistry
from .builtin import (
    builtin_rules,
    OpenIngressRule,
    WildcardPolicyRule,
    EmptyPropertiesRule,
    UNRESTRICTED_RANGE,
)
from .analyzer import ConfigAnalyzer, analyze

__all__ = [
    'ResourceRule',
    'PropertyContainsRule',
    'RuleRegistry',
    'builtin_rules',
    'OpenIngressRule',
    'WildcardPolicyRule',
    'EmptyPropertiesRule',
    'UNRESTRICTED_RANGE',
    'ConfigAnalyzer',
    'analyze',
]
