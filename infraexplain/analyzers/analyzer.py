"""
Configuration analyzer.

Runs the rule table over a sequence of resources and returns the findings
in resource order, then rule order.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .base import ResourceRule
from .builtin import builtin_rules
from .registry import RuleRegistry
from ..models import ConfigurationDocument, Finding, ResourceDeclaration

logger = logging.getLogger(__name__)


class ConfigAnalyzer:
    """
    Produces advisory findings for parsed resources.

    The analyzer holds only its rule set; each call works on its own
    inputs, so repeated calls on the same resources return equal findings.
    """

    def __init__(self, rules: Optional[RuleRegistry] = None,
                 extra_rules: Optional[Iterable[ResourceRule]] = None):
        self.registry = (rules if rules is not None else builtin_rules).copy()
        if extra_rules:
            self.registry.extend(extra_rules)

    @property
    def rules_applied(self) -> int:
        return len(self.registry)

    def analyze(self, resources: Sequence[ResourceDeclaration]) -> List[Finding]:
        """
        Evaluate every applicable rule against every resource.

        Never raises; a rule that fails is logged and treated as not firing.
        """
        findings: List[Finding] = []
        for resource in resources:
            for rule in self.registry.rules_for_kind(resource.kind):
                finding = rule.safe_check(resource)
                if finding is not None:
                    findings.append(finding)

        logger.debug(f"Analyzed {len(resources)} resources, {len(findings)} findings")
        return findings

    def analyze_document(self, document: ConfigurationDocument) -> ConfigurationDocument:
        """Append findings for the document's resources and return it"""
        document.findings.extend(self.analyze(document.resources))
        return document


def analyze(resources: Sequence[ResourceDeclaration]) -> List[Finding]:
    """Analyze resources with the built-in rule set"""
    return ConfigAnalyzer().analyze(resources)
