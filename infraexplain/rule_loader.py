"""
Rule loader - parses YAML rule files into resource rules
"""

import yaml
from pathlib import Path
from typing import List, Dict, Any, FrozenSet, Optional
import logging

from .analyzers.base import ResourceRule
from .errors import RuleLoadError
from .models import Finding, FindingCategory, ResourceDeclaration

logger = logging.getLogger(__name__)


class ConfiguredRule(ResourceRule):
    """
    A rule defined in a YAML rule file.

    Conditions (all that are given must hold):
    - property + contains: the property's rendered value contains the text
    - property + missing: the property is absent
    - empty: the resource has no properties
    """

    def __init__(
        self,
        rule_id: str,
        message: str,
        kinds: FrozenSet[str] = frozenset(),
        category: FindingCategory = FindingCategory.SECURITY,
        property_name: Optional[str] = None,
        contains: Optional[str] = None,
        missing: bool = False,
        empty: bool = False,
        enabled: bool = True,
    ):
        self._rule_id = rule_id
        self._kinds = kinds
        self._category = category
        self.message = message
        self.property_name = property_name
        self.contains = contains
        self.missing = missing
        self.empty = empty
        self.enabled = enabled

    @property
    def rule_id(self) -> str:
        return self._rule_id

    @property
    def kinds(self) -> FrozenSet[str]:
        return self._kinds

    @property
    def category(self) -> FindingCategory:
        return self._category

    def check(self, resource: ResourceDeclaration) -> Optional[Finding]:
        if self.empty and resource.properties:
            return None

        if self.property_name:
            value = resource.properties.get(self.property_name)
            if self.missing and value is not None:
                return None
            if self.contains is not None and (value is None or self.contains not in value):
                return None

        return self._create_finding(
            resource,
            self.message.replace("{name}", resource.name).replace("{kind}", resource.kind),
        )


class RuleLoader:
    """Loads and parses resource rules from YAML files"""

    def __init__(self, rules_dir: Optional[Path] = None):
        self.rules_dir = rules_dir
        self.rules: List[ConfiguredRule] = []
        self._loaded_files: List[str] = []

    def load_all_rules(self) -> List[ConfiguredRule]:
        """Load all rules from the rules directory"""
        self.rules = []
        self._loaded_files = []

        if self.rules_dir is None:
            return self.rules

        if not self.rules_dir.exists():
            logger.warning(f"Rules directory not found: {self.rules_dir}")
            return self.rules

        # Find all YAML files recursively
        yaml_files = sorted(self.rules_dir.rglob("*.yaml")) + sorted(self.rules_dir.rglob("*.yml"))

        for yaml_file in yaml_files:
            try:
                rules = self.load_rules_from_file(yaml_file)
                self.rules.extend(rules)
                self._loaded_files.append(str(yaml_file))
                logger.info(f"Loaded {len(rules)} rules from {yaml_file.name}")
            except RuleLoadError as e:
                logger.error(f"Failed to load rules from {yaml_file}: {e}")

        logger.info(f"Total rules loaded: {len(self.rules)}")
        return self.rules

    def load_rules_from_file(self, filepath: Path, strict: bool = False) -> List[ConfiguredRule]:
        """
        Load rules from a single YAML file.

        Unreadable files raise RuleLoadError. Individual invalid rules are
        logged and skipped, or raise RuleLoadError when strict is set.
        """
        rules = []

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise RuleLoadError(str(e), source=str(filepath)) from e

        if not data:
            return rules
        if not isinstance(data, dict):
            raise RuleLoadError("Top level must be a mapping with a 'rules' list", source=str(filepath))

        for raw_rule in data.get('rules') or []:
            try:
                rule = self._parse_rule(raw_rule)
                if rule and rule.enabled:
                    rules.append(rule)
            except RuleLoadError as e:
                if strict:
                    raise
                logger.error(f"Failed to parse rule in {filepath.name}: {e}")

        return rules

    def _parse_rule(self, raw: Dict[str, Any]) -> Optional[ConfiguredRule]:
        """Parse a single rule from raw YAML data"""
        if not isinstance(raw, dict):
            raise RuleLoadError(f"Rule entry must be a mapping, got {type(raw).__name__}")

        rule_id = raw.get('id')
        if not rule_id or not raw.get('message'):
            raise RuleLoadError(f"Rule {rule_id or 'unknown'} needs both 'id' and 'message'")

        category_str = str(raw.get('category', 'security')).lower()
        try:
            category = FindingCategory(category_str)
        except ValueError:
            raise RuleLoadError(f"Rule {rule_id} has unknown category {category_str!r}")

        kinds = raw.get('kinds') or []
        if isinstance(kinds, str):
            kinds = [kinds]

        property_name = raw.get('property')
        contains = raw.get('contains')
        missing = bool(raw.get('missing', False))
        empty = bool(raw.get('empty', False))

        if (contains is not None or missing) and not property_name:
            raise RuleLoadError(f"Rule {rule_id} uses 'contains'/'missing' without 'property'")
        if not (contains is not None or missing or empty):
            raise RuleLoadError(f"Rule {rule_id} has no condition")

        return ConfiguredRule(
            rule_id=str(rule_id),
            message=str(raw['message']),
            kinds=frozenset(str(k) for k in kinds),
            category=category,
            property_name=property_name,
            contains=None if contains is None else str(contains),
            missing=missing,
            empty=empty,
            enabled=raw.get('enabled', True),
        )

    def get_rules_by_category(self, category: FindingCategory) -> List[ConfiguredRule]:
        """Get rules of a specific category"""
        return [rule for rule in self.rules if rule.category == category]

    def get_rule_by_id(self, rule_id: str) -> Optional[ConfiguredRule]:
        """Get a specific rule by ID"""
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    @property
    def stats(self) -> Dict[str, Any]:
        """Get statistics about loaded rules"""
        return {
            'total_rules': len(self.rules),
            'files_loaded': len(self._loaded_files),
            'by_category': {
                c.value: len(self.get_rules_by_category(c)) for c in FindingCategory
            },
        }
