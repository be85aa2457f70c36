"""
Data models for InfraExplain.

This module defines the structures produced by the parser and analyzer:

- FindingCategory: Enum for finding classification
- Finding: An advisory message attached to a parsed document
- ResourceDeclaration: A resource block with its rendered properties
- ConfigurationDocument: Complete parse output

The document is the only thing the explanation layer is allowed to consume,
so every class here round-trips through plain dictionaries and JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping


class FindingCategory(Enum):
    SECURITY = "security"
    IMPROVEMENT = "improvement"

    @property
    def priority(self) -> int:
        priorities = {
            FindingCategory.SECURITY: 2,
            FindingCategory.IMPROVEMENT: 1,
        }
        return priorities[self]


@dataclass(frozen=True)
class Finding:
    """A security or improvement finding"""
    category: FindingCategory
    message: str
    rule_id: str = field(default="", compare=False)
    resource_name: str = field(default="", compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to dictionary"""
        return {
            'type': self.category.value,
            'message': self.message,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Finding:
        return cls(
            category=FindingCategory(data['type']),
            message=data['message'],
        )


@dataclass(frozen=True)
class ResourceDeclaration:
    """
    A resource block from the configuration text.

    ``kind`` and ``name`` are the two labels of the block; ``properties``
    maps each top-level attribute to a display string of its value.
    """
    kind: str
    name: str
    properties: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("resource name must be a non-empty string")

    @property
    def address(self) -> str:
        return f"{self.kind}.{self.name}"

    def get(self, key: str, default: str = "") -> str:
        return self.properties.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'name': self.name,
            'properties': dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResourceDeclaration:
        return cls(
            kind=data['type'],
            name=data['name'],
            properties=dict(data.get('properties') or {}),
        )


@dataclass
class ConfigurationDocument:
    """Structured result of parsing one configuration text"""
    resources: List[ResourceDeclaration] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.resources or self.variables or self.outputs)

    @property
    def summary(self) -> Dict[str, int]:
        """Get count of findings by category"""
        counts = {c.value: 0 for c in FindingCategory}
        for finding in self.findings:
            counts[finding.category.value] += 1
        return counts

    def get_findings_by_category(self, category: FindingCategory) -> List[Finding]:
        """Filter findings by category"""
        return [f for f in self.findings if f.category == category]

    def has_security_findings(self) -> bool:
        return any(f.category == FindingCategory.SECURITY for f in self.findings)

    def get_resources_by_kind(self, kind: str) -> List[ResourceDeclaration]:
        return [r for r in self.resources if r.kind == kind]

    def __iter__(self) -> Iterator[ResourceDeclaration]:
        """Iterate over resources."""
        return iter(self.resources)

    def __len__(self) -> int:
        """Number of resources."""
        return len(self.resources)

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary."""
        return {
            'resources': [r.to_dict() for r in self.resources],
            'variables': list(self.variables),
            'outputs': list(self.outputs),
            'issues': [f.to_dict() for f in self.findings],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConfigurationDocument:
        return cls(
            resources=[ResourceDeclaration.from_dict(r) for r in data.get('resources') or []],
            variables=list(data.get('variables') or []),
            outputs=list(data.get('outputs') or []),
            findings=[Finding.from_dict(f) for f in data.get('issues') or []],
        )

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> ConfigurationDocument:
        return cls.from_dict(json.loads(text))
