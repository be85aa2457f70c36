"""Shared test fixtures for InfraExplain test suite."""

import sys
import pytest
from pathlib import Path

# Ensure infraexplain is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from infraexplain.models import (
    ConfigurationDocument, Finding, FindingCategory, ResourceDeclaration
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def web_stack_text():
    """Multi-block configuration with resources, variables and outputs."""
    return (FIXTURES_DIR / "web_stack.tf").read_text()


@pytest.fixture
def web_stack_file(tmp_path):
    """Write the web stack fixture to tmp and return path."""
    target = tmp_path / "main.tf"
    target.write_text((FIXTURES_DIR / "web_stack.tf").read_text())
    return target


@pytest.fixture
def sample_resource():
    """A resource with a few rendered properties."""
    return ResourceDeclaration(
        kind="aws_instance",
        name="app",
        properties={"ami": "ami-123456", "count": "2", "monitoring": "true"},
    )


@pytest.fixture
def security_finding():
    return Finding(
        category=FindingCategory.SECURITY,
        message="Security group 'web' allows 0.0.0.0/0 ingress",
        rule_id="OPEN-INGRESS",
        resource_name="web",
    )


@pytest.fixture
def improvement_finding():
    return Finding(
        category=FindingCategory.IMPROVEMENT,
        message="Resource 'logs' has no properties defined",
        rule_id="EMPTY-PROPERTIES",
        resource_name="logs",
    )


@pytest.fixture
def sample_document(sample_resource, security_finding, improvement_finding):
    """A document with resources, variables, outputs and mixed findings."""
    return ConfigurationDocument(
        resources=[
            ResourceDeclaration(
                kind="aws_security_group",
                name="web",
                properties={"name": "web-sg", "cidr_blocks": "[0.0.0.0/0]"},
            ),
            sample_resource,
            ResourceDeclaration(kind="aws_s3_bucket", name="logs"),
        ],
        variables=["region", "instance_count"],
        outputs=["app_ip"],
        findings=[security_finding, improvement_finding],
    )


@pytest.fixture
def rules_dir(tmp_path):
    """Create a temporary rules directory with the extra rules fixture."""
    target = tmp_path / "rules"
    target.mkdir()
    (target / "extra_rules.yaml").write_text((FIXTURES_DIR / "extra_rules.yaml").read_text())
    return target
