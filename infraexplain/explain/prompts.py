"""
Prompt templates for explaining configurations
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Template
from typing import List

from ..models import ConfigurationDocument, FindingCategory


@dataclass
class PromptTemplate:
    """A reusable prompt template"""
    name: str
    system: str
    user_template: str
    description: str = ""

    def format(self, **kwargs) -> str:
        """Format the user template with provided values"""
        return Template(self.user_template).safe_substitute(**kwargs)

    def get_messages(self, **kwargs) -> tuple:
        """Get system prompt and formatted user message"""
        return self.system, self.format(**kwargs)


class ExplainPrompts:
    """Prompts for beginner-friendly configuration explanations"""

    EXPLAINER_SYSTEM = (
        "You are a helpful assistant that explains Terraform configurations "
        "in simple, beginner-friendly terms."
    )

    EXPLAIN_CONFIGURATION = PromptTemplate(
        name="explain_configuration",
        description="Explain a parsed configuration to someone new to infrastructure as code",
        system=EXPLAINER_SYSTEM,
        user_template="""Explain this Terraform configuration in simple, beginner-friendly terms:

$summary
Provide a clear, concise explanation suitable for someone new to infrastructure as code.""",
    )

    @classmethod
    def describe_document(cls, document: ConfigurationDocument) -> str:
        """Render the structured parts of a document as prompt text"""
        lines: List[str] = []

        if document.resources:
            lines.append("Resources:")
            for resource in document.resources:
                line = f"- {resource.address}"
                if resource.properties:
                    line += " with properties: " + ", ".join(resource.properties)
                lines.append(line)

        if document.variables:
            lines.append("")
            lines.append("Variables: " + ", ".join(document.variables))

        if document.outputs:
            lines.append("")
            lines.append("Outputs: " + ", ".join(document.outputs))

        if document.findings:
            lines.append("")
            lines.append("Potential issues to mention:")
            for finding in document.findings:
                label = "Security" if finding.category == FindingCategory.SECURITY else "Improvement"
                lines.append(f"- [{label}] {finding.message}")

        return "\n".join(lines) + "\n"

    @classmethod
    def build_prompt(cls, document: ConfigurationDocument) -> tuple:
        """Get system prompt and user message for a document"""
        return cls.EXPLAIN_CONFIGURATION.get_messages(summary=cls.describe_document(document))
