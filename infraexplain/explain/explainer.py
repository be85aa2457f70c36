"""
Configuration explainer.

Turns a ConfigurationDocument into a plain-language summary, using the LLM
when one is configured and an offline summary otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .client import LLMClient, create_llm_client
from .prompts import ExplainPrompts
from ..errors import ExplanationError
from ..models import ConfigurationDocument, FindingCategory

logger = logging.getLogger(__name__)


@dataclass
class Explanation:
    """An explanation and where it came from"""
    summary: str
    source: str  # "llm" or "fallback"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': self.summary,
            'source': self.source,
        }


def simple_explanation(document: ConfigurationDocument) -> str:
    """Offline markdown summary of a document"""
    parts: List[str] = ["This Terraform configuration defines the following:\n\n"]

    if document.resources:
        parts.append("**Resources:**\n")
        for resource in document.resources:
            line = f"- A {resource.kind} resource named '{resource.name}'"
            if resource.properties:
                line += " with configured properties"
            parts.append(line + ".\n")
        parts.append("\n")

    if document.variables:
        parts.append(
            f"**Variables:** {len(document.variables)} input variable(s) that can be customized.\n\n"
        )

    if document.outputs:
        parts.append(
            f"**Outputs:** {len(document.outputs)} output value(s) that provide "
            f"information about the infrastructure.\n\n"
        )

    security = document.get_findings_by_category(FindingCategory.SECURITY)
    improvements = document.get_findings_by_category(FindingCategory.IMPROVEMENT)

    if security:
        parts.append("**Security concerns:**\n")
        parts.extend(f"- {f.message}\n" for f in security)
        parts.append("\n")

    if improvements:
        parts.append("**Suggested improvements:**\n")
        parts.extend(f"- {f.message}\n" for f in improvements)
        parts.append("\n")

    if document.is_empty:
        parts.append("No resources, variables or outputs were found.\n")

    return "".join(parts).rstrip("\n") + "\n"


class ConfigExplainer:
    """
    Explains configuration documents.

    Only the parsed document is consulted; the explainer never sees the
    raw configuration text. API failures fall back to the offline summary.
    """

    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client

    @property
    def llm_available(self) -> bool:
        return self.client is not None and self.client.is_available

    def explain(self, document: ConfigurationDocument) -> Explanation:
        if not self.llm_available:
            return Explanation(simple_explanation(document), "fallback")

        system, user_message = ExplainPrompts.build_prompt(document)
        try:
            completion = self.client.complete(user_message, system=system)
        except ExplanationError as e:
            logger.warning(f"LLM explanation failed, using offline summary: {e}")
            return Explanation(simple_explanation(document), "fallback")

        if not completion.text.strip():
            logger.warning("LLM returned an empty explanation, using offline summary")
            return Explanation(simple_explanation(document), "fallback")

        return Explanation(completion.text, "llm")


def create_explainer(use_llm: bool = True, model: Optional[str] = None) -> ConfigExplainer:
    """Factory for an explainer, with an LLM client when use_llm is set"""
    if not use_llm:
        return ConfigExplainer()

    return ConfigExplainer(create_llm_client(model=model))
