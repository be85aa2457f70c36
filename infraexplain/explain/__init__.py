"""
Explanation layer for InfraExplain.

Consumes a parsed ConfigurationDocument and produces a beginner-friendly
summary, either from Claude or from an offline template.
"""

from .client import Completion, LLMClient, LLMConfig, create_llm_client
from .prompts import PromptTemplate, ExplainPrompts
from .explainer import ConfigExplainer, Explanation, simple_explanation, create_explainer

__all__ = [
    'LLMClient',
    'LLMConfig',
    'Completion',
    'create_llm_client',
    'PromptTemplate',
    'ExplainPrompts',
    'ConfigExplainer',
    'Explanation',
    'simple_explanation',
    'create_explainer',
]
