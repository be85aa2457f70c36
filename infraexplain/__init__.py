"""
InfraExplain - Plain-language summaries of Terraform configuration.

Parses infrastructure-as-code text into a structured document (resources
with rendered properties, variable names, output names), flags a small set
of security and improvement concerns, and optionally explains the result
to someone new to infrastructure as code.

Quick Start:
    >>> from infraexplain import parse_and_analyze
    >>> document = parse_and_analyze(open("main.tf").read())
    >>> for finding in document.findings:
    ...     print(finding.category.value, finding.message)

Components:
    parser     - Tokenizer and declaration extractor
    analyzers  - Rule table producing findings
    explain    - Prompt building, Claude client, offline summary
"""

__version__ = "0.3.0"
__author__ = "InfraExplain"

from .errors import ExplanationError, InfraExplainError, ParseError, RuleLoadError
from .models import ConfigurationDocument, Finding, FindingCategory, ResourceDeclaration
from .parser import parse
from .analyzers import ConfigAnalyzer, RuleRegistry, ResourceRule, analyze
from .rule_loader import RuleLoader, ConfiguredRule
from .scanner import ConfigScanner, create_scanner, parse_and_analyze

__all__ = [
    # Core
    'parse',
    'analyze',
    'parse_and_analyze',
    'ConfigScanner',
    'create_scanner',
    # Models
    'ConfigurationDocument',
    'ResourceDeclaration',
    'Finding',
    'FindingCategory',
    # Rules
    'ConfigAnalyzer',
    'RuleRegistry',
    'ResourceRule',
    'RuleLoader',
    'ConfiguredRule',
    # Errors
    'InfraExplainError',
    'ParseError',
    'RuleLoadError',
    'ExplanationError',
]
