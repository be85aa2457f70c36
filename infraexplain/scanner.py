"""
Configuration scanner - parse and analyze in one call.

This is the interface the explanation and service layers consume:
raw text goes in, a ConfigurationDocument with findings comes out, or
ParseError is raised when the text cannot be tokenized.
"""

import time
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .analyzers import ConfigAnalyzer, ResourceRule, RuleRegistry
from .models import ConfigurationDocument
from .parser import parse
from .rule_loader import RuleLoader

logger = logging.getLogger(__name__)


class ConfigScanner:
    """
    Parses configuration text and annotates it with findings.

    The scanner keeps no per-document state between calls. It can be
    shared by concurrent callers as long as its rule set is not modified.
    """

    def __init__(
        self,
        rules: Optional[RuleRegistry] = None,
        extra_rules: Optional[Iterable[ResourceRule]] = None,
    ):
        self.analyzer = ConfigAnalyzer(rules=rules, extra_rules=extra_rules)

    @property
    def rules_applied(self) -> int:
        return self.analyzer.rules_applied

    def parse_and_analyze(self, text: Union[str, bytes]) -> ConfigurationDocument:
        """
        Parse configuration text and attach findings.

        Raises:
            ParseError: If the text cannot be tokenized
        """
        start = time.perf_counter()
        document = parse(text)
        self.analyzer.analyze_document(document)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            f"Parsed {len(document.resources)} resources, {len(document.variables)} variables, "
            f"{len(document.outputs)} outputs with {len(document.findings)} findings "
            f"in {elapsed_ms:.1f}ms"
        )
        return document

    def scan_file(self, file_path: Union[str, Path]) -> ConfigurationDocument:
        """
        Read a configuration file and parse_and_analyze its content.

        Raises:
            ParseError: If the file is not valid UTF-8 or cannot be tokenized
        """
        content = Path(file_path).read_bytes()
        return self.parse_and_analyze(content)


def create_scanner(rules_dir: Optional[Path] = None) -> ConfigScanner:
    """
    Create a scanner with the built-in rules plus any YAML rules found in
    rules_dir.
    """
    extra_rules = RuleLoader(rules_dir).load_all_rules() if rules_dir else []
    return ConfigScanner(extra_rules=extra_rules)


def parse_and_analyze(text: Union[str, bytes]) -> ConfigurationDocument:
    """Parse and analyze text with the built-in rules"""
    return ConfigScanner().parse_and_analyze(text)
