"""
Report generators for InfraExplain
"""

import json
import sys
from typing import Optional

from .explain import Explanation
from .models import ConfigurationDocument, FindingCategory


class BaseReporter:
    """Base class for reporters"""

    def render(self, document: ConfigurationDocument,
               explanation: Optional[Explanation] = None) -> str:
        raise NotImplementedError

    def report(self, document: ConfigurationDocument, output: Optional[str] = None,
               explanation: Optional[Explanation] = None) -> str:
        """Generate report and optionally write to file"""
        content = self.render(document, explanation)
        self._write_output(content, output)
        return content

    def _write_output(self, content: str, output: Optional[str]) -> None:
        """Write content to file or stdout"""
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(content)
        else:
            print(content)


class ConsoleReporter(BaseReporter):
    """Console/terminal output reporter with colors"""

    COLORS = {
        'security': '\033[91m',
        'improvement': '\033[94m',
        'reset': '\033[0m',
        'bold': '\033[1m',
        'green': '\033[92m',
    }

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        self.use_colors = use_colors and sys.stdout.isatty()
        self.verbose = verbose

    def _color(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def render(self, document: ConfigurationDocument,
               explanation: Optional[Explanation] = None) -> str:
        lines = []

        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))
        lines.append(self._color("  CONFIGURATION SUMMARY", 'bold'))
        lines.append(self._color("=" * 60, 'bold'))
        lines.append("")

        lines.append(self._color(f"RESOURCES ({len(document.resources)}):", 'bold'))
        for resource in document.resources:
            lines.append(f"  {resource.address}")
            if self.verbose:
                for key, value in resource.properties.items():
                    lines.append(f"      {key} = {value}")
        lines.append("")

        if document.variables:
            lines.append(f"Variables: {', '.join(document.variables)}")
        if document.outputs:
            lines.append(f"Outputs: {', '.join(document.outputs)}")
        if document.variables or document.outputs:
            lines.append("")

        if not document.findings:
            lines.append(self._color("No issues found!", 'green'))
        else:
            lines.append(self._color(f"FINDINGS ({len(document.findings)} total):", 'bold'))
            lines.append("-" * 60)
            for category in FindingCategory:
                for finding in document.get_findings_by_category(category):
                    tag = self._color(f"[{category.value.upper()}]", category.value)
                    lines.append(f"  {tag} {finding.message}")

        if explanation is not None:
            lines.append("")
            lines.append(self._color("EXPLANATION:", 'bold'))
            lines.append("-" * 60)
            lines.append(explanation.summary.rstrip())

        return "\n".join(lines)


class JSONReporter(BaseReporter):
    """JSON output reporter"""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def render(self, document: ConfigurationDocument,
               explanation: Optional[Explanation] = None) -> str:
        data = document.to_dict()
        if explanation is not None:
            data['explanation'] = explanation.to_dict()
        return json.dumps(data, indent=self.indent)


def get_reporter(format_type: str, **kwargs) -> BaseReporter:
    """Get reporter instance by format type"""
    reporters = {
        'console': ConsoleReporter,
        'json': JSONReporter,
    }

    reporter_class = reporters.get(format_type.lower())
    if not reporter_class:
        raise ValueError(f"Unknown format: {format_type}")

    return reporter_class(**kwargs)
