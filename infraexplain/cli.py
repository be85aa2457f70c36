"""
Command Line Interface for InfraExplain
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import ParseError
from .explain import create_explainer
from .models import ConfigurationDocument
from .reporters import get_reporter
from .scanner import create_scanner

EXIT_CLEAN = 0
EXIT_IMPROVEMENTS = 1
EXIT_SECURITY = 2
EXIT_PARSE_ERROR = 3
EXIT_USAGE = 4
EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging"""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='infraexplain',
        description='InfraExplain - Summarize Terraform configuration and flag common risks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s main.tf                          # Summary and findings
  %(prog)s main.tf -f json -o out.json      # JSON document
  %(prog)s main.tf --explain                # Add a plain-language explanation
  cat main.tf | %(prog)s -                  # Read from stdin
  %(prog)s main.tf -r ./rules               # Add YAML rules
        """
    )

    parser.add_argument(
        'target',
        help="Configuration file to parse, or '-' for stdin"
    )

    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '-o', '--output',
        help='Output file path (default: stdout)'
    )
    output_group.add_argument(
        '-f', '--format',
        choices=['console', 'json'],
        default='console',
        help='Output format (default: console)'
    )
    output_group.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    rule_group = parser.add_argument_group('Rule Options')
    rule_group.add_argument(
        '-r', '--rules-dir',
        help='Directory of additional YAML rule files'
    )

    explain_group = parser.add_argument_group('Explanation Options')
    explain_group.add_argument(
        '--explain',
        action='store_true',
        help='Add a plain-language explanation (uses Claude when ANTHROPIC_API_KEY is set)'
    )
    explain_group.add_argument(
        '--offline',
        action='store_true',
        help='Never call the API; use the offline explanation'
    )
    explain_group.add_argument(
        '--model',
        help='Claude model to use for explanations'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Debug mode (very verbose)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(args)


def read_input(target: str) -> bytes:
    """Raw input bytes; decoding is left to the parser"""
    if target == '-':
        return sys.stdin.buffer.read()
    return Path(target).read_bytes()


def exit_code_for(document: ConfigurationDocument) -> int:
    """Exit code based on the most severe finding category"""
    if document.has_security_findings():
        return EXIT_SECURITY
    if document.findings:
        return EXIT_IMPROVEMENTS
    return EXIT_CLEAN


def run(args: argparse.Namespace) -> int:
    """Parse, analyze and report one configuration"""
    rules_dir = Path(args.rules_dir) if args.rules_dir else None
    scanner = create_scanner(rules_dir)

    try:
        content = read_input(args.target)
    except OSError as e:
        print(f"Error: Cannot read {args.target}: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        document = scanner.parse_and_analyze(content)
    except ParseError as e:
        print(f"Error: Failed to parse configuration: {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR

    explanation = None
    if args.explain:
        explainer = create_explainer(use_llm=not args.offline, model=args.model)
        explanation = explainer.explain(document)

    reporter_kwargs = {}
    if args.format == 'console':
        reporter_kwargs['use_colors'] = not args.no_color
        reporter_kwargs['verbose'] = args.verbose

    reporter = get_reporter(args.format, **reporter_kwargs)
    reporter.report(document, args.output, explanation=explanation)

    return exit_code_for(document)


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parsed_args = parse_args(args)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    if parsed_args.target != '-' and not Path(parsed_args.target).is_file():
        print(f"Error: Target file does not exist: {parsed_args.target}", file=sys.stderr)
        return EXIT_USAGE

    try:
        return run(parsed_args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except OSError as e:
        if parsed_args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == '__main__':
    sys.exit(main())
