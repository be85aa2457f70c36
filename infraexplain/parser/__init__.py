"""
Configuration parser for InfraExplain.

Components:
- lexer: Tokenizer that folds strings, heredocs and comments into tokens
- values: Closed value variants and their display rendering
- extractor: Resource/variable/output declaration extraction

The stable entry point is ``parse(text)``; it either returns a
ConfigurationDocument (possibly sparse) or raises ParseError.
"""

import logging
from typing import Union

from .lexer import Lexer, Token, TokenType, tokenize
from .values import (
    UNKNOWN,
    BoolValue,
    ListValue,
    NumberValue,
    StringValue,
    UnresolvedValue,
    evaluate_expression,
    render_value,
)
from .extractor import DeclarationExtractor, extract_declarations
from ..errors import ParseError
from ..models import ConfigurationDocument

logger = logging.getLogger(__name__)


def parse(text: Union[str, bytes]) -> ConfigurationDocument:
    """
    Parse configuration text into a ConfigurationDocument.

    Declarations with missing labels are skipped and values that cannot be
    evaluated render as ``<unknown>``; neither is an error. The returned
    document carries no findings.

    Raises:
        ParseError: If the text cannot be tokenized
    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError(f"Input is not valid UTF-8: {e}", source="parser") from e

    if text.startswith('\ufeff'):
        text = text[1:]

    tokens = tokenize(text)
    return extract_declarations(tokens)


__all__ = [
    'parse',
    'ParseError',
    'Lexer',
    'Token',
    'TokenType',
    'tokenize',
    'UNKNOWN',
    'StringValue',
    'BoolValue',
    'NumberValue',
    'ListValue',
    'UnresolvedValue',
    'evaluate_expression',
    'render_value',
    'DeclarationExtractor',
    'extract_declarations',
]
