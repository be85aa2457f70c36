"""
Declaration extractor.

Walks the token stream of a configuration file and collects top-level
``resource``, ``variable`` and ``output`` blocks into a
ConfigurationDocument. Malformed declarations are skipped one at a time so
a single bad block never discards the rest of the document.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .lexer import Token, TokenType
from .values import evaluate_expression, render_value
from ..models import ConfigurationDocument, ResourceDeclaration

logger = logging.getLogger(__name__)

_OPENERS = {TokenType.LBRACE, TokenType.LBRACKET, TokenType.LPAREN}
_CLOSERS = {TokenType.RBRACE, TokenType.RBRACKET, TokenType.RPAREN}


class DeclarationExtractor:
    """
    Builds a ConfigurationDocument from tokens.

    Block bodies are delimited by finding the brace that returns the depth
    to zero. Strings, heredocs and comments were already folded into
    single tokens by the lexer, so braces inside them are never counted.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens

    def extract(self) -> ConfigurationDocument:
        document = ConfigurationDocument()
        index = 0
        count = len(self.tokens)

        while index < count:
            token = self.tokens[index]

            if token.type == TokenType.NEWLINE:
                index += 1
                continue

            if token.type == TokenType.LBRACE:
                logger.debug(f"Skipping stray block at line {token.line}")
                index = self.find_block_end(index) + 1
                continue

            if token.type != TokenType.IDENT:
                logger.debug(f"Skipping unexpected token {token}")
                index = self._skip_line(index)
                continue

            labels, open_index = self._read_header(index + 1)
            if open_index is None:
                # Top-level attribute (tfvars style) or a malformed header
                index = self._skip_line(index)
                continue

            close_index = self.find_block_end(open_index)
            if labels is not None:
                self._handle_block(document, token, labels, open_index, close_index)
            else:
                logger.debug(f"Skipping {token.value} block with invalid labels at line {token.line}")
            index = close_index + 1

        logger.debug(
            f"Extracted {len(document.resources)} resources, "
            f"{len(document.variables)} variables, {len(document.outputs)} outputs"
        )
        return document

    def _read_header(self, index: int) -> Tuple[Optional[List[str]], Optional[int]]:
        """
        Read block labels following a block type identifier.

        Returns the labels and the index of the opening brace. Labels are
        None when the header reaches a brace but a label is not usable;
        the brace index is None when this is not a block header at all.
        """
        labels: Optional[List[str]] = []
        while index < len(self.tokens):
            token = self.tokens[index]
            if token.type == TokenType.LBRACE:
                return labels, index
            if token.type == TokenType.STRING and not token.has_template:
                if labels is not None:
                    labels.append(token.value)
            elif token.type == TokenType.IDENT:
                if labels is not None:
                    labels.append(token.value)
            elif token.type == TokenType.STRING:
                labels = None
            else:
                return None, None
            index += 1
        return None, None

    def find_block_end(self, open_index: int) -> int:
        """
        Find the index of the brace closing the block opened at open_index.

        When the input ends before the block is closed, the block runs to
        the end of the token stream and len(tokens) is returned.
        """
        depth = 0
        for index in range(open_index, len(self.tokens)):
            token_type = self.tokens[index].type
            if token_type == TokenType.LBRACE:
                depth += 1
            elif token_type == TokenType.RBRACE:
                depth -= 1
                if depth == 0:
                    return index

        logger.debug(f"Block opened at line {self.tokens[open_index].line} is not closed")
        return len(self.tokens)

    def _skip_line(self, index: int) -> int:
        """Advance past the expression or statement starting at index"""
        end = self._expression_end(index, len(self.tokens))
        return max(end, index + 1)

    def _expression_end(self, start: int, limit: int) -> int:
        """
        Return the index just past an expression starting at start.

        An expression ends at a newline outside any bracket, or at limit.
        """
        depth = 0
        index = start
        while index < limit:
            token_type = self.tokens[index].type
            if token_type in _OPENERS:
                depth += 1
            elif token_type in _CLOSERS:
                if depth == 0:
                    return index
                depth -= 1
            elif token_type == TokenType.NEWLINE and depth == 0:
                return index
            index += 1
        return limit

    def _handle_block(self, document: ConfigurationDocument, block_type: Token,
                      labels: List[str], open_index: int, close_index: int) -> None:
        kind = block_type.value

        if kind == 'resource':
            if len(labels) != 2 or not labels[0] or not labels[1]:
                logger.debug(
                    f"Skipping resource at line {block_type.line}: "
                    f"expected 2 labels, got {labels!r}"
                )
                return
            properties = self.extract_properties(open_index + 1, close_index)
            document.resources.append(ResourceDeclaration(
                kind=labels[0],
                name=labels[1],
                properties=properties,
            ))

        elif kind in ('variable', 'output'):
            if not labels or not labels[0]:
                logger.debug(f"Skipping {kind} without a name at line {block_type.line}")
                return
            target = document.variables if kind == 'variable' else document.outputs
            target.append(labels[0])

        else:
            logger.debug(f"Ignoring {kind} block at line {block_type.line}")

    def extract_properties(self, start: int, end: int) -> Dict[str, str]:
        """
        Collect top-level ``key = value`` attributes between start and end.

        Nested blocks are skipped whole; their attributes are not
        flattened into the enclosing resource.
        """
        properties: Dict[str, str] = {}
        index = start

        while index < end:
            token = self.tokens[index]

            if token.type == TokenType.NEWLINE:
                index += 1
                continue

            next_token = self.tokens[index + 1] if index + 1 < end else None

            if (token.type in (TokenType.IDENT, TokenType.STRING)
                    and next_token is not None and next_token.type == TokenType.EQUALS):
                value_end = self._expression_end(index + 2, end)
                value = evaluate_expression(self.tokens[index + 2:value_end])
                if token.value in properties:
                    logger.debug(f"Ignoring duplicate attribute {token.value!r} at line {token.line}")
                else:
                    properties[token.value] = render_value(value)
                index = max(value_end, index + 2)
                continue

            if token.type == TokenType.IDENT:
                _, open_index = self._read_header(index + 1)
                if open_index is not None and open_index < end:
                    logger.debug(f"Skipping nested {token.value} block at line {token.line}")
                    index = min(self.find_block_end(open_index), end) + 1
                    continue

            logger.debug(f"Skipping malformed statement at line {token.line}")
            index = min(self._skip_line(index), end)

        return properties


def extract_declarations(tokens: Sequence[Token]) -> ConfigurationDocument:
    """Extract declarations from a token stream"""
    return DeclarationExtractor(tokens).extract()
