"""
Tokenizer for HCL-style configuration text.

The lexer turns raw text into a flat token stream. Everything that can
contain a brace without being structural (quoted strings, template
interpolations, heredocs, comments) is consumed here as a single unit, so
the extractor can resolve block boundaries by counting brace tokens only.
"""

import re
import logging
import textwrap
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..errors import ParseError

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r'[^\W\d][\w-]*')
_NUMBER_RE = re.compile(r'\d+(?:\.\d+)?(?:[eE][+-]?\d+)?')
_HEREDOC_RE = re.compile(r'<<(-?)([^\W\d][\w-]*)[ \t]*\r?\n')
_TEMPLATE_START_RE = re.compile(r'(?<![$%])[$%]\{')

# Deepest ${...} nesting accepted inside quoted strings
MAX_TEMPLATE_DEPTH = 32

_PUNCTUATION = {
    '{': 'LBRACE',
    '}': 'RBRACE',
    '[': 'LBRACKET',
    ']': 'RBRACKET',
    '(': 'LPAREN',
    ')': 'RPAREN',
    ',': 'COMMA',
}

# Operators that only matter to the expression evaluator as "not a literal"
_OPERATOR_CHARS = set('.:?!<>+-*/%&|=')

_SIMPLE_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '\\': '\\',
    '"': '"',
}


class TokenType(Enum):
    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    LPAREN = "lparen"
    RPAREN = "rparen"
    EQUALS = "equals"
    COMMA = "comma"
    OPERATOR = "operator"
    NEWLINE = "newline"


@dataclass(frozen=True)
class Token:
    """A single lexical token"""
    type: TokenType
    value: str
    line: int
    column: int
    # Set on STRING tokens whose content has ${...} or %{...} sequences
    has_template: bool = False

    def __str__(self) -> str:
        return f"{self.type.value}({self.value!r})@{self.line}:{self.column}"


class Lexer:
    """
    Converts configuration text into tokens.

    Raises ParseError only for input that cannot be split into tokens at
    all: unterminated strings, comments, heredocs or interpolations, and
    characters that cannot start any token.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.template_depth = 0
        self.tokens: List[Token] = []

    @property
    def column(self) -> int:
        return self.pos - self.line_start + 1

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ''

    def _error(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        raise ParseError(message, line=line or self.line, column=column or self.column,
                         source="lexer")

    def _emit(self, token_type: TokenType, value: str, line: int, column: int,
              has_template: bool = False) -> None:
        self.tokens.append(Token(token_type, value, line, column, has_template))

    def _newline(self) -> None:
        self.line += 1
        self.line_start = self.pos

    def tokenize(self) -> List[Token]:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            line, column = self.line, self.column

            if ch == '\n':
                self.pos += 1
                self._emit(TokenType.NEWLINE, '\n', line, column)
                self._newline()
            elif ch in ' \t\r\f\v':
                self.pos += 1
            elif ch == '#' or text.startswith('//', self.pos):
                self._skip_line_comment()
            elif text.startswith('/*', self.pos):
                self._skip_block_comment()
            elif ch == '"':
                value, has_template = self._read_quoted()
                self._emit(TokenType.STRING, value, line, column, has_template)
            elif text.startswith('<<', self.pos) and _HEREDOC_RE.match(text, self.pos):
                value, has_template = self._read_heredoc()
                self._emit(TokenType.STRING, value, line, column, has_template)
            elif ch in _PUNCTUATION:
                self.pos += 1
                self._emit(TokenType[_PUNCTUATION[ch]], ch, line, column)
            elif ch == '=' and self._peek(1) not in ('=', '>'):
                self.pos += 1
                self._emit(TokenType.EQUALS, ch, line, column)
            elif ch in "0123456789":
                match = _NUMBER_RE.match(text, self.pos)
                self.pos = match.end()
                self._emit(TokenType.NUMBER, match.group(0), line, column)
            elif _IDENT_RE.match(text, self.pos):
                match = _IDENT_RE.match(text, self.pos)
                self.pos = match.end()
                self._emit(TokenType.IDENT, match.group(0), line, column)
            elif ch in _OPERATOR_CHARS:
                operator = ch
                if self._peek(1) in ('=', '>', '&', '|', '.') and ch != '.':
                    operator += self._peek(1)
                elif text.startswith('...', self.pos):
                    operator = '...'
                self.pos += len(operator)
                self._emit(TokenType.OPERATOR, operator, line, column)
            else:
                self._error(f"Invalid character {ch!r}")

        logger.debug(f"Tokenized {len(self.tokens)} tokens over {self.line} lines")
        return self.tokens

    def _skip_line_comment(self) -> None:
        end = self.text.find('\n', self.pos)
        self.pos = len(self.text) if end == -1 else end

    def _skip_block_comment(self) -> None:
        line, column = self.line, self.column
        end = self.text.find('*/', self.pos + 2)
        if end == -1:
            self._error("Unterminated block comment", line, column)
        self._advance_to(end + 2)

    def _advance_to(self, target: int) -> None:
        """Move forward to target, keeping line accounting for skipped newlines"""
        while self.pos < target:
            if self.text[self.pos] == '\n':
                self.pos += 1
                self._newline()
            else:
                self.pos += 1

    def _read_quoted(self):
        """
        Read a quoted string starting at the opening quote.

        Returns the decoded content and whether it contains template
        sequences. Escaped characters never end the string, and quotes or
        braces inside ${...} belong to the interpolation, not the string.
        """
        start_line, start_column = self.line, self.column
        self.pos += 1
        parts: List[str] = []
        has_template = False

        while True:
            ch = self._peek()
            if ch == '' or ch == '\n':
                self._error("Unterminated string literal", start_line, start_column)

            if ch == '"':
                self.pos += 1
                return ''.join(parts), has_template

            if ch == '\\':
                parts.append(self._read_escape())
            elif ch in '$%' and self._peek(1) == ch and self._peek(2) == '{':
                parts.append(ch + '{')
                self.pos += 3
            elif ch in '$%' and self._peek(1) == '{':
                parts.append(self._read_template())
                has_template = True
            else:
                parts.append(ch)
                self.pos += 1

    def _read_escape(self) -> str:
        line, column = self.line, self.column
        escaped = self._peek(1)
        if escaped == '' or escaped == '\n':
            self._error("Unterminated string literal", line, column)

        if escaped in _SIMPLE_ESCAPES:
            self.pos += 2
            return _SIMPLE_ESCAPES[escaped]

        if escaped in ('u', 'U'):
            width = 4 if escaped == 'u' else 8
            digits = self.text[self.pos + 2:self.pos + 2 + width]
            if len(digits) == width and all(c in '0123456789abcdefABCDEF' for c in digits):
                code_point = int(digits, 16)
                if code_point <= 0x10FFFF:
                    self.pos += 2 + width
                    return chr(code_point)

        # Unknown escapes keep the escaped character literally
        self.pos += 2
        return escaped

    def _read_template(self) -> str:
        """Consume a ${...} or %{...} sequence, including nested braces and strings"""
        line, column = self.line, self.column
        if self.template_depth >= MAX_TEMPLATE_DEPTH:
            self._error(f"Template interpolations nested deeper than {MAX_TEMPLATE_DEPTH}", line, column)
        self.template_depth += 1
        start = self.pos
        self.pos += 2
        depth = 1

        while depth:
            ch = self._peek()
            if ch == '':
                self._error("Unterminated template interpolation", line, column)
            if ch == '"':
                self._read_quoted()
                continue
            if ch == '{':
                depth += 1
            elif ch == '}':
                depth -= 1
            if ch == '\n':
                self.pos += 1
                self._newline()
            else:
                self.pos += 1

        self.template_depth -= 1
        return self.text[start:self.pos]

    def _read_heredoc(self):
        """Read a <<MARKER or <<-MARKER heredoc up to its closing marker line"""
        line, column = self.line, self.column
        header = _HEREDOC_RE.match(self.text, self.pos)
        indented = header.group(1) == '-'
        marker = header.group(2)
        self._advance_to(header.end())

        body_lines: List[str] = []
        while True:
            if self.pos >= len(self.text):
                self._error(f"Unterminated heredoc, expected closing {marker}", line, column)
            end = self.text.find('\n', self.pos)
            if end == -1:
                end = len(self.text)
            current = self.text[self.pos:end]
            if current.strip() == marker:
                # Leave the trailing newline for the NEWLINE token
                self.pos = end
                break
            body_lines.append(current.rstrip('\r') + '\n')
            self._advance_to(min(end + 1, len(self.text)))

        content = ''.join(body_lines)
        if indented:
            content = textwrap.dedent(content)

        has_template = bool(_TEMPLATE_START_RE.search(content))
        content = content.replace('$${', '${').replace('%%{', '%{')
        return content, has_template


def tokenize(text: str) -> List[Token]:
    """Tokenize configuration text"""
    return Lexer(text).tokenize()
