# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for Rust source text.

Converts raw source text into the token sequence the invocation parser
consumes. Only the distinctions the overload grammar needs are drawn;
everything else (bodies, types, bounds) is kept as raw tokens whose offsets
point back into the source so it can be re-emitted verbatim.
"""

import enum
from dataclasses import dataclass

from overloadable.errors import LexerError
from overloadable.model.spans import Span

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the lexer."""

    # Keywords
    FN = "fn"
    AS = "as"
    WHERE = "where"
    SELF = "self"
    MUT = "mut"
    PUB = "pub"
    CONST = "const"

    # Delimiters
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LANGLE = "<"
    RANGLE = ">"

    # Symbols and operators
    COMMA = ","
    COLON = ":"
    SEMICOLON = ";"
    PATH_SEP = "::"
    ARROW = "->"
    FAT_ARROW = "=>"
    POUND = "#"
    BANG = "!"
    AMPERSAND = "&"
    EQUALS = "="
    PUNCT = "PUNCT"

    # Literals
    LIFETIME = "LIFETIME"
    CHAR = "CHAR"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of file
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw text of the token.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        start: 0-based offset of the first character.
        end: 0-based offset one past the last character.
    """

    type: TokenType
    value: str
    line: int
    column: int
    start: int
    end: int

    @property
    def span(self) -> Span:
        return Span(start=self.start, end=self.end, line=self.line, column=self.column)


def tokenize(source: str) -> list[Token]:
    """Tokenize Rust source text into a sequence of tokens.

    Comments and whitespace are consumed and not included in the output.

    Args:
        source: Rust source text.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unexpected characters, unterminated literals,
            or unterminated block comments.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FN,
    "as": TokenType.AS,
    "where": TokenType.WHERE,
    "self": TokenType.SELF,
    "mut": TokenType.MUT,
    "pub": TokenType.PUB,
    "const": TokenType.CONST,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "#": TokenType.POUND,
    "!": TokenType.BANG,
    "&": TokenType.AMPERSAND,
}

# Angle brackets stay single-character so that nesting depth in types can be
# tracked; '>>' in `Vec<Vec<u8>>` must close two levels.
_TWO_CHAR_TOKENS: dict[str, TokenType] = {
    "::": TokenType.PATH_SEP,
    "->": TokenType.ARROW,
    "=>": TokenType.FAT_ARROW,
}

_OTHER_PUNCT = frozenset("+-*/%^|.@?~$\\")


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column, self._pos, self._pos))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        return self._char_at(self._pos)

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' past end of input."""
        return self._char_at(self._pos + offset)

    def _char_at(self, index: int) -> str:
        if index < len(self._source):
            return self._source[index]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _emit(self, token_type: TokenType, start: int, line: int, col: int) -> None:
        self._tokens.append(Token(token_type, self._source[start : self._pos], line, col, start, self._pos))

    def _error(self, message: str, start: int, line: int, col: int) -> LexerError:
        return LexerError(message, Span(start=start, end=start + 1, line=line, column=col))

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch.isspace():
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the newline itself)."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        """Consume from '/*' through the matching '*/'; block comments nest."""
        start, line, col = self._pos, self._line, self._column
        depth = 0
        while self._pos < len(self._source):
            if self._current() == "/" and self._peek() == "*":
                self._advance()
                self._advance()
                depth += 1
            elif self._current() == "*" and self._peek() == "/":
                self._advance()
                self._advance()
                depth -= 1
                if depth == 0:
                    return
            else:
                self._advance()
        raise self._error("Unterminated block comment", start, line, col)

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        start, line, col = self._pos, self._line, self._column
        pair = ch + self._peek()

        if pair in _TWO_CHAR_TOKENS:
            self._advance()
            self._advance()
            self._emit(_TWO_CHAR_TOKENS[pair], start, line, col)
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._emit(_SINGLE_CHAR_TOKENS[ch], start, line, col)
        elif ch == ":":
            self._advance()
            self._emit(TokenType.COLON, start, line, col)
        elif ch == "=":
            self._advance()
            self._emit(TokenType.EQUALS, start, line, col)
        elif ch == '"':
            self._scan_string(start, line, col)
        elif ch == "'":
            self._scan_quote(start, line, col)
        elif ch.isdigit():
            self._scan_number(start, line, col)
        elif self._at_prefixed_literal():
            self._scan_prefixed_literal(start, line, col)
        elif ch.isalpha() or ch == "_":
            self._scan_identifier_or_keyword(start, line, col)
        elif ch in _OTHER_PUNCT:
            self._advance()
            self._emit(TokenType.PUNCT, start, line, col)
        else:
            raise self._error(f"Unexpected character: {ch!r}", start, line, col)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, start: int, line: int, col: int) -> None:
        """Scan a double-quoted string literal; escapes are skipped, not decoded."""
        self._advance()  # opening "
        while self._pos < len(self._source):
            ch = self._advance()
            if ch == "\\":
                if self._pos >= len(self._source):
                    break
                self._advance()
            elif ch == '"':
                self._scan_suffix()
                self._emit(TokenType.STRING, start, line, col)
                return
        raise self._error("Unterminated string literal", start, line, col)

    def _scan_raw_string(self, start: int, line: int, col: int) -> None:
        """Scan r"..." / r#"..."# once the prefix letters are consumed."""
        self._advance()  # r
        hashes = 0
        while self._current() == "#":
            self._advance()
            hashes += 1
        if self._current() != '"':
            raise self._error("Malformed raw string literal", start, line, col)
        self._advance()
        closing = '"' + "#" * hashes
        while self._pos < len(self._source):
            if self._source.startswith(closing, self._pos):
                for _ in closing:
                    self._advance()
                self._scan_suffix()
                self._emit(TokenType.STRING, start, line, col)
                return
            self._advance()
        raise self._error("Unterminated raw string literal", start, line, col)

    def _scan_quote(self, start: int, line: int, col: int) -> None:
        """Scan either a lifetime ('a) or a character literal ('a', '\\n')."""
        nxt = self._peek()
        is_char = nxt == "\\" or (nxt != "" and self._peek(2) == "'")
        if not is_char and (nxt.isalpha() or nxt == "_"):
            self._advance()  # '
            while self._current().isalnum() or self._current() == "_":
                self._advance()
            self._emit(TokenType.LIFETIME, start, line, col)
            return
        self._scan_char(start, line, col)

    def _scan_char(self, start: int, line: int, col: int) -> None:
        self._advance()  # opening '
        while self._pos < len(self._source):
            ch = self._advance()
            if ch == "\\":
                if self._pos >= len(self._source):
                    break
                self._advance()
            elif ch == "'":
                self._scan_suffix()
                self._emit(TokenType.CHAR, start, line, col)
                return
            elif ch == "\n":
                break
        raise self._error("Unterminated character literal", start, line, col)

    def _at_prefixed_literal(self) -> bool:
        """Return True at b"..", b'..', c"..", br"..", r"..", r#".." but not r#ident."""
        ch, nxt, third = self._current(), self._peek(), self._peek(2)
        if ch in "bc" and nxt in ('"', "'"):
            return not (ch == "c" and nxt == "'")
        if ch in "bc" and nxt == "r" and third in ('"', "#"):
            return True
        if ch == "r" and nxt == '"':
            return True
        return ch == "r" and nxt == "#" and third in ('"', "#")

    def _scan_prefixed_literal(self, start: int, line: int, col: int) -> None:
        if self._current() in "bc":
            self._advance()
        if self._current() == "r":
            self._scan_raw_string(start, line, col)
        elif self._current() == '"':
            self._scan_string(start, line, col)
        else:
            self._scan_char(start, line, col)

    def _scan_suffix(self) -> None:
        while self._current().isalnum() or self._current() == "_":
            self._advance()

    def _scan_number(self, start: int, line: int, col: int) -> None:
        """Scan an integer or floating-point literal, including type suffixes."""
        is_hex = self._current() == "0" and self._peek() in ("x", "X", "o", "O", "b", "B")
        seen_dot = False
        while self._pos < len(self._source):
            ch = self._current()
            prev = self._source[self._pos - 1]
            if ch.isalnum() or ch == "_":
                self._advance()
            elif ch in "+-" and prev in "eE" and not is_hex and self._peek().isdigit():
                self._advance()
            elif ch == "." and not seen_dot and not is_hex and self._peek().isdigit():
                seen_dot = True
                self._advance()
            else:
                break
        self._emit(TokenType.NUMBER, start, line, col)

    def _scan_identifier_or_keyword(self, start: int, line: int, col: int) -> None:
        """Scan an identifier (including raw r#ident) and map keywords."""
        if self._current() == "r" and self._peek() == "#":
            self._advance()
            self._advance()
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() == "_"):
            self._advance()
        value = self._source[start : self._pos]
        self._emit(_KEYWORDS.get(value, TokenType.IDENTIFIER), start, line, col)
