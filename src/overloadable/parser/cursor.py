# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Token cursor shared by the grammar and signature parsers."""

from overloadable.errors import ExpansionError
from overloadable.model.spans import Fragment, Span
from overloadable.parser.lexer import Token, TokenType

# ###############
# Public Interface
# ###############


class TokenCursor:
    """Recursive-descent helpers over a token list ending in EOF.

    Subclasses set ``_error`` to the condition raised on unexpected tokens.
    """

    _error: type[ExpansionError] = ExpansionError

    def __init__(self, source: str, tokens: list[Token], pos: int = 0) -> None:
        self._source = source
        self._tokens = tokens
        self._pos = pos

    @property
    def pos(self) -> int:
        """Index of the current (un-consumed) token."""
        return self._pos

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        """Return the type of the token *offset* positions ahead, clamped at EOF."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without consuming)."""
        return self._peek_type() in types

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """Consume the current token if it has *token_type*, otherwise raise ``_error``."""
        if not self._check(token_type):
            raise self._unexpected(expected)
        return self._advance()

    def _unexpected(self, expected: str) -> ExpansionError:
        tok = self._current()
        found = "end of input" if tok.type == TokenType.EOF else repr(tok.value)
        return self._error(f"Expected {expected}, got {found}", tok.span)

    # ------------------------------------------------------------------
    # Raw token runs
    # ------------------------------------------------------------------

    def _fragment(self, first: Token, last: Token) -> Fragment:
        """Return the verbatim source text from *first* through *last*."""
        span = Span(start=first.start, end=last.end, line=first.line, column=first.column)
        return Fragment(text=self._source[first.start : last.end], span=span)

    def _skip_balanced(self) -> Token:
        """Consume a delimited group starting at the current opener; return its closer."""
        stack: list[TokenType] = []
        while True:
            tok = self._current()
            if tok.type in _OPENERS:
                stack.append(_OPENERS[tok.type])
            elif tok.type in _CLOSERS:
                if not stack or stack[-1] != tok.type:
                    raise self._error(f"Unbalanced delimiter {tok.value!r}", tok.span)
                stack.pop()
            elif tok.type == TokenType.EOF:
                raise self._error(f"Expected {_CLOSER_TEXT[stack[-1]]!r}, got end of input", tok.span)
            self._advance()
            if not stack:
                return tok

    def _collect(self, stop: frozenset[TokenType], *, before_signature: bool = False) -> Fragment | None:
        """Consume raw tokens up to a top-level token in *stop* (or EOF).

        Parentheses, brackets and braces are skipped as balanced groups and
        angle brackets are depth-counted, so a stop token only counts outside
        of all of them. An unmatched ``>`` or closing delimiter always ends the
        run. With *before_signature*, a comma directly followed by the start
        of another signature also ends the run. A top-level ``fn`` or ``#``
        right after a complete type always ends it, so a signature missing
        its body never swallows the next one.

        Returns:
            The consumed run as a fragment, or None if nothing was consumed.
        """
        first: Token | None = None
        last: Token | None = None
        before_last: Token | None = None
        # One entry per open '<': whether it opened a `for<...>` binder.
        angles: list[bool] = []
        binder_closed = False
        while not self._at_end():
            tok = self._current()
            if not angles and tok.type in stop:
                break
            if before_signature and tok.type == TokenType.COMMA and self._peek_type(1) in _SIGNATURE_START:
                break
            if (
                not angles
                and tok.type in (TokenType.FN, TokenType.POUND)
                and last is not None
                and not binder_closed
                and _ends_type(before_last, last)
            ):
                break
            if tok.type in _CLOSERS:
                break
            binder_closed = False
            if tok.type in _OPENERS:
                closer = self._skip_balanced()
                first = first or tok
                before_last, last = last, closer
                continue
            if tok.type == TokenType.LANGLE:
                angles.append(last is not None and last.type == TokenType.IDENTIFIER and last.value == "for")
            elif tok.type == TokenType.RANGLE:
                if not angles:
                    break
                binder_closed = angles.pop()
            first = first or tok
            before_last, last = last, self._advance()
        if first is None or last is None:
            return None
        return self._fragment(first, last)


# ################
# Implementation
# ################

_OPENERS: dict[TokenType, TokenType] = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}

_CLOSERS = frozenset(_OPENERS.values())

_CLOSER_TEXT: dict[TokenType, str] = {
    TokenType.RPAREN: ")",
    TokenType.RBRACKET: "]",
    TokenType.RBRACE: "}",
}

_SIGNATURE_START = frozenset({TokenType.FN, TokenType.POUND, TokenType.EOF})

_TYPE_END = frozenset({TokenType.IDENTIFIER, TokenType.RANGLE, TokenType.RPAREN, TokenType.RBRACKET})

# Identifiers that qualify a following `fn` pointer type instead of ending a type.
_FN_QUALIFIERS = frozenset({"unsafe", "extern", "async"})


def _ends_type(before_last: Token | None, last: Token) -> bool:
    """Return True if *last* can be the final token of a type or bound."""
    if last.type == TokenType.LIFETIME:
        # `&'a fn()` is a reference to a function pointer.
        return before_last is None or before_last.type != TokenType.AMPERSAND
    if last.type == TokenType.IDENTIFIER:
        return last.value not in _FN_QUALIFIERS
    return last.type in _TYPE_END
