# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for a whole overloadable invocation.

Recognizes the two header shapes::

    [vis] name as <signature>, <signature>, ...            (free form)
    [vis] Owner::name as <signature>, <signature>, ...     (member form)

and hands each signature to :class:`SignatureParser`.
"""

from overloadable.errors import MalformedHeader, MalformedSignature
from overloadable.model.entities import Header, Invocation, Signature
from overloadable.model.spans import Fragment
from overloadable.parser.cursor import TokenCursor
from overloadable.parser.lexer import Token, TokenType, tokenize
from overloadable.parser.signature import SignatureParser

# ###############
# Public Interface
# ###############


def parse_invocation(source: str, tokens: list[Token] | None = None) -> Invocation:
    """Parse an invocation body into its header and signatures.

    Args:
        source: Text the tokens refer to.
        tokens: Pre-scanned tokens ending in EOF; scanned from *source* if omitted.
            Passing a slice of a larger file's tokens keeps diagnostics in file
            coordinates.

    Returns:
        The parsed Invocation.

    Raises:
        LexerError: If *source* cannot be tokenized.
        MalformedHeader: If neither header shape matches.
        MalformedSignature: If a signature is malformed or none is present.
    """
    if tokens is None:
        tokens = tokenize(source)
    return _Parser(source, tokens).parse()


# ################
# Implementation
# ################


class _Parser(TokenCursor):
    """Parses the header and the separated signature list."""

    _error = MalformedHeader

    def parse(self) -> Invocation:
        first = self._current()
        header = self._parse_header()
        signatures = self._parse_signature_list()
        return Invocation(header=header, signatures=signatures, span=first.span.to(signatures[-1].span))

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def _parse_header(self) -> Header:
        """Parse ``[vis] Name as`` or ``[vis] Owner :: Name as``."""
        visibility = self._parse_visibility()
        first = self._expect(TokenType.IDENTIFIER, "overload name")
        owner: Fragment | None = None
        name_tok = first
        if self._check(TokenType.PATH_SEP):
            self._advance()
            owner = self._fragment(first, first)
            name_tok = self._expect(TokenType.IDENTIFIER, "method name after '::'")
        self._expect(TokenType.AS, "'as' after the overload name")
        return Header(visibility=visibility, name=self._fragment(name_tok, name_tok), owner=owner)

    def _parse_visibility(self) -> Fragment | None:
        """Parse ``pub`` or ``pub(crate)`` / ``pub(super)`` / ``pub(in path)``."""
        if not self._check(TokenType.PUB):
            return None
        first = self._advance()
        last = first
        if self._check(TokenType.LPAREN):
            last = self._skip_balanced()
        return self._fragment(first, last)

    # ------------------------------------------------------------------
    # Signature list
    # ------------------------------------------------------------------

    def _parse_signature_list(self) -> tuple[Signature, ...]:
        """Parse signatures separated by ',' with an optional trailing ','."""
        signatures: list[Signature] = []
        while True:
            if self._at_end():
                if not signatures:
                    raise MalformedSignature("Expected at least one signature after 'as'", self._current().span)
                break
            signatures.append(self._parse_signature())
            if self._check(TokenType.COMMA):
                self._advance()
                continue
            if not self._at_end():
                tok = self._current()
                raise MalformedSignature(f"Expected ',' between signatures, got {tok.value!r}", tok.span)
        return tuple(signatures)

    def _parse_signature(self) -> Signature:
        parser = SignatureParser(self._source, self._tokens, self._pos)
        signature = parser.parse()
        self._pos = parser.pos
        return signature
