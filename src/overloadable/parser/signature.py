# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for a single overload signature.

A signature is::

    #[meta]* fn <generics>? ( receiver? params ) (-> Type)? (where ...)? { body }

Types, patterns, bounds, constraint clauses and bodies are never
interpreted; they are captured as verbatim fragments.
"""

from overloadable.errors import ExpansionError, MalformedSignature
from overloadable.model.entities import (
    Annotation,
    GenericParam,
    GenericParamKind,
    Generics,
    Parameter,
    Receiver,
    ReceiverKind,
    Signature,
)
from overloadable.model.spans import Fragment
from overloadable.parser.cursor import TokenCursor
from overloadable.parser.lexer import Token, TokenType, tokenize

# ###############
# Public Interface
# ###############


def parse_signature(source: str, tokens: list[Token] | None = None) -> Signature:
    """Parse exactly one signature from *source*.

    Args:
        source: Text the tokens refer to.
        tokens: Pre-scanned tokens ending in EOF; scanned from *source* if omitted.

    Returns:
        The parsed Signature.

    Raises:
        LexerError: If *source* cannot be tokenized.
        MalformedSignature: If the signature is incomplete or followed by extra tokens.
    """
    if tokens is None:
        tokens = tokenize(source)
    parser = SignatureParser(source, tokens)
    signature = parser.parse()
    if not parser.at_end():
        raise parser.unexpected("end of signature")
    return signature


class SignatureParser(TokenCursor):
    """Parses one signature starting at a given position of a shared token list."""

    _error = MalformedSignature

    def at_end(self) -> bool:
        return self._at_end()

    def unexpected(self, expected: str) -> ExpansionError:
        return self._unexpected(expected)

    def parse(self) -> Signature:
        """Parse a signature and leave the cursor on the token after its body."""
        first = self._current()
        annotations = self._parse_annotations()
        self._expect(TokenType.FN, "'fn'")
        generics = self._parse_generics() if self._check(TokenType.LANGLE) else None
        open_paren = self._expect(TokenType.LPAREN, "'(' to open the parameter list")
        receiver = self._parse_receiver()
        params = self._parse_params(after_receiver=receiver is not None)
        close_paren = self._expect(TokenType.RPAREN, "',' or ')'")
        return_type = self._parse_return_type()
        constraint = self._parse_constraint()
        body = self._parse_body()
        return Signature(
            annotations=annotations,
            generics=generics,
            receiver=receiver,
            params=params,
            params_span=open_paren.span.to(close_paren.span),
            return_type=return_type,
            constraint=constraint,
            body=body,
            span=first.span.to(body.span),
        )

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def _parse_annotations(self) -> tuple[Annotation, ...]:
        """Parse zero or more ``#[meta]`` blocks, keeping their bracket spans."""
        annotations: list[Annotation] = []
        while self._check(TokenType.POUND):
            pound = self._advance()
            if self._check(TokenType.BANG):
                raise self._error("Inner attributes are not allowed on a signature", self._current().span)
            if not self._check(TokenType.LBRACKET):
                raise self._unexpected("'[' after '#'")
            open_index = self._pos
            open_bracket = self._current()
            close_bracket = self._skip_balanced()
            meta = self._inner_fragment(open_index)
            if meta is None:
                raise self._error("Empty attribute", open_bracket.span.to(close_bracket.span))
            annotations.append(Annotation(meta=meta, span=pound.span.to(close_bracket.span)))
        return tuple(annotations)

    # ------------------------------------------------------------------
    # Generic parameters
    # ------------------------------------------------------------------

    def _parse_generics(self) -> Generics:
        """Parse ``<'a, 'b: 'a, T: Bound, const N: usize,>``; lifetimes must come first."""
        open_angle = self._expect(TokenType.LANGLE, "'<'")
        params: list[GenericParam] = []
        seen_non_lifetime = False
        while not self._check(TokenType.RANGLE):
            param = self._parse_generic_param()
            if param.kind == GenericParamKind.LIFETIME and seen_non_lifetime:
                raise self._error(
                    "Lifetime parameters must be declared before type and const parameters",
                    param.text.span,
                )
            seen_non_lifetime = seen_non_lifetime or param.kind != GenericParamKind.LIFETIME
            params.append(param)
            if not self._check(TokenType.RANGLE):
                self._expect(TokenType.COMMA, "',' or '>' in generic parameter list")
        close_angle = self._advance()
        return Generics(params=tuple(params), span=open_angle.span.to(close_angle.span))

    def _parse_generic_param(self) -> GenericParam:
        first = self._current()
        if self._check(TokenType.LIFETIME):
            kind = GenericParamKind.LIFETIME
            name_tok = self._advance()
        elif self._check(TokenType.CONST):
            kind = GenericParamKind.CONST
            self._advance()
            name_tok = self._expect(TokenType.IDENTIFIER, "const parameter name")
            self._expect(TokenType.COLON, "':' after const parameter name")
        elif self._check(TokenType.IDENTIFIER):
            kind = GenericParamKind.TYPE
            name_tok = self._advance()
        else:
            raise self._unexpected("generic parameter")

        bounds: Fragment | None = None
        if kind == GenericParamKind.CONST or self._check(TokenType.COLON):
            if kind != GenericParamKind.CONST:
                self._advance()  # consume :
            bounds = self._collect(_GENERIC_STOP)
            if bounds is None:
                raise self._unexpected("bounds")
        last = self._tokens[self._pos - 1]
        return GenericParam(kind=kind, name=name_tok.value, bounds=bounds, text=self._fragment(first, last))

    # ------------------------------------------------------------------
    # Receiver
    # ------------------------------------------------------------------

    def _parse_receiver(self) -> Receiver | None:
        """Recognize a leading ``self`` parameter using at most three tokens of lookahead.

        Anything that is not one of the receiver shapes falls back to ordinary
        parameter parsing: ``&x: &u8`` and ``mut x: u8`` are patterns, not receivers.
        """
        t0, t1, t2 = self._peek_type(0), self._peek_type(1), self._peek_type(2)
        if t0 == TokenType.AMPERSAND:
            if t1 == TokenType.SELF or (t1 == TokenType.MUT and t2 == TokenType.SELF):
                return self._parse_implicit_reference()
            if t1 == TokenType.LIFETIME:
                # `&'a` never starts a pattern, so this must be a receiver.
                return self._parse_implicit_reference()
            return None
        if t0 == TokenType.SELF:
            return self._parse_by_value(explicit=t1 == TokenType.COLON)
        if t0 == TokenType.MUT and t1 == TokenType.SELF:
            return self._parse_by_value(explicit=t2 == TokenType.COLON)
        return None

    def _parse_implicit_reference(self) -> Receiver:
        first = self._advance()  # &
        lifetime = self._advance().value if self._check(TokenType.LIFETIME) else None
        mutable = self._check(TokenType.MUT)
        if mutable:
            self._advance()
        last = self._expect(TokenType.SELF, "'self' in reference receiver")
        return Receiver(
            kind=ReceiverKind.IMPLICIT,
            reference=True,
            mutable=mutable,
            lifetime=lifetime,
            text=self._fragment(first, last),
        )

    def _parse_by_value(self, explicit: bool) -> Receiver:
        first = self._current()
        mutable = self._check(TokenType.MUT)
        if mutable:
            self._advance()
        last = self._expect(TokenType.SELF, "'self'")
        if not explicit:
            return Receiver(kind=ReceiverKind.IMPLICIT, mutable=mutable, text=self._fragment(first, last))
        self._expect(TokenType.COLON, "':' after 'self'")
        receiver_type = self._collect(_PARAM_STOP)
        if receiver_type is None:
            raise self._unexpected("receiver type")
        return Receiver(
            kind=ReceiverKind.EXPLICIT,
            mutable=mutable,
            type=receiver_type,
            text=self._fragment(first, self._tokens[self._pos - 1]),
        )

    # ------------------------------------------------------------------
    # Ordinary parameters
    # ------------------------------------------------------------------

    def _parse_params(self, after_receiver: bool) -> tuple[Parameter, ...]:
        """Parse comma-separated ``pattern: Type`` pairs up to (not including) ')'."""
        params: list[Parameter] = []
        need_comma = after_receiver
        while not self._check(TokenType.RPAREN):
            if need_comma:
                self._expect(TokenType.COMMA, "',' or ')'")
                if self._check(TokenType.RPAREN):
                    break
            params.append(self._parse_param())
            need_comma = True
        return tuple(params)

    def _parse_param(self) -> Parameter:
        pattern = self._collect(_PATTERN_STOP)
        if pattern is None:
            raise self._unexpected("parameter pattern")
        self._expect(TokenType.COLON, "':' after parameter pattern")
        param_type = self._collect(_PARAM_STOP)
        if param_type is None:
            raise self._unexpected("parameter type")
        return Parameter(pattern=pattern, type=param_type)

    # ------------------------------------------------------------------
    # Return type, constraint clause and body
    # ------------------------------------------------------------------

    def _parse_return_type(self) -> Fragment | None:
        if not self._check(TokenType.ARROW):
            return None
        self._advance()
        return_type = self._collect(_RETURN_STOP)
        if return_type is None:
            raise self._unexpected("return type after '->'")
        return return_type

    def _parse_constraint(self) -> Fragment | None:
        """Parse ``where [raw]`` or a bare ``where raw`` running up to the body."""
        if not self._check(TokenType.WHERE):
            return None
        where = self._advance()
        if self._check(TokenType.LBRACKET):
            open_index = self._pos
            self._skip_balanced()
            return self._inner_fragment(open_index)
        constraint = self._collect(_WHERE_STOP, before_signature=True)
        if constraint is None:
            raise self._error("Expected constraints after 'where'", where.span)
        return constraint

    def _parse_body(self) -> Fragment:
        if not self._check(TokenType.LBRACE):
            raise self._unexpected("'{' to open the function body")
        open_brace = self._current()
        close_brace = self._skip_balanced()
        return self._fragment(open_brace, close_brace)

    def _inner_fragment(self, open_index: int) -> Fragment | None:
        """Return the tokens strictly between the group opened at *open_index* and
        the closer just consumed, or None if there are none.
        """
        first_index = open_index + 1
        last_index = self._pos - 2
        if last_index < first_index:
            return None
        return self._fragment(self._tokens[first_index], self._tokens[last_index])


# ################
# Implementation
# ################

_GENERIC_STOP = frozenset({TokenType.COMMA, TokenType.RANGLE})
_PATTERN_STOP = frozenset({TokenType.COLON, TokenType.COMMA})
_PARAM_STOP = frozenset({TokenType.COMMA})
_RETURN_STOP = frozenset({TokenType.WHERE, TokenType.LBRACE, TokenType.COMMA})
_WHERE_STOP = frozenset({TokenType.LBRACE})
