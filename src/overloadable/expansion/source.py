# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry points that expand overloadable invocations.

``expand_free`` and ``expand_member`` take the body of one invocation and
select the generator; ``expand_source`` finds every ``overloadable!`` and
``overloadable_member!`` call in a Rust file and replaces it in place.
Each invocation expands in isolation: a malformed one is replaced by a
``compile_error!`` and does not affect its neighbours.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from overloadable.errors import ExpansionError
from overloadable.generator.common import Expansion, GeneratorOptions
from overloadable.generator.free import generate_free
from overloadable.generator.member import generate_member
from overloadable.model.entities import Invocation
from overloadable.model.spans import Span
from overloadable.parser.grammar import parse_invocation
from overloadable.parser.lexer import Token, TokenType, tokenize
from overloadable.validation.checks import ValidationWarning, check_feature_gates, validate

# ###############
# Public Interface
# ###############

FREE_MACRO = "overloadable"
MEMBER_MACRO = "overloadable_member"


class InvocationKind(enum.Enum):
    """Which entry point an invocation was written against."""

    FREE = FREE_MACRO
    MEMBER = MEMBER_MACRO


@dataclass(frozen=True)
class ExpandedInvocation:
    """Outcome of expanding one macro call found in a source file.

    Attributes:
        kind: Free or member form, from the macro name used.
        span: The whole call, including a trailing ';' where one was consumed.
        invocation: The parsed invocation, or None if parsing failed.
        expansion: The generated items, or None on failure.
        error: The failure, or None on success.
    """

    kind: InvocationKind
    span: Span
    invocation: Invocation | None = None
    expansion: Expansion | None = None
    error: ExpansionError | None = None


@dataclass
class SourceExpansion:
    """Result of expanding every invocation in a source file.

    Attributes:
        text: The rewritten source text.
        invocations: One entry per macro call, in source order.
        warnings: Advisory warnings from validation.
    """

    text: str
    invocations: list[ExpandedInvocation] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def errors(self) -> list[ExpansionError]:
        return [inv.error for inv in self.invocations if inv.error is not None]


def expand_free(source: str, options: GeneratorOptions | None = None) -> Expansion:
    """Expand the body of an ``overloadable!`` invocation.

    Raises:
        ExpansionError: On any lexical, header, signature or receiver error.
    """
    return generate_free(parse_invocation(source), options)


def expand_member(source: str, options: GeneratorOptions | None = None) -> Expansion:
    """Expand the body of an ``overloadable_member!`` invocation.

    Raises:
        ExpansionError: On any lexical, header or signature error.
    """
    return generate_member(parse_invocation(source), options)


def expand_source(text: str, options: GeneratorOptions | None = None) -> SourceExpansion:
    """Expand every overloadable invocation in a Rust source file.

    Text outside of invocations is preserved byte for byte.

    Args:
        text: Rust source text.
        options: Generator options applied to every invocation.

    Returns:
        The rewritten text together with per-invocation outcomes and warnings.

    Raises:
        LexerError: If the file as a whole cannot be tokenized.
    """
    tokens = tokenize(text)
    result = SourceExpansion(text=text)
    pieces: list[str] = []
    cursor = 0
    for call in _find_calls(tokens):
        expanded = _expand_call(text, tokens, call, options)
        result.invocations.append(expanded)
        if expanded.invocation is not None:
            result.warnings.extend(validate(expanded.invocation).warnings)
        pieces.append(text[cursor : call.start.start])
        pieces.append(_replacement(expanded))
        cursor = call.end.end
    pieces.append(text[cursor:])
    result.text = "".join(pieces)
    if any(inv.kind == InvocationKind.FREE for inv in result.invocations):
        result.warnings.extend(check_feature_gates(text))
    return result


# ################
# Implementation
# ################


@dataclass(frozen=True)
class _Call:
    kind: InvocationKind
    start: Token
    end: Token
    open_index: int
    close_index: int


_MACRO_KINDS: dict[str, InvocationKind] = {
    FREE_MACRO: InvocationKind.FREE,
    MEMBER_MACRO: InvocationKind.MEMBER,
}

_GROUPS: dict[TokenType, TokenType] = {
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
}


def _find_calls(tokens: list[Token]) -> list[_Call]:
    """Locate ``[path::]overloadable[_member]! <group>`` calls, outermost only."""
    calls: list[_Call] = []
    index = 0
    while index < len(tokens) - 2:
        tok = tokens[index]
        if (
            tok.type == TokenType.IDENTIFIER
            and tok.value in _MACRO_KINDS
            and tokens[index + 1].type == TokenType.BANG
            and tokens[index + 2].type in _GROUPS
        ):
            close_index = _matching_close(tokens, index + 2)
            if close_index is not None:
                end = tokens[close_index]
                if tokens[index + 2].type != TokenType.LBRACE and tokens[close_index + 1].type == TokenType.SEMICOLON:
                    end = tokens[close_index + 1]
                calls.append(
                    _Call(
                        kind=_MACRO_KINDS[tok.value],
                        start=tokens[_path_start(tokens, index)],
                        end=end,
                        open_index=index + 2,
                        close_index=close_index,
                    )
                )
                index = close_index + 1
                continue
        index += 1
    return calls


def _path_start(tokens: list[Token], index: int) -> int:
    """Walk back over a ``a::b::`` (optionally ``::``-rooted) path prefix."""
    while (
        index >= 2
        and tokens[index - 1].type == TokenType.PATH_SEP
        and tokens[index - 2].type == TokenType.IDENTIFIER
    ):
        index -= 2
    if index >= 1 and tokens[index - 1].type == TokenType.PATH_SEP:
        index -= 1
    return index


def _matching_close(tokens: list[Token], open_index: int) -> int | None:
    stack: list[TokenType] = []
    for index in range(open_index, len(tokens)):
        tok = tokens[index]
        if tok.type in _GROUPS:
            stack.append(_GROUPS[tok.type])
        elif stack and tok.type == stack[-1]:
            stack.pop()
            if not stack:
                return index
    return None


def _expand_call(
    text: str,
    tokens: list[Token],
    call: _Call,
    options: GeneratorOptions | None,
) -> ExpandedInvocation:
    closer = tokens[call.close_index]
    inner = tokens[call.open_index + 1 : call.close_index]
    inner.append(Token(TokenType.EOF, "", closer.line, closer.column, closer.start, closer.start))
    span = call.start.span.to(call.end.span)
    try:
        invocation = parse_invocation(text, inner)
        if call.kind == InvocationKind.FREE:
            expansion = generate_free(invocation, options)
        else:
            expansion = generate_member(invocation, options)
    except ExpansionError as exc:
        return ExpandedInvocation(kind=call.kind, span=span, error=exc)
    return ExpandedInvocation(kind=call.kind, span=span, invocation=invocation, expansion=expansion)


def _replacement(expanded: ExpandedInvocation) -> str:
    if expanded.expansion is not None:
        return expanded.expansion.render().rstrip("\n")
    assert expanded.error is not None
    message = str(expanded.error).replace("\\", "\\\\").replace('"', '\\"')
    return f'compile_error!("{message}");'
