# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parsers for overloadable invocations."""

from overloadable.parser.grammar import parse_invocation
from overloadable.parser.lexer import Token, TokenType, tokenize
from overloadable.parser.signature import parse_signature

__all__ = [
    "tokenize",
    "Token",
    "TokenType",
    "parse_invocation",
    "parse_signature",
]
