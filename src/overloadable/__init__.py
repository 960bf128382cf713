# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compile-time overload sets for Rust, expanded from a small declaration DSL."""

from overloadable.errors import (
    ExpansionError,
    LexerError,
    MalformedHeader,
    MalformedSignature,
    ReceiverNotAllowed,
    format_diagnostic,
)
from overloadable.expansion.source import SourceExpansion, expand_free, expand_member, expand_source
from overloadable.generator import Expansion, GeneratorOptions, generate_free, generate_member
from overloadable.parser import parse_invocation, parse_signature, tokenize

__all__ = [
    # Parsing
    "tokenize",
    "parse_invocation",
    "parse_signature",
    # Generation
    "GeneratorOptions",
    "Expansion",
    "generate_free",
    "generate_member",
    # Entry points
    "expand_free",
    "expand_member",
    "expand_source",
    "SourceExpansion",
    # Errors
    "ExpansionError",
    "LexerError",
    "MalformedHeader",
    "MalformedSignature",
    "ReceiverNotAllowed",
    "format_diagnostic",
]
