# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error conditions raised while expanding an overloadable invocation.

Every error is anchored at the span of the offending token so that the
diagnostic points at the exact malformed fragment, never at the whole
invocation.
"""

from __future__ import annotations

from overloadable.model.spans import Span

# ###############
# Public Interface
# ###############


class ExpansionError(Exception):
    """Base class for all expansion failures.

    Attributes:
        message: Human-readable description without location prefix.
        span: Source span the error is anchored at.
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(f"Line {span.line}, column {span.column}: {message}")
        self.message = message
        self.span = span
        self.line = span.line
        self.column = span.column


class LexerError(ExpansionError):
    """Raised when the scanner encounters an invalid character or unterminated literal."""


class MalformedHeader(ExpansionError):
    """Raised when neither the free nor the member header shape matches."""


class MalformedSignature(ExpansionError):
    """Raised when a mandatory part of a signature is missing or unparsable."""


class ReceiverNotAllowed(ExpansionError):
    """Raised when a free-function signature declares a receiver."""


def format_diagnostic(source: str, error: ExpansionError, path: str | None = None) -> str:
    """Render *error* in a rustc-like layout with a caret under the offending span.

    Args:
        source: The full text the error's span refers to.
        error: The error to render.
        path: Optional file name shown in the location line.

    Returns:
        A multi-line string, without trailing newline.
    """
    span = error.span
    location = f"{path or '<input>'}:{span.line}:{span.column}"
    lines = source.splitlines()
    gutter = " " * len(str(span.line))
    out = [f"error: {error.message}", f"{gutter}--> {location}"]
    if 0 < span.line <= len(lines):
        text = lines[span.line - 1]
        width = max(1, min(span.end - span.start, len(text) - span.column + 1))
        out.append(f"{gutter} |")
        out.append(f"{span.line} | {text}")
        out.append(f"{gutter} | {' ' * (span.column - 1)}{'^' * width}")
    return "\n".join(out)
