# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source locations and verbatim source fragments."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class Span(BaseModel):
    """A region of source text.

    Attributes:
        start: 0-based offset of the first character.
        end: 0-based offset one past the last character.
        line: 1-based line number of the first character.
        column: 1-based column number of the first character.
    """

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    line: int
    column: int

    def to(self, other: Span) -> Span:
        """Return the span covering this span through the end of *other*."""
        return Span(start=self.start, end=other.end, line=self.line, column=self.column)


class Fragment(BaseModel):
    """A verbatim slice of source text together with where it came from.

    Fragments are never interpreted; generators re-emit their ``text`` as is.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    span: Span

    def __str__(self) -> str:
        return self.text
