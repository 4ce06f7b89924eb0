"""Splitting string literals into literal fragments and ``@kind/path`` tokens."""

import re
from dataclasses import dataclass

# @kind/path where path is one or more word segments joined by '/'.
# A trailing '/' is left to the following literal text.
REFERENCE_TOKEN_RE = re.compile(
    r"@([A-Za-z][A-Za-z0-9_-]*)/([A-Za-z0-9_]+(?:/[A-Za-z0-9_]+)*)"
)


@dataclass(frozen=True)
class LiteralSegment:
    """Literal text copied verbatim into the resolved value."""

    text: str


@dataclass(frozen=True)
class ReferenceToken:
    """A reference to another resource by kind tag and slash separated path."""

    kind_tag: str
    path: str

    def render(self) -> str:
        """Return the token as it appears in source."""
        return f"@{self.kind_tag}/{self.path}"


Segment = LiteralSegment | ReferenceToken


@dataclass(frozen=True)
class ReferenceExpression:
    """Ordered literal fragments and reference tokens of one string value."""

    segments: tuple[Segment, ...]

    def has_references(self) -> bool:
        """Return True when at least one token must be resolved."""
        return any(isinstance(s, ReferenceToken) for s in self.segments)

    def literal_text(self) -> str:
        """Concatenate the segments, rendering tokens as written."""
        return "".join(
            s.text if isinstance(s, LiteralSegment) else s.render()
            for s in self.segments
        )


def parse_reference_expression(text: str) -> ReferenceExpression:
    """Scan ``text`` for reference tokens.

    Always returns an expression; text without tokens becomes a single
    literal segment (or no segment at all for the empty string).
    """
    segments: list[Segment] = []
    pos = 0
    for m in REFERENCE_TOKEN_RE.finditer(text):
        if m.start() > pos:
            segments.append(LiteralSegment(text[pos : m.start()]))
        segments.append(ReferenceToken(m.group(1).lower(), m.group(2)))
        pos = m.end()
    if pos < len(text):
        segments.append(LiteralSegment(text[pos:]))
    return ReferenceExpression(tuple(segments))
