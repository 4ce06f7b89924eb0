"""Logic for sanitizing resource names into Python identifiers."""

import keyword
import re

from rescodegen.errors import InvalidIdentifierError

CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class Sanitizer:
    """Sanitizes namespace segments and names into emission identifiers."""

    def __init__(self, reserved: list[str] | frozenset[str] | None = None) -> None:
        """Initialize the sanitizer with identifiers that may never be emitted."""
        self.reserved = set(reserved or [])

    def normalize(self, token: str) -> str:
        """Normalize a token, raising ``InvalidIdentifierError`` when impossible."""
        clean = self._chars(token)

        # 2. Keywords
        if keyword.iskeyword(clean):
            clean += "_"

        # 3. Reserved check
        self.check_reserved(clean, token)
        return clean

    def _chars(self, token: str) -> str:
        # 1. Sanitize chars (Keep A-Z, a-z, 0-9, _)
        clean = re.sub(r"[^A-Za-z0-9_]", "_", token.strip())
        if not clean.strip("_"):
            msg = f"'{token}' has no identifier characters"
            raise InvalidIdentifierError(msg)
        if clean[0].isdigit():
            msg = f"'{token}' starts with a digit"
            raise InvalidIdentifierError(msg)
        return clean

    def _upper(self, token: str) -> str:
        return CAMEL_BOUNDARY_RE.sub("_", self._chars(token)).upper()

    def check_reserved(self, identifier: str, token: str | None = None) -> str:
        """Reject configured reserved identifiers."""
        if identifier in self.reserved:
            msg = f"'{token or identifier}' maps to reserved identifier '{identifier}'"
            raise InvalidIdentifierError(msg)
        return identifier

    def module(self, segment: str) -> str:
        """Return the module name of a namespace segment."""
        return self.normalize(segment)

    def constant(self, name: str, profile: str | None = None) -> str:
        """Return the upper-case constant name of a resource."""
        base = self._upper(name)
        if profile:
            base += "_" + self._upper(profile)
        return self.check_reserved(base, name)

    def function(self, name: str, profile: str | None = None) -> str:
        """Return the function name of a template resource."""
        base = self.normalize(name)
        if profile:
            base += "_" + self._chars(profile).lower()
        return self.check_reserved(base, name)

    def alias(self, segments: list[str] | tuple[str, ...]) -> str:
        """Join sanitized segments into an upper-case alias."""
        return self.check_reserved("_".join(self._upper(s) for s in segments))
