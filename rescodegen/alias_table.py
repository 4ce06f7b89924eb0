"""Flattened view: shortest unique name suffix for every resource."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from rescodegen.errors import InvalidIdentifierError
from rescodegen.resource_key import ResourceKey
from rescodegen.sanitizer import Sanitizer

SUFFIX, QUALIFIED, ORDINAL = 0, 1, 2


@dataclass
class _Candidate:
    key: ResourceKey
    order: int
    depth: int = 1
    level: int = SUFFIX

    def can_extend(self) -> bool:
        return self.level == SUFFIX and self.depth < len(self.key.segments())

    def render(self, sanitizer: Sanitizer) -> str:
        segments = list(self.key.segments())
        if self.level == SUFFIX:
            segments = segments[-self.depth :]
        else:
            segments.append(self.key.kind_tag())
        if self.key.profile:
            segments.append(self.key.profile)
        alias = sanitizer.alias(segments)
        if self.level == ORDINAL:
            alias = sanitizer.check_reserved(f"{alias}_{self.order}")
        return alias


@dataclass
class AliasTable:
    """Injective mapping from alias to ResourceKey."""

    aliases: dict[str, ResourceKey] = field(default_factory=dict)

    def alias_for(self, key: ResourceKey) -> str | None:
        """Return the alias assigned to ``key``."""
        for alias, k in self.aliases.items():
            if k == key:
                return alias
        return None

    def by_key(self) -> dict[ResourceKey, str]:
        """Return the reverse mapping."""
        return {k: alias for alias, k in self.aliases.items()}

    def __len__(self) -> int:
        """Return the number of aliases."""
        return len(self.aliases)


def build_alias_table(
    keys: Iterable[ResourceKey], sanitizer: Sanitizer | None = None
) -> AliasTable:
    """Assign aliases to ``keys``, given earliest origin first.

    Colliding keys grow their suffix one segment at a time. A key that can no
    longer grow keeps the alias when it is the earliest among those that
    cannot; the others fall back to full qualification plus kind tag, then
    to an ordinal.
    """
    sanitizer = sanitizer or Sanitizer()
    candidates = [_Candidate(key, order) for order, key in enumerate(keys)]

    while True:
        groups: dict[str, list[_Candidate]] = {}
        for c in candidates:
            groups.setdefault(c.render(sanitizer), []).append(c)

        changed = False
        for members in groups.values():
            if len(members) == 1:
                continue
            growing = [c for c in members if c.can_extend()]
            for c in growing:
                c.depth += 1
                changed = True
            if growing:
                continue
            for c in sorted(members, key=lambda m: m.order)[1:]:
                if c.level < ORDINAL:
                    c.level += 1
                    changed = True
        if not changed:
            break

    table = AliasTable()
    for alias, members in groups.items():
        if len(members) > 1:
            names = ", ".join(m.key.display_name() for m in members)
            msg = f"Cannot assign a unique alias '{alias}' to {names}"
            raise InvalidIdentifierError(msg)
        table.aliases[alias] = members[0].key
    return table
