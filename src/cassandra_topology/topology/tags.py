"""
Role tag rules.

Why this file exists
The inventory attaches free form role tags to every host. Only two shapes
matter to us:

- the generic membership tag, for example cassandra
- ring qualified tags, the prefix followed by a ring name, for example cassandra_myring

Everything else (tagserve, web, cassandra_ with nothing after it) is ignored.
We keep the rules as a closed enum so the resolver never guesses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from cassandra_topology.config import TopologyConfig


class TagShape(str, Enum):
    """
    Recognized tag shapes.

    membership
      The literal generic tag. Required for any ring membership.

    ring
      Prefix plus a non empty ring name.

    other
      Anything else. Never an error.
    """

    membership = "membership"
    ring = "ring"
    other = "other"


@dataclass(frozen=True)
class TagMatch:
    """Classification of one tag. ring_name is set only for TagShape.ring."""

    shape: TagShape
    ring_name: str | None = None


@dataclass(frozen=True)
class TagRules:
    """Tag matcher built from configuration."""

    membership_tag: str
    ring_tag_prefix: str

    @classmethod
    def from_config(cls, config: TopologyConfig) -> TagRules:
        return cls(membership_tag=config.membership_tag, ring_tag_prefix=config.ring_tag_prefix)

    def classify(self, tag: str) -> TagMatch:
        """Return the shape of a single tag."""
        if tag == self.membership_tag:
            return TagMatch(TagShape.membership)
        if tag.startswith(self.ring_tag_prefix):
            name = tag[len(self.ring_tag_prefix):]
            if name:
                return TagMatch(TagShape.ring, ring_name=name)
        return TagMatch(TagShape.other)

    def is_member(self, tags: Iterable[str]) -> bool:
        """True when the generic membership tag is present."""
        return any(self.classify(t).shape is TagShape.membership for t in tags)

    def ring_names(self, tags: Iterable[str]) -> frozenset[str]:
        """Ring names named by ring qualified tags, regardless of membership."""
        names = set()
        for tag in tags:
            match = self.classify(tag)
            if match.shape is TagShape.ring and match.ring_name is not None:
                names.add(match.ring_name)
        return frozenset(names)
