"""
Trigger definitions.

A trigger is a tagged variant: a KEYWORD trigger holds normalised keywords
matched against request tokens, a PATH_GLOB trigger holds compiled patterns
matched against workspace paths. Both kinds go through match_trigger(), so
no call site dispatches on trigger kind by hand.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from steering.patterns import PathPattern, compile_pattern

_WHITESPACE = re.compile(r"\s+")


class TriggerKind(str, Enum):
    """How a trigger is evaluated."""

    KEYWORD = "keyword"  # Manual: mentioned in the request
    PATH_GLOB = "path_glob"  # Automatic: file present in the workspace


def normalize_keyword(keyword: str) -> str:
    """Lowercase a keyword and collapse inner whitespace."""
    return _WHITESPACE.sub(" ", keyword.strip().lower())


@dataclass(frozen=True)
class Trigger:
    """One trigger set of a guidance document."""

    kind: TriggerKind
    keywords: frozenset[str] = frozenset()
    patterns: tuple[PathPattern, ...] = ()

    @classmethod
    def keyword(cls, keywords: Iterable[str]) -> "Trigger":
        normalized = {normalize_keyword(k) for k in keywords}
        normalized.discard("")
        return cls(kind=TriggerKind.KEYWORD, keywords=frozenset(normalized))

    @classmethod
    def path_glob(cls, patterns: Iterable[str]) -> "Trigger":
        """Build a PATH_GLOB trigger; invalid patterns raise at this point."""
        compiled = []
        seen = set()
        for pattern in patterns:
            if pattern in seen:
                continue
            seen.add(pattern)
            compiled.append(compile_pattern(pattern))
        return cls(kind=TriggerKind.PATH_GLOB, patterns=tuple(compiled))

    @property
    def is_empty(self) -> bool:
        if self.kind is TriggerKind.KEYWORD:
            return not self.keywords
        return not self.patterns

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        if self.kind is TriggerKind.KEYWORD:
            values = sorted(self.keywords)
        else:
            values = [p.pattern for p in self.patterns]
        return {"kind": self.kind.value, "values": values}


def match_trigger(trigger: Trigger, tokens: set[str], paths: Iterable[str]) -> list[str]:
    """
    Evaluate a trigger against request tokens and workspace paths.

    Returns:
        The evidence that fired the trigger: matched keywords for KEYWORD
        triggers, matched paths for PATH_GLOB triggers. Empty when the
        trigger did not fire.
    """
    if trigger.kind is TriggerKind.KEYWORD:
        return sorted(trigger.keywords & tokens)

    matched = []
    for path in paths:
        if any(pattern.matches(path) for pattern in trigger.patterns):
            matched.append(path)
    return sorted(matched)
