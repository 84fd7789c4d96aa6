"""
Steering Models - Data classes for catalog entries and guidance documents.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from steering.triggers import Trigger, TriggerKind


class Inclusion(str, Enum):
    """Inclusion mode declared in steering frontmatter (informational)."""

    ALWAYS = "always"
    FILE_MATCH = "fileMatch"
    MANUAL = "manual"


@dataclass
class CatalogEntry:
    """One raw catalog entry, before validation."""

    id: str
    manual_triggers: list[str] = field(default_factory=list)
    auto_trigger_patterns: list[str] = field(default_factory=list)
    content_ref: str | None = None
    description: str = ""
    inclusion: Inclusion | None = None
    source: Path | None = None  # File the entry was read from

    def to_dict(self) -> dict:
        """Convert to catalog-format dictionary."""
        return {
            "id": self.id,
            "manualTriggers": list(self.manual_triggers),
            "autoTriggerPatterns": list(self.auto_trigger_patterns),
            "contentRef": self.content_ref,
            "description": self.description,
            "inclusion": self.inclusion.value if self.inclusion else None,
        }


@dataclass(frozen=True)
class GuidanceDocument:
    """A validated guidance document held by the trigger registry.

    The payload itself is never held here; content_ref is handed to a
    content loader by whoever injects the document.
    """

    id: str
    content_ref: str | None
    triggers: tuple[Trigger, ...]
    description: str = ""
    inclusion: Inclusion | None = None

    def trigger(self, kind: TriggerKind) -> Trigger | None:
        for trigger in self.triggers:
            if trigger.kind is kind:
                return trigger
        return None

    @property
    def manual_triggers(self) -> frozenset[str]:
        trigger = self.trigger(TriggerKind.KEYWORD)
        return trigger.keywords if trigger else frozenset()

    @property
    def auto_trigger_patterns(self) -> tuple[str, ...]:
        trigger = self.trigger(TriggerKind.PATH_GLOB)
        return tuple(p.pattern for p in trigger.patterns) if trigger else ()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "content_ref": self.content_ref,
            "description": self.description,
            "inclusion": self.inclusion.value if self.inclusion else None,
            "triggers": [t.to_dict() for t in self.triggers],
        }
