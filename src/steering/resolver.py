"""
Steering Resolver

Decides which guidance documents to load for one turn of a session.

Resolution Algorithm:
1. Tokenise the request signal against the registry's keyword vocabulary
2. Manual candidates: documents whose keywords appear in the signal
3. Auto candidates: documents whose patterns match a workspace path
4. Union of both (a document matched twice counts once)
5. Drop documents already loaded in this session
6. Order: auto-triggered first, then manual-only, ties by id

The resolver is pure. It never mutates the LoadedSet it is given; the
caller records the returned ids once the content has been injected.
Only positively matched documents are ever returned, and an empty result
means "base profile only".
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from steering.registry import TriggerRegistry
from steering.session import LoadedSet

logger = logging.getLogger(__name__)

# Word tokens; inner '-', '_' and '.' keep names like go_router or pubspec.yaml whole
_TOKEN_PATTERN = re.compile(r"\w+(?:[-.]\w+)*")

SOURCE_AUTO = "auto"
SOURCE_MANUAL = "manual"


@dataclass(frozen=True)
class RequestContext:
    """What the user is working on right now (read-only snapshot)."""

    signal: str = ""
    workspace_paths: frozenset[str] = frozenset()

    @classmethod
    def create(cls, signal: str | None, workspace_paths: Iterable[str] = ()) -> "RequestContext":
        return cls(signal=signal or "", workspace_paths=frozenset(workspace_paths))


@dataclass
class Resolution:
    """Outcome of one resolution call, with the evidence behind it."""

    document_ids: list[str] = field(default_factory=list)
    sources: dict[str, str] = field(default_factory=dict)
    matched_keywords: dict[str, list[str]] = field(default_factory=dict)
    matched_paths: dict[str, list[str]] = field(default_factory=dict)
    suppressed: list[str] = field(default_factory=list)
    tokens: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.document_ids)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "documents": list(self.document_ids),
            "count": self.count,
            "resolution_analysis": {
                "tokens": list(self.tokens),
                "sources": dict(self.sources),
                "matched_keywords": dict(self.matched_keywords),
                "matched_paths": dict(self.matched_paths),
                "suppressed_already_loaded": list(self.suppressed),
            },
        }


def extract_tokens(signal: str, vocabulary: Iterable[str], max_words: int = 1) -> list[str]:
    """
    Extract registered keywords from free text.

    Words are lowercased, then joined into space-separated n-grams up to
    max_words long so multi-word keywords ("state management") can match.
    Only exact vocabulary members are kept; there is no substring search.

    Returns:
        Matched keywords in order of first appearance
    """
    vocabulary = set(vocabulary)
    if not signal or not vocabulary:
        return []

    words = _TOKEN_PATTERN.findall(signal.lower())
    found = []
    seen = set()
    for n in range(1, max(max_words, 1) + 1):
        for i in range(len(words) - n + 1):
            candidate = " ".join(words[i:i + n])
            if candidate in vocabulary and candidate not in seen:
                seen.add(candidate)
                found.append(candidate)
    return found


class Resolver:
    """Selects guidance documents from a TriggerRegistry."""

    def __init__(self, registry: TriggerRegistry):
        self.registry = registry

    def explain(self, context: RequestContext, loaded_set: LoadedSet | None = None) -> Resolution:
        """
        Resolve a request and keep the evidence for each decision.

        Args:
            context: Signal and workspace snapshot for this turn
            loaded_set: Documents already loaded in the session (not mutated)

        Returns:
            Resolution with the ordered ids and the matching breakdown
        """
        already_loaded = loaded_set.already_loaded if loaded_set else frozenset()

        tokens = extract_tokens(
            context.signal, self.registry.vocabulary, self.registry.max_keyword_words
        )
        manual = self.registry.keyword_matches(set(tokens))
        auto = self.registry.path_matches(context.workspace_paths)

        candidates = set(manual) | set(auto)
        suppressed = sorted(candidates & set(already_loaded))
        remaining = candidates - set(already_loaded)

        auto_ids = sorted(doc_id for doc_id in remaining if doc_id in auto)
        manual_ids = sorted(doc_id for doc_id in remaining if doc_id not in auto)
        ordered = auto_ids + manual_ids

        resolution = Resolution(
            document_ids=ordered,
            sources={
                doc_id: SOURCE_AUTO if doc_id in auto else SOURCE_MANUAL
                for doc_id in ordered
            },
            matched_keywords={k: v for k, v in manual.items() if k in remaining},
            matched_paths={k: v for k, v in auto.items() if k in remaining},
            suppressed=suppressed,
            tokens=tokens,
        )

        logger.debug(
            f"Resolved {resolution.count} documents "
            f"(auto={auto_ids}, manual={manual_ids}, suppressed={suppressed})"
        )
        return resolution

    def resolve(self, context: RequestContext, loaded_set: LoadedSet | None = None) -> list[str]:
        """Ordered ids of the documents to load this turn."""
        return self.explain(context, loaded_set).document_ids


def resolve(
    signal: str,
    workspace_paths: Iterable[str],
    already_loaded: Iterable[str],
    registry: TriggerRegistry,
) -> list[str]:
    """
    Resolve with plain values.

    Args:
        signal: Free text describing what the user is working on
        workspace_paths: Paths currently known to exist in the workspace
        already_loaded: Ids loaded earlier in the session
        registry: Trigger registry to consult

    Returns:
        Ordered list of document ids to load
    """
    context = RequestContext.create(signal, workspace_paths)
    return Resolver(registry).resolve(context, LoadedSet.of(already_loaded))
