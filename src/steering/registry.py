"""Trigger Registry

Immutable index from guidance documents to their trigger definitions.
Built once at startup; afterwards it only answers lookups and can be shared
across sessions and threads without synchronization.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator

from steering.errors import ConfigurationError, UnknownPatternSyntaxError
from steering.models import CatalogEntry, GuidanceDocument
from steering.triggers import Trigger, TriggerKind, match_trigger, normalize_keyword

logger = logging.getLogger(__name__)


def _build_document(entry: CatalogEntry) -> GuidanceDocument:
    """
    Validate one entry and compile its triggers.

    Raises:
        ConfigurationError: If the entry has no usable trigger
        UnknownPatternSyntaxError: If an auto-trigger pattern is invalid
    """
    triggers = []

    keyword_trigger = Trigger.keyword(entry.manual_triggers)
    if not keyword_trigger.is_empty:
        triggers.append(keyword_trigger)

    try:
        glob_trigger = Trigger.path_glob(entry.auto_trigger_patterns)
    except UnknownPatternSyntaxError as e:
        raise UnknownPatternSyntaxError(e.pattern, e.reason, document_id=entry.id) from e
    if not glob_trigger.is_empty:
        triggers.append(glob_trigger)

    if not triggers:
        raise ConfigurationError(
            "has no manual triggers and no auto-trigger patterns, so it can never be selected",
            document_id=entry.id,
            rule="empty-triggers",
        )

    return GuidanceDocument(
        id=entry.id,
        content_ref=entry.content_ref,
        triggers=tuple(triggers),
        description=entry.description,
        inclusion=entry.inclusion,
    )


class TriggerRegistry:
    """Read-only index of guidance documents and their triggers."""

    def __init__(self, documents: Iterable[GuidanceDocument] = ()):
        by_id: dict[str, GuidanceDocument] = {}
        by_keyword: dict[str, set[str]] = {}

        for document in documents:
            by_id[document.id] = document
            for keyword in document.manual_triggers:
                by_keyword.setdefault(keyword, set()).add(document.id)

        self._documents = MappingProxyType(by_id)
        self._by_keyword = MappingProxyType(
            {k: frozenset(ids) for k, ids in by_keyword.items()}
        )
        self._vocabulary = frozenset(self._by_keyword)
        self._max_keyword_words = max(
            (len(k.split(" ")) for k in self._vocabulary), default=1
        )

    @classmethod
    def load(cls, catalog: Iterable[CatalogEntry]) -> "TriggerRegistry":
        """
        Validate a catalog and build the registry.

        Args:
            catalog: Entries in catalog order

        Returns:
            TriggerRegistry instance

        Raises:
            ConfigurationError: On duplicate ids or a document without triggers
            UnknownPatternSyntaxError: On an unparsable auto-trigger pattern
        """
        documents = []
        seen: dict[str, CatalogEntry] = {}

        for entry in catalog:
            if not entry.id or not entry.id.strip():
                raise ConfigurationError("catalog entry has an empty id", rule="missing-id")
            if entry.id in seen:
                first = seen[entry.id].source or "catalog"
                raise ConfigurationError(
                    f"declared more than once (first declared in {first})",
                    document_id=entry.id,
                    rule="duplicate-id",
                )
            seen[entry.id] = entry
            documents.append(_build_document(entry))

        registry = cls(documents)
        logger.info(
            f"Trigger registry loaded: {len(registry)} documents, "
            f"{len(registry.vocabulary)} keywords"
        )
        return registry

    @property
    def vocabulary(self) -> frozenset[str]:
        """Union of every document's manual keywords (normalised)."""
        return self._vocabulary

    @property
    def max_keyword_words(self) -> int:
        """Word count of the longest registered keyword."""
        return self._max_keyword_words

    @property
    def document_ids(self) -> list[str]:
        return list(self._documents)

    def get(self, document_id: str) -> GuidanceDocument | None:
        return self._documents.get(document_id)

    def documents_matching_keyword(self, token: str) -> set[str]:
        """Ids whose manual triggers contain token (case-insensitive exact match)."""
        return set(self._by_keyword.get(normalize_keyword(token), ()))

    def documents_matching_paths(self, paths: Iterable[str]) -> set[str]:
        """Ids with at least one auto-trigger pattern matching at least one path."""
        return set(self.path_matches(paths))

    def path_matches(self, paths: Iterable[str]) -> dict[str, list[str]]:
        """
        Evaluate every PATH_GLOB trigger against the workspace paths.

        Returns:
            Mapping of document id to the paths that fired its trigger
        """
        paths = list(paths)
        matches = {}
        if not paths:
            return matches

        for document in self._documents.values():
            trigger = document.trigger(TriggerKind.PATH_GLOB)
            if trigger is None:
                continue
            evidence = match_trigger(trigger, set(), paths)
            if evidence:
                matches[document.id] = evidence
        return matches

    def keyword_matches(self, tokens: set[str]) -> dict[str, list[str]]:
        """
        Evaluate every KEYWORD trigger against request tokens.

        Returns:
            Mapping of document id to the keywords that fired its trigger
        """
        matches = {}
        if not tokens:
            return matches

        for document in self._documents.values():
            trigger = document.trigger(TriggerKind.KEYWORD)
            if trigger is None:
                continue
            evidence = match_trigger(trigger, tokens, ())
            if evidence:
                matches[document.id] = evidence
        return matches

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def __iter__(self) -> Iterator[GuidanceDocument]:
        return iter(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)
