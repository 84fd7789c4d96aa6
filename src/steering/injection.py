"""
Steering Injection

The caller side of resolution: resolve a turn, fetch the selected payloads
and record them in the session's LoadedSet, then format them for the
assistant's context.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from steering.content import ContentLoader
from steering.registry import TriggerRegistry
from steering.resolver import RequestContext, Resolution, Resolver
from steering.session import LoadedSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InjectedDocument:
    """A selected document together with its payload."""

    id: str
    source: str  # "auto" or "manual"
    content: str
    description: str = ""


class SteeringSession:
    """
    One conversation's view of the steering catalog.

    Owns its LoadedSet; the registry and content loader may be shared
    between sessions.
    """

    def __init__(
        self,
        registry: TriggerRegistry,
        content_loader: ContentLoader,
        loaded_set: LoadedSet | None = None,
    ):
        self.registry = registry
        self.content_loader = content_loader
        self.loaded_set = loaded_set if loaded_set is not None else LoadedSet()
        self.resolver = Resolver(registry)
        self.last_resolution: Resolution | None = None

    def next_turn(self, signal: str, workspace_paths: Iterable[str] = ()) -> list[InjectedDocument]:
        """
        Select, load and record the documents for this turn.

        Content is fetched for every selected document before any id is
        recorded, so a failed load leaves the LoadedSet untouched.

        Raises:
            ContentNotFoundError: If a selected document has no payload
        """
        context = RequestContext.create(signal, workspace_paths)
        resolution = self.resolver.explain(context, self.loaded_set)
        self.last_resolution = resolution

        documents = []
        for document_id in resolution.document_ids:
            document = self.registry.get(document_id)
            documents.append(
                InjectedDocument(
                    id=document_id,
                    source=resolution.sources[document_id],
                    content=self.content_loader.load(document_id),
                    description=document.description if document else "",
                )
            )

        self.loaded_set.mark_loaded(resolution.document_ids)
        if documents:
            logger.info(
                f"Injected {len(documents)} steering documents: {resolution.document_ids}"
            )
        return documents

    def end(self) -> None:
        """End the session; everything becomes loadable again."""
        self.loaded_set.clear()
        self.last_resolution = None


def format_injection(documents: list[InjectedDocument]) -> str:
    """
    Format injected documents for the assistant's context.

    Returns:
        Tagged text block, or an empty string when nothing was selected
    """
    if not documents:
        return ""

    output_parts = []
    output_parts.append(f'<steering count="{len(documents)}">\n')
    for document in documents:
        output_parts.append(f'<document id="{document.id}" trigger="{document.source}">\n')
        if document.description:
            output_parts.append(f"<summary>{document.description}</summary>\n")
        output_parts.append("<content>\n")
        output_parts.append(document.content)
        output_parts.append("\n</content>\n")
        output_parts.append("</document>\n")
    output_parts.append("</steering>")
    return "".join(output_parts)
