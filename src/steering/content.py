"""Content Loaders

Fetch guidance payloads by document id. The payload is opaque: loaders
return the text and nothing in the package inspects it beyond removing
steering frontmatter.
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from steering.errors import ContentNotFoundError
from steering.registry import TriggerRegistry

logger = logging.getLogger(__name__)


def strip_frontmatter(content: str) -> str:
    """
    Remove YAML frontmatter from a steering document.

    Args:
        content: Full file content

    Returns:
        Content with frontmatter stripped
    """
    frontmatter_pattern = r"^---\s*\n.*?\n---\s*\n"
    return re.sub(frontmatter_pattern, "", content, count=1, flags=re.DOTALL)


class ContentLoader(ABC):
    """Returns the payload of a guidance document."""

    @abstractmethod
    def load(self, document_id: str) -> str:
        """
        Raises:
            ContentNotFoundError: If the document has no retrievable payload
        """
        pass


class InMemoryContentLoader(ContentLoader):
    """Serves payloads from a dict (embedded catalogs, tests)."""

    def __init__(self, payloads: dict[str, str]):
        self.payloads = dict(payloads)

    def load(self, document_id: str) -> str:
        try:
            return self.payloads[document_id]
        except KeyError:
            raise ContentNotFoundError(f"No content for document '{document_id}'")


class FileContentLoader(ContentLoader):
    """Reads payloads from files named by each document's content_ref.

    Refs are resolved relative to base_dir (the catalog directory) and may
    not escape it.
    """

    def __init__(self, registry: TriggerRegistry, base_dir: Path):
        self.registry = registry
        self.base_dir = Path(base_dir).resolve()

    def path_for(self, document_id: str) -> Path:
        document = self.registry.get(document_id)
        if document is None:
            raise ContentNotFoundError(f"Unknown document '{document_id}'")
        if not document.content_ref:
            raise ContentNotFoundError(f"Document '{document_id}' has no contentRef")

        path = (self.base_dir / document.content_ref).resolve()
        if not path.is_relative_to(self.base_dir):
            raise ContentNotFoundError(
                f"contentRef of '{document_id}' points outside {self.base_dir}"
            )
        return path

    def load(self, document_id: str) -> str:
        path = self.path_for(document_id)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ContentNotFoundError(f"Content file for '{document_id}' not found: {path}")

        logger.debug(f"Loaded content for {document_id} from {path}")
        return strip_frontmatter(content).strip()
