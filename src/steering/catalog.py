"""Steering Catalog Loader

Reads the guidance catalog from disk. Two sources are supported:

Catalog file (YAML):
    documents:
      - id: bloc-state
        manualTriggers: [state, cubit, bloc, emit]
        autoTriggerPatterns: ["*cubit*.dart", "*bloc*.dart"]
        contentRef: steering/bloc-state.md

Steering directory (Markdown + YAML frontmatter):
    ---
    id: bloc-state                 # optional, defaults to file stem
    inclusion: fileMatch
    fileMatchPattern: ["*cubit*.dart", "*bloc*.dart"]
    keywords: [state, cubit, bloc, emit]
    description: BLoC and Cubit state management
    ---

    # Markdown Content

The loader only parses structure. Validation (unique ids, non-empty
triggers, pattern syntax) belongs to TriggerRegistry.load().
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from steering.errors import ConfigurationError
from steering.models import CatalogEntry, Inclusion
from steering.registry import TriggerRegistry

logger = logging.getLogger(__name__)

CATALOG_FILENAME = "catalog.yaml"

FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n(.*))?$", re.DOTALL)

# Accepted spellings for each catalog field (first one is canonical)
_FIELD_ALIASES = {
    "manual_triggers": ("manualTriggers", "manual_triggers", "keywords"),
    "auto_trigger_patterns": (
        "autoTriggerPatterns",
        "auto_trigger_patterns",
        "fileMatchPattern",
    ),
    "content_ref": ("contentRef", "content_ref"),
}


def get_bundled_catalog_path() -> Path:
    """Return the Flutter Expert catalog shipped with the package."""
    return Path(__file__).parent / "data" / CATALOG_FILENAME


def _field(raw: dict[str, Any], name: str, default: Any = None) -> Any:
    for alias in _FIELD_ALIASES[name]:
        if alias in raw:
            return raw[alias]
    return default


def _as_string_list(value: Any, entry_id: str, field_name: str) -> list[str]:
    """Accept a single string or a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigurationError(
        f"'{field_name}' must be a string or a list of strings",
        document_id=entry_id,
        rule="field-type",
    )


def _parse_inclusion(value: Any, entry_id: str) -> Inclusion | None:
    if value is None:
        return None
    try:
        return Inclusion(value)
    except ValueError:
        allowed = [i.value for i in Inclusion]
        raise ConfigurationError(
            f"unknown inclusion {value!r} (expected one of {allowed})",
            document_id=entry_id,
            rule="field-type",
        )


def parse_entry(raw: Any, source: Path | None = None, default_id: str | None = None) -> CatalogEntry:
    """
    Build a CatalogEntry from a raw mapping.

    Raises:
        ConfigurationError: If the entry is not a mapping or a field has the wrong type
    """
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"catalog entry must be a mapping, got {type(raw).__name__}",
            rule="entry-type",
        )

    entry_id = raw.get("id", default_id)
    if not isinstance(entry_id, str) or not entry_id.strip():
        raise ConfigurationError(
            f"catalog entry from {source or 'catalog'} has no id", rule="missing-id"
        )
    entry_id = entry_id.strip()

    content_ref = _field(raw, "content_ref")
    if content_ref is not None and not isinstance(content_ref, str):
        raise ConfigurationError(
            "'contentRef' must be a string", document_id=entry_id, rule="field-type"
        )

    return CatalogEntry(
        id=entry_id,
        manual_triggers=_as_string_list(
            _field(raw, "manual_triggers"), entry_id, "manualTriggers"
        ),
        auto_trigger_patterns=_as_string_list(
            _field(raw, "auto_trigger_patterns"), entry_id, "autoTriggerPatterns"
        ),
        content_ref=content_ref,
        description=str(raw.get("description", "") or ""),
        inclusion=_parse_inclusion(raw.get("inclusion"), entry_id),
        source=source,
    )


def load_catalog_file(catalog_path: Path) -> list[CatalogEntry]:
    """
    Load catalog entries from a YAML catalog file.

    Args:
        catalog_path: Path to catalog.yaml

    Returns:
        Entries in file order

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    catalog_path = Path(catalog_path)
    try:
        with open(catalog_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in catalog {catalog_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read catalog {catalog_path}: {e}")

    if isinstance(data, dict):
        documents = data.get("documents", [])
    else:
        documents = data

    if not isinstance(documents, list):
        raise ConfigurationError(
            f"Catalog {catalog_path} must contain a list of documents",
            rule="catalog-shape",
        )

    entries = [parse_entry(raw, source=catalog_path) for raw in documents]
    logger.info(f"Read {len(entries)} catalog entries from {catalog_path}")
    return entries


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Split a Markdown document into YAML frontmatter and body.

    Returns:
        (metadata, body); metadata is empty when there is no frontmatter

    Raises:
        yaml.YAMLError: If the frontmatter is not valid YAML
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text
    metadata = yaml.safe_load(match.group(1)) or {}
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, match.group(2) or ""


def load_steering_directory(steering_dir: Path) -> list[CatalogEntry]:
    """
    Load catalog entries from a directory of Markdown steering files.

    Files are visited in sorted path order so the catalog order is stable.
    Each file becomes its own content ref (relative to steering_dir).

    Raises:
        ConfigurationError: If a file has invalid frontmatter
    """
    steering_dir = Path(steering_dir)
    entries = []
    for file_path in sorted(steering_dir.rglob("*.md")):
        text = file_path.read_text(encoding="utf-8")
        try:
            metadata, _ = parse_frontmatter(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML frontmatter in {file_path}: {e}",
                document_id=file_path.stem,
                rule="frontmatter",
            )

        if _field(metadata, "content_ref") is None:
            metadata["contentRef"] = file_path.relative_to(steering_dir).as_posix()
        entry = parse_entry(metadata, source=file_path, default_id=file_path.stem)
        entries.append(entry)
        logger.debug(f"Read steering file: {entry.id} from {file_path}")

    logger.info(f"Read {len(entries)} steering files from {steering_dir}")
    return entries


def load_catalog(path: Path | None = None) -> list[CatalogEntry]:
    """
    Load catalog entries from a catalog file or a steering directory.

    Args:
        path: catalog.yaml, a directory containing one, or a directory of
            steering Markdown files. Defaults to the bundled catalog.

    Raises:
        ConfigurationError: If nothing loadable exists at path
    """
    path = Path(path) if path else get_bundled_catalog_path()

    if path.is_dir():
        catalog_file = path / CATALOG_FILENAME
        if catalog_file.exists():
            return load_catalog_file(catalog_file)
        return load_steering_directory(path)

    if path.exists():
        return load_catalog_file(path)

    raise ConfigurationError(f"Catalog not found: {path}", rule="catalog-missing")


def get_catalog_base(path: Path | None = None) -> Path:
    """Directory that content refs are resolved against."""
    path = Path(path) if path else get_bundled_catalog_path()
    return path if path.is_dir() else path.parent


def build_registry(path: Path | None = None) -> TriggerRegistry:
    """Load and validate a catalog in one step."""
    return TriggerRegistry.load(load_catalog(path))
