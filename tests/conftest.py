"""Shared pytest fixtures for flutter-steering tests."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from steering.models import CatalogEntry
from steering.registry import TriggerRegistry

# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture
def flutter_entries() -> list[CatalogEntry]:
    """Small Flutter catalog used across resolver tests."""
    return [
        CatalogEntry(
            id="bloc-state",
            manual_triggers=["state", "cubit", "bloc", "emit"],
            auto_trigger_patterns=["*cubit*.dart", "*bloc*.dart", "*state*.dart"],
            content_ref="steering/bloc-state.md",
        ),
        CatalogEntry(
            id="gorouter-navigation",
            manual_triggers=["routes", "navigation", "go_router"],
            auto_trigger_patterns=["*router*.dart"],
            content_ref="steering/gorouter-navigation.md",
        ),
        CatalogEntry(
            id="testing",
            manual_triggers=["test", "widget test", "mocktail"],
            auto_trigger_patterns=["*_test.dart"],
            content_ref="steering/testing.md",
        ),
        CatalogEntry(
            id="performance",
            manual_triggers=["performance", "jank"],
            content_ref="steering/performance.md",
        ),
    ]


@pytest.fixture
def registry(flutter_entries: list[CatalogEntry]) -> TriggerRegistry:
    """Registry built from flutter_entries."""
    return TriggerRegistry.load(flutter_entries)


@pytest.fixture
def catalog_dir(tmp_path: Path, flutter_entries: list[CatalogEntry]) -> Path:
    """Write flutter_entries as catalog.yaml plus content files under tmp_path."""
    root = tmp_path / "catalog"
    (root / "steering").mkdir(parents=True)

    documents = []
    for entry in flutter_entries:
        documents.append(
            {
                "id": entry.id,
                "manualTriggers": entry.manual_triggers,
                "autoTriggerPatterns": entry.auto_trigger_patterns,
                "contentRef": entry.content_ref,
            }
        )
        (root / entry.content_ref).write_text(
            f"---\ninclusion: manual\n---\n\n# {entry.id}\n\nGuidance for {entry.id}.\n",
            encoding="utf-8",
        )

    with open(root / "catalog.yaml", "w", encoding="utf-8") as f:
        yaml.safe_dump({"documents": documents}, f, sort_keys=False)
    return root


# =============================================================================
# Workspace Fixtures
# =============================================================================


@pytest.fixture
def flutter_project(tmp_path: Path) -> Path:
    """A minimal Flutter project tree."""
    root = tmp_path / "app"
    files = [
        "pubspec.yaml",
        "README.md",
        "lib/main.dart",
        "lib/features/auth/auth_cubit.dart",
        "lib/features/auth/auth_screen.dart",
        ".dart_tool/package_config.json",
        "build/app/outputs/flutter-apk/app_router.dart",
    ]
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")
    return root


@pytest.fixture
def clean_env():
    """Run with no STEERING_* environment variables set."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("STEERING_")}
    with patch.dict(os.environ, env, clear=True):
        yield
