"""Flutter Steering - on-demand guidance selection for the Flutter Expert persona."""

from steering.errors import (
    ConfigurationError,
    ContentNotFoundError,
    SteeringError,
    UnknownPatternSyntaxError,
)
from steering.models import CatalogEntry, GuidanceDocument
from steering.registry import TriggerRegistry
from steering.resolver import RequestContext, Resolution, Resolver, resolve
from steering.session import LoadedSet

__version__ = "0.1.0"

__all__ = [
    "CatalogEntry",
    "ConfigurationError",
    "ContentNotFoundError",
    "GuidanceDocument",
    "LoadedSet",
    "RequestContext",
    "Resolution",
    "Resolver",
    "SteeringError",
    "TriggerRegistry",
    "UnknownPatternSyntaxError",
    "resolve",
]
