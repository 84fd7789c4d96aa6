"""Steering error taxonomy.

Construction-time errors are fatal: a registry is never built from an
invalid catalog. Nothing in here is raised by resolution itself.
"""


class SteeringError(Exception):
    """Base class for steering errors."""
    pass


class ConfigurationError(SteeringError):
    """Raised when a catalog or config file is structurally invalid."""

    def __init__(self, message: str, document_id: str | None = None, rule: str | None = None):
        self.document_id = document_id
        self.rule = rule
        if document_id is not None:
            message = f"Document '{document_id}': {message}"
        if rule is not None:
            message = f"{message} [{rule}]"
        super().__init__(message)


class UnknownPatternSyntaxError(ConfigurationError):
    """Raised when an auto-trigger pattern cannot be parsed as a glob."""

    def __init__(self, pattern: str, reason: str, document_id: str | None = None):
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            f"invalid glob pattern {pattern!r}: {reason}",
            document_id=document_id,
            rule="pattern-syntax",
        )


class ContentNotFoundError(SteeringError):
    """Raised when a content loader cannot find a document payload."""
    pass
