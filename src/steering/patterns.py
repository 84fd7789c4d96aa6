"""Path Glob Patterns

Compiles auto-trigger patterns into anchored regular expressions.

Dialect:
    - Paths are compared in POSIX form ('\\' becomes '/', leading './' dropped).
    - A pattern without '/' is matched against the final path segment only:
      '*cubit*.dart' matches 'lib/features/auth/auth_cubit.dart'.
    - A pattern containing '/' is matched against the whole relative path.
    - '*' matches any run of characters inside one segment, '?' exactly one.
    - '[...]' is a character class ('!' or '^' negates); it never matches '/'.
    - '**' as a whole segment matches zero or more segments.
    - Matching is case-sensitive.

Within a single segment the semantics are those of fnmatch.fnmatchcase.
"""

import re
from functools import lru_cache

from steering.errors import UnknownPatternSyntaxError

# Characters that have meaning inside a regex character class
_CLASS_SPECIAL = re.compile(r"([&~|\\\[])")


def normalize_path(path: str) -> str:
    """Return the POSIX form of a workspace path used for matching."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def _translate_segment(segment: str, pattern: str) -> str:
    parts = []
    i, n = 0, len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c == "*":
            if i < n and segment[i] == "*":
                raise UnknownPatternSyntaxError(
                    pattern, "'**' must occupy a whole path segment"
                )
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            j = i
            if j < n and segment[j] in "!^":
                j += 1
            # A leading ']' is a literal member of the class
            if j < n and segment[j] == "]":
                j += 1
            while j < n and segment[j] != "]":
                j += 1
            if j >= n:
                raise UnknownPatternSyntaxError(pattern, "unterminated character class")
            body = segment[i:j]
            i = j + 1
            negate = body[0] in "!^"
            if negate:
                body = body[1:]
            body = _CLASS_SPECIAL.sub(r"\\\1", body)
            if negate:
                parts.append(f"[^{body}/]")
            else:
                parts.append(f"(?:(?!/)[{body}])")
        else:
            parts.append(re.escape(c))
    return "".join(parts)


def translate(pattern: str) -> str:
    """
    Translate a glob pattern into a regular expression source string.

    Raises:
        UnknownPatternSyntaxError: If the pattern is not valid in this dialect
    """
    if not pattern or not pattern.strip():
        raise UnknownPatternSyntaxError(pattern, "empty pattern")
    if pattern.startswith("/"):
        raise UnknownPatternSyntaxError(pattern, "patterns must be relative")
    if pattern.endswith("/"):
        raise UnknownPatternSyntaxError(pattern, "patterns must not end with '/'")

    segments = pattern.split("/")
    if any(segment == "" for segment in segments):
        raise UnknownPatternSyntaxError(pattern, "empty path segment")

    regex_parts = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "**":
            regex_parts.append(".*" if index == last else "(?:.*/)?")
        else:
            regex_parts.append(_translate_segment(segment, pattern))
            if index != last:
                regex_parts.append("/")
    return "".join(regex_parts)


class PathPattern:
    """A compiled auto-trigger glob pattern."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.basename_only = "/" not in pattern
        source = translate(pattern)
        try:
            self._regex = re.compile(source, re.DOTALL)
        except re.error as e:
            raise UnknownPatternSyntaxError(pattern, str(e)) from e

    def matches(self, path: str) -> bool:
        """Check whether a workspace path matches this pattern."""
        normalized = normalize_path(path)
        if self.basename_only:
            normalized = normalized.rsplit("/", 1)[-1]
        return self._regex.fullmatch(normalized) is not None

    def __eq__(self, other) -> bool:
        return isinstance(other, PathPattern) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"PathPattern({self.pattern!r})"


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> PathPattern:
    """Compile (and cache) a glob pattern."""
    return PathPattern(pattern)
