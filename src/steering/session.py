"""Session State

LoadedSet records which guidance documents a session has already loaded.
It is created empty at session start, grows as the caller injects
documents, and is cleared only when the session ends. Documents are never
unloaded when the workspace changes.

Session stores persist one LoadedSet per session id. Every session gets
an independent instance; nothing is shared between sessions.
"""

import hashlib
import json
import logging
import re
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

from steering.errors import SteeringError

logger = logging.getLogger(__name__)

# Session ids become file names; anything outside this set is replaced
_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass
class LoadedSet:
    """Ids of the documents loaded earlier in one session."""

    already_loaded: set[str] = field(default_factory=set)

    @classmethod
    def of(cls, ids: Iterable[str] | None) -> "LoadedSet":
        return cls(already_loaded=set(ids or ()))

    def mark_loaded(self, ids: Iterable[str]) -> None:
        """Record documents the caller has just injected."""
        self.already_loaded.update(ids)

    def clear(self) -> None:
        """End of session."""
        self.already_loaded.clear()

    def copy(self) -> "LoadedSet":
        return LoadedSet(already_loaded=set(self.already_loaded))

    def __contains__(self, document_id: object) -> bool:
        return document_id in self.already_loaded

    def __len__(self) -> int:
        return len(self.already_loaded)


class SessionStore(ABC):
    """Persists a LoadedSet per session id."""

    @abstractmethod
    def get(self, session_id: str) -> LoadedSet:
        """Return the session's LoadedSet (empty for a new session)."""
        pass

    @abstractmethod
    def save(self, session_id: str, loaded_set: LoadedSet) -> None:
        pass

    @abstractmethod
    def clear(self, session_id: str) -> None:
        """Forget a session (its next get() starts empty)."""
        pass

    @abstractmethod
    def session_ids(self) -> list[str]:
        pass


class InMemorySessionStore(SessionStore):
    """Process-local session store for long-running hosts."""

    def __init__(self):
        self._sessions: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> LoadedSet:
        with self._lock:
            return LoadedSet.of(self._sessions.get(session_id, ()))

    def save(self, session_id: str, loaded_set: LoadedSet) -> None:
        with self._lock:
            self._sessions[session_id] = set(loaded_set.already_loaded)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def session_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)


class FileSessionStore(SessionStore):
    """
    JSON-file session store, one file per session.

    Used by the prompt hook, which runs as a fresh process on every turn.

    File format:
        {"session_id": "...", "already_loaded": ["bloc-state"], "updated_at": "..."}
    """

    def __init__(self, store_dir: Path):
        self.store_dir = Path(store_dir)
        self._lock = threading.Lock()

    def _path(self, session_id: str) -> Path:
        if not session_id:
            raise SteeringError("Session id must not be empty")
        # The digest keeps ids that sanitise alike ("a/b", "a_b") in separate files
        safe_id = _UNSAFE_ID_CHARS.sub("_", session_id)
        digest = hashlib.sha256(session_id.encode("utf-8")).hexdigest()[:12]
        return self.store_dir / f"{safe_id}-{digest}.json"

    def _read(self, path: Path) -> dict | None:
        """Return the stored payload, or None when the file is corrupt."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt session file {path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring corrupt session file {path}: expected a JSON object")
            return None
        loaded = data.get("already_loaded", [])
        if not isinstance(loaded, list) or not all(isinstance(i, str) for i in loaded):
            logger.warning(f"Ignoring corrupt session file {path}: bad 'already_loaded'")
            return None
        return data

    def get(self, session_id: str) -> LoadedSet:
        path = self._path(session_id)
        if not path.exists():
            return LoadedSet()

        # A corrupt file only costs re-injecting documents
        data = self._read(path)
        if data is None:
            return LoadedSet()
        return LoadedSet.of(data.get("already_loaded", []))

    def save(self, session_id: str, loaded_set: LoadedSet) -> None:
        path = self._path(session_id)
        payload = {
            "session_id": session_id,
            "already_loaded": sorted(loaded_set.already_loaded),
            "updated_at": datetime.now().isoformat(),
        }
        with self._lock:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            tmp_path.replace(path)
        logger.debug(f"Saved session {session_id}: {payload['already_loaded']}")

    def clear(self, session_id: str) -> None:
        path = self._path(session_id)
        with self._lock:
            if path.exists():
                path.unlink()
                logger.info(f"Cleared session {session_id}")

    def session_ids(self) -> list[str]:
        if not self.store_dir.exists():
            return []
        ids = []
        for path in sorted(self.store_dir.glob("*.json")):
            data = self._read(path)
            session_id = data.get("session_id") if data else None
            ids.append(session_id if isinstance(session_id, str) else path.stem)
        return ids
