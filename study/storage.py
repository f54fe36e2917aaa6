"""
Persistence: a JSON-file key-value store and the typed layer on top of it.

KeyValueStore mimics browser localStorage: string keys, string values, one
flat namespace. It is backed by a single JSON object on disk and rewritten
in full on every set (temp file + os.replace, so a crash mid-write never
leaves a truncated file behind).

Persistence knows the two records the app uses ("courses" and "state") and
validates them with pydantic on the way back in. Missing and malformed data
are treated the same way: the caller gets the default (empty tree / no
state) and a warning is logged. There is no versioning or migration; the
last write wins.
"""

import json
import logging
import os
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from study.constants import COURSES_KEY, STATE_KEY
from study.models import Course, SessionState

_log = logging.getLogger(__name__)

_COURSES = TypeAdapter(dict[str, Course])


class KeyValueStore:
    """
    String → string store persisted as one JSON object.

    Attributes:
        path: Location of the backing file. Parent directories are created
              on first write.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key (or file) is absent."""
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Raises:
            OSError: The file could not be written.
        """
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            _log.warning("Cannot read storage file %s: %s", self.path, exc)
            return {}
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            _log.warning("Storage file %s is not valid JSON: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            _log.warning("Storage file %s does not hold a JSON object", self.path)
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str)}


class Persistence:
    """Typed save/load of the course tree and the session state."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # -----------------------------------------------------------------------
    # Course tree
    # -----------------------------------------------------------------------

    def save_courses(self, courses: dict[str, Course]) -> None:
        """Serialize the whole tree under the "courses" key."""
        payload = _COURSES.dump_json(courses, by_alias=True).decode("utf-8")
        self.store.set(COURSES_KEY, payload)

    def load_courses(self) -> dict[str, Course]:
        """
        Read the tree back.

        Returns:
            The validated name → course mapping, or an empty mapping when the
            record is absent or fails validation.
        """
        raw = self.store.get(COURSES_KEY)
        if raw is None:
            return {}
        try:
            return _COURSES.validate_json(raw)
        except ValidationError as exc:
            _log.warning("Discarding stored courses: %d validation error(s)", exc.error_count())
            return {}

    # -----------------------------------------------------------------------
    # Session state
    # -----------------------------------------------------------------------

    def save_state(self, state: SessionState) -> None:
        """Serialize the session snapshot under the "state" key."""
        self.store.set(STATE_KEY, state.model_dump_json(by_alias=True))

    def load_state(self) -> SessionState | None:
        """
        Read the session snapshot back.

        Returns:
            The validated snapshot, or None when absent or malformed.
        """
        raw = self.store.get(STATE_KEY)
        if raw is None:
            return None
        try:
            return SessionState.model_validate_json(raw)
        except ValidationError as exc:
            _log.warning("Discarding stored session state: %d validation error(s)", exc.error_count())
            return None
