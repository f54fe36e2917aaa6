"""
Course tree: course name → ordered chapters → ordered positions.

The tree only ever grows. Courses are keyed by name, chapters are appended
to the active course, and positions are appended to the *last* chapter of
the active course. There is no separate "chapter being edited" pointer:
after navigating to an older chapter, a newly saved position still lands in
the most recently added one.

Mutating methods return True when the tree changed so the owning session
can persist and re-render only on real changes.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from study.models import Arrow, Chapter, Course, Position

_log = logging.getLogger(__name__)


class PositionNotFoundError(LookupError):
    """Raised when a (course, chapter, position) path does not exist."""

    def __init__(self, course: str, chapter_index: int, position_index: int) -> None:
        super().__init__(
            f"no position at {course!r} / chapter {chapter_index} / position {position_index}"
        )
        self.course = course
        self.chapter_index = chapter_index
        self.position_index = position_index


class CourseTree:
    """
    The full set of courses plus the active-course pointer.

    Attributes:
        active_course: Name of the course that receives new chapters and
                       positions, or None before any course is created or
                       loaded.
    """

    def __init__(self, courses: dict[str, Course] | None = None) -> None:
        self._courses: dict[str, Course] = dict(courses or {})
        self.active_course: str | None = None

    @property
    def courses(self) -> Mapping[str, Course]:
        """Read-only view of the courses, in creation order."""
        return MappingProxyType(self._courses)

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def create_course(self, name: str) -> bool:
        """
        Insert an empty course and make it active.

        An empty name is ignored. An existing name is overwritten and its
        chapters are discarded.
        """
        if not name:
            return False
        if name in self._courses:
            _log.info("Overwriting existing course %r", name)
        self._courses[name] = Course()
        self.active_course = name
        return True

    def add_chapter(self, title: str) -> bool:
        """Append an empty chapter to the active course (no-op without one)."""
        course = self._active()
        if course is None:
            return False
        course.chapters.append(Chapter(title=title))
        return True

    def save_position(
        self,
        fen: str,
        explanation: str,
        arrows: list[Arrow],
        highlights: list[str],
    ) -> bool:
        """
        Append a position to the last chapter of the active course.

        Copies of the annotation lists are stored, so later edits to the live
        board never leak into saved positions.

        Returns:
            False (and nothing stored) when there is no active course or the
            active course has no chapter yet.
        """
        course = self._active()
        if course is None:
            return False
        if not course.chapters:
            _log.warning("Course %r has no chapter; position not saved", self.active_course)
            return False
        course.chapters[-1].positions.append(
            Position(
                fen=fen,
                explanation=explanation,
                arrows=list(arrows),
                highlights=list(highlights),
            )
        )
        return True

    def replace_all(self, courses: Mapping[str, Course]) -> None:
        """Swap in a freshly loaded tree and drop the active-course pointer."""
        self._courses = dict(courses)
        self.active_course = None

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def get_position(self, course: str, chapter_index: int, position_index: int) -> Position:
        """
        Fetch a saved position by path.

        Indices are validated before access; negative indices are rejected
        rather than counted from the end.

        Raises:
            PositionNotFoundError: Unknown course or index out of range.
        """
        entry = self._courses.get(course)
        if entry is None or not 0 <= chapter_index < len(entry.chapters):
            raise PositionNotFoundError(course, chapter_index, position_index)
        positions = entry.chapters[chapter_index].positions
        if not 0 <= position_index < len(positions):
            raise PositionNotFoundError(course, chapter_index, position_index)
        return positions[position_index]

    def to_dict(self) -> dict[str, Course]:
        """Shallow copy of the name → course mapping, for serialization."""
        return dict(self._courses)

    def _active(self) -> Course | None:
        if self.active_course is None:
            return None
        return self._courses.get(self.active_course)
