"""
Study session: the single application context that owns all mutable state.

Every piece of live state (board, overlays, course tree, explanation text,
active position reference) hangs off one StudySession instance. The web
layer creates exactly one and hands it to the InteractionController; nothing
is module-global.

Rendering never writes to storage. Mutations call one of two hooks instead:

    state_changed() : persists the session snapshot, then runs every
                       registered state listener (typically a re-render).
    tree_changed()  : persists the course tree, then runs every registered
                       tree listener (typically a tree-view re-render).

Everything runs synchronously on the caller's thread; listeners must not
call back into a mutation.
"""

import logging
from collections.abc import Callable

from study.annotations import AnnotationStore
from study.course_tree import CourseTree, PositionNotFoundError
from study.models import SessionState
from study.rules import RulesEngine
from study.storage import Persistence

_log = logging.getLogger(__name__)

Listener = Callable[[], None]


class StudySession:
    """
    Application context for one study board.

    Attributes:
        rules:           Board wrapper (python-chess).
        annotations:     Arrows and highlights on the live board.
        tree:            Course tree, including the active-course pointer.
        persistence:     Typed storage for tree and session snapshot.
        explanation:     Text of the explanation field for the loaded position.
        active_chapter:  Chapter index of the loaded position, or None.
        active_position: Position index of the loaded position, or None.
    """

    def __init__(self, persistence: Persistence) -> None:
        self.rules = RulesEngine()
        self.annotations = AnnotationStore()
        self.tree = CourseTree()
        self.persistence = persistence
        self.explanation: str = ""
        self.active_chapter: int | None = None
        self.active_position: int | None = None
        self._state_listeners: list[Listener] = []
        self._tree_listeners: list[Listener] = []

    # -----------------------------------------------------------------------
    # Notification
    # -----------------------------------------------------------------------

    def on_state_changed(self, listener: Listener) -> None:
        """Register a callback run after every session snapshot is saved."""
        self._state_listeners.append(listener)

    def on_tree_changed(self, listener: Listener) -> None:
        """Register a callback run after every course tree save."""
        self._tree_listeners.append(listener)

    def state_changed(self) -> None:
        """Persist the session snapshot and notify state listeners."""
        self.persistence.save_state(self.snapshot())
        for listener in self._state_listeners:
            listener()

    def tree_changed(self) -> None:
        """Persist the course tree and notify tree listeners."""
        self.persistence.save_courses(self.tree.to_dict())
        for listener in self._tree_listeners:
            listener()

    def snapshot(self) -> SessionState:
        """Current session state as a serializable model."""
        return SessionState(
            fen=self.rules.fen(),
            arrows=list(self.annotations.arrows),
            highlights=list(self.annotations.highlights),
            active_course=self.tree.active_course,
            active_chapter=self.active_chapter,
            active_position=self.active_position,
        )

    # -----------------------------------------------------------------------
    # Course actions
    # -----------------------------------------------------------------------

    def create_course(self, name: str) -> bool:
        """
        Create an empty course and make it the active one.

        The loaded chapter/position reference belonged to the previous active
        course, so it is dropped and the session snapshot is saved again.

        Returns:
            False (nothing changed) for an empty name.
        """
        if not self.tree.create_course(name):
            return False
        _log.info("Created course %r", name)
        self.active_chapter = None
        self.active_position = None
        self.tree_changed()
        self.state_changed()
        return True

    def add_chapter(self, title: str) -> bool:
        """Append a chapter to the active course. False when no course is active."""
        if not self.tree.add_chapter(title):
            return False
        _log.info("Added chapter %r to course %r", title, self.tree.active_course)
        self.tree_changed()
        return True

    def save_position(self, explanation: str) -> bool:
        """
        Store the live board in the last chapter of the active course.

        On success the live arrows and highlights are cleared, so the next
        position starts without overlays.

        Returns:
            False when there is no active course or it has no chapter yet.
        """
        saved = self.tree.save_position(
            self.rules.fen(),
            explanation,
            self.annotations.arrows,
            self.annotations.highlights,
        )
        if not saved:
            return False
        self.explanation = explanation
        self.annotations.clear()
        self.tree_changed()
        self.state_changed()
        return True

    def load_position(self, course: str, chapter_index: int, position_index: int) -> None:
        """
        Make a saved position the live board.

        The board, arrows, highlights and explanation are replaced exactly by
        the stored copies, whatever was shown before.

        Raises:
            PositionNotFoundError: The path does not exist. Nothing is changed.
        """
        position = self.tree.get_position(course, chapter_index, position_index)
        if not self.rules.load(position.fen):
            self.rules.reset()
        self.annotations.replace(position.arrows, position.highlights)
        self.explanation = position.explanation
        self.tree.active_course = course
        self.active_chapter = chapter_index
        self.active_position = position_index
        self.state_changed()

    # -----------------------------------------------------------------------
    # Startup
    # -----------------------------------------------------------------------

    def restore(self) -> None:
        """
        Rebuild the session from storage.

        With no stored state the session keeps its defaults (starting
        position, no overlays). A stored reference to a position that no
        longer exists resets everything to those defaults.
        """
        self.tree.replace_all(self.persistence.load_courses())
        state = self.persistence.load_state()
        if state is None:
            _log.info("No stored session; starting from the initial position")
            return

        if not self.rules.load(state.fen):
            self.rules.reset()
        self.annotations.replace(state.arrows, state.highlights)
        if state.active_course in self.tree.courses:
            self.tree.active_course = state.active_course

        ref = state.position_ref
        if ref is None:
            _log.info("Restored session at %s", self.rules.fen())
            return
        try:
            self.load_position(*ref)
        except PositionNotFoundError as exc:
            _log.warning("Stale session reference (%s); falling back to defaults", exc)
            self._reset_defaults()
            return
        _log.info("Restored session at %s / chapter %d / position %d", *ref)

    def _reset_defaults(self) -> None:
        self.rules.reset()
        self.annotations.clear()
        self.explanation = ""
        self.tree.active_course = None
        self.active_chapter = None
        self.active_position = None
