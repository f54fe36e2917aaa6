"""
Interaction controller: turns pointer events into board edits.

Two independent little state machines live here:

    Selection:  Idle --click(sq)--> Selected(sq)
                Selected(sq) --click(sq2)--> Idle   (after trying sq→sq2)

    Arrow drag: NoDrag --secondary press(sq)--> Dragging(sq)
                Dragging(sq) --secondary release(sq2)--> NoDrag  (arrow sq→sq2)

Setup mode overrides the selection machine: every click removes whatever
piece stands on the clicked square. Shift-clicks outside setup mode toggle
highlights and leave the selection alone.

Any edit that can change what is drawn ends in session.state_changed(),
which persists the snapshot and triggers a re-render. Illegal moves still
notify; the board is simply unchanged.
"""

import logging

from study.constants import SECONDARY_BUTTON
from study.session import StudySession

_log = logging.getLogger(__name__)


class InteractionController:
    """
    Routes clicks and secondary-button drags to the session.

    Attributes:
        session:         The application context being edited.
        setup_mode:      When True, clicks remove pieces instead of moving.
        selected_square: Origin square of a pending move, or None.
        arrow_start:     Square where a secondary-button drag began, or None.
    """

    def __init__(self, session: StudySession) -> None:
        self.session = session
        self.setup_mode: bool = False
        self.selected_square: str | None = None
        self.arrow_start: str | None = None

    # -----------------------------------------------------------------------
    # Pointer events
    # -----------------------------------------------------------------------

    def click(self, square: str, modified: bool = False) -> None:
        """
        Handle a primary click on a square.

        Args:
            square:   Clicked square name.
            modified: True when the highlight modifier (shift) was held.
        """
        if self.setup_mode:
            self.session.rules.remove(square)
            self.session.state_changed()
            return

        if modified:
            self.session.annotations.toggle_highlight(square)
            self.session.state_changed()
            return

        if self.selected_square is None:
            self.selected_square = square
            return

        origin, self.selected_square = self.selected_square, None
        if not self.session.rules.try_move(origin, square):
            _log.debug("Ignored move %s%s", origin, square)
        self.session.state_changed()

    def press(self, square: str, button: int) -> None:
        """Secondary-button press starts an arrow; other buttons are ignored."""
        if button == SECONDARY_BUTTON:
            self.arrow_start = square

    def release(self, square: str, button: int) -> None:
        """Secondary-button release finishes an arrow started by press()."""
        if button != SECONDARY_BUTTON or self.arrow_start is None:
            return
        start, self.arrow_start = self.arrow_start, None
        self.session.annotations.add_arrow(start, square)
        self.session.state_changed()

    # -----------------------------------------------------------------------
    # Tools
    # -----------------------------------------------------------------------

    def toggle_setup(self) -> bool:
        """Flip setup mode and return the new value."""
        self.setup_mode = not self.setup_mode
        return self.setup_mode

    def clear_board(self) -> None:
        self.session.rules.clear()
        self.session.state_changed()

    def reset_board(self) -> None:
        self.session.rules.reset()
        self.session.state_changed()
