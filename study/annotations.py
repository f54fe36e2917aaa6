"""
Annotation store: the arrows and highlights drawn on the current position.

Highlights behave like a set (toggle on, toggle off, never duplicated) but
keep insertion order so saved positions serialize deterministically. Arrows
are a plain list; the same arrow may be drawn twice.
"""

from study.models import Arrow


class AnnotationStore:
    """In-memory overlay state for the live board."""

    def __init__(self) -> None:
        self.arrows: list[Arrow] = []
        self.highlights: list[str] = []

    def toggle_highlight(self, square: str) -> bool:
        """
        Flip a square's highlight membership.

        Returns:
            True if the square is highlighted after the call.
        """
        if square in self.highlights:
            self.highlights = [sq for sq in self.highlights if sq != square]
            return False
        self.highlights.append(square)
        return True

    def add_arrow(self, from_square: str, to_square: str) -> Arrow:
        """Append an arrow (duplicates allowed) and return it."""
        arrow = Arrow(from_square=from_square, to_square=to_square)
        self.arrows.append(arrow)
        return arrow

    def replace(self, arrows: list[Arrow], highlights: list[str]) -> None:
        """Swap in copies of the given overlays (duplicate highlights dropped)."""
        self.arrows = list(arrows)
        self.highlights = list(dict.fromkeys(highlights))

    def clear(self) -> None:
        """Drop all arrows and highlights."""
        self.arrows = []
        self.highlights = []
