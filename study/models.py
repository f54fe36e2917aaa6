"""
Pydantic models for everything that crosses the persistence boundary.

On the wire, session keys are camelCase (activeCourse, activeChapter,
activePosition) and arrows are {"from", "to"} objects. Field names on the
Python side are snake_case; aliases carry the wire names.

Square names are checked against python-chess's square table on the way in.
A blob that fails validation is rejected as a whole by the storage layer,
which then falls back to defaults rather than half-loading it.
"""

from typing import Annotated

import chess
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _check_square(name: str) -> str:
    """Reject anything that is not an algebraic square name ("a1".."h8")."""
    if name not in chess.SQUARE_NAMES:
        raise ValueError(f"not a square name: {name!r}")
    return name


SquareName = Annotated[str, AfterValidator(_check_square)]


class Arrow(BaseModel):
    """
    One annotation arrow between two squares.

    Arrows are drawn as straight segments between square centres. The pair is
    stored as drawn; duplicates are allowed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_square: SquareName = Field(alias="from")
    to_square: SquareName = Field(alias="to")


class Position(BaseModel):
    """
    A saved study position.

    Fields:
        fen:         Board state in Forsyth-Edwards Notation.
        explanation: Free-text note shown alongside the position.
        arrows:      Annotation arrows captured when the position was saved.
        highlights:  Highlighted squares captured when the position was saved.
    """

    model_config = ConfigDict(frozen=True)

    fen: str
    explanation: str = ""
    arrows: list[Arrow] = Field(default_factory=list)
    highlights: list[SquareName] = Field(default_factory=list)


class Chapter(BaseModel):
    """A titled, ordered list of positions (insertion order is study order)."""

    title: str = ""
    positions: list[Position] = Field(default_factory=list)


class Course(BaseModel):
    """An ordered list of chapters. The course name is its key in the tree."""

    chapters: list[Chapter] = Field(default_factory=list)


class SessionState(BaseModel):
    """
    Snapshot of the live board session.

    Rewritten on every board change and read back once at startup.

    Fields:
        fen:             Current board position.
        arrows:          Arrows currently drawn on the board.
        highlights:      Squares currently highlighted.
        active_course:   Name of the active course, or None.
        active_chapter:  Chapter index of the loaded position, or None.
        active_position: Position index of the loaded position, or None.
    """

    model_config = ConfigDict(populate_by_name=True)

    fen: str
    arrows: list[Arrow] = Field(default_factory=list)
    highlights: list[SquareName] = Field(default_factory=list)
    active_course: str | None = Field(default=None, alias="activeCourse")
    active_chapter: int | None = Field(default=None, alias="activeChapter")
    active_position: int | None = Field(default=None, alias="activePosition")

    @property
    def position_ref(self) -> tuple[str, int, int] | None:
        """The (course, chapter, position) path when all three parts are set."""
        if (
            self.active_course is None
            or self.active_chapter is None
            or self.active_position is None
        ):
            return None
        return self.active_course, self.active_chapter, self.active_position
