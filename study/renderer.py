"""
Board and tree rendering: pure projections of session state into views.

Nothing here mutates state or touches storage. Each call builds a complete
view from scratch (all 64 squares, every arrow, a fresh SVG document), so
rendering the same state twice yields equal results and there is never any
stale overlay to clean up.

Geometry follows the browser client: a BOARD_SIZE_PX square with rank 8 at
the top and file a on the left. square_center() and square_at() convert
between square names and pixel coordinates in that frame.
"""

from dataclasses import dataclass
from typing import Literal

import chess
import chess.svg

from study.annotations import AnnotationStore
from study.constants import (
    ARROW_COLOR,
    ARROW_WIDTH_PX,
    BOARD_SIZE_PX,
    DARK_SQUARE,
    FILES,
    HIGHLIGHT_FILL,
    LIGHT_SQUARE,
    PIECE_ASSET_PREFIX,
    SQUARE_SIZE_PX,
)
from study.course_tree import CourseTree
from study.rules import PieceCode, RulesEngine


# ---------------------------------------------------------------------------
# View types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SquareView:
    """
    One rendered square.

    Attributes:
        name:      Algebraic square name.
        shade:     LIGHT_SQUARE or DARK_SQUARE (checkerboard parity).
        piece:     (color, kind) pair, or None for an empty square.
        image:     Asset path for the piece glyph, or None.
        highlight: Overlay colour when highlighted, else None.
    """

    name: str
    shade: str
    piece: PieceCode | None
    image: str | None
    highlight: str | None


@dataclass(frozen=True)
class ArrowSegment:
    """A straight arrow between two square centres, in board pixels."""

    from_square: str
    to_square: str
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = ARROW_COLOR
    width: int = ARROW_WIDTH_PX


@dataclass(frozen=True)
class BoardView:
    """Everything the client needs to draw the board."""

    fen: str
    squares: tuple[SquareView, ...]
    arrows: tuple[ArrowSegment, ...]
    svg: str


@dataclass(frozen=True)
class TreeRow:
    """
    One line of the course tree view.

    Position rows carry the full (course, chapter, position) path so the
    client can request a load; course and chapter rows leave the unused
    indices as None.
    """

    kind: Literal["course", "chapter", "position"]
    label: str
    course: str
    chapter: int | None = None
    position: int | None = None


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def square_center(square: str) -> tuple[float, float]:
    """Pixel centre of a square (origin top-left, rank 8 at the top)."""
    sq = chess.parse_square(square)
    file_index = chess.square_file(sq)
    rank_index = chess.square_rank(sq)
    return (
        file_index * SQUARE_SIZE_PX + SQUARE_SIZE_PX / 2,
        (7 - rank_index) * SQUARE_SIZE_PX + SQUARE_SIZE_PX / 2,
    )


def square_at(x: float, y: float) -> str | None:
    """Square under a pixel coordinate, or None outside the board."""
    if not (0 <= x < BOARD_SIZE_PX and 0 <= y < BOARD_SIZE_PX):
        return None
    file_index = int(x // SQUARE_SIZE_PX)
    rank_index = 7 - int(y // SQUARE_SIZE_PX)
    return f"{FILES[file_index]}{rank_index + 1}"


def piece_image(piece: PieceCode) -> str:
    """Asset path for a piece glyph, e.g. /static/pieces/wp.svg."""
    color, kind = piece
    return f"{PIECE_ASSET_PREFIX}/{color}{kind}.svg"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_board(rules: RulesEngine, annotations: AnnotationStore) -> BoardView:
    """
    Project the board and its overlays into a BoardView.

    Squares are listed top-left first: rank 8 to rank 1, file a to file h.
    Arrows ignore pieces and obstructions entirely.
    """
    highlighted = set(annotations.highlights)
    squares = []
    for row, cells in enumerate(rules.grid()):
        rank_index = 7 - row
        for file_index, piece in enumerate(cells):
            name = f"{FILES[file_index]}{rank_index + 1}"
            squares.append(
                SquareView(
                    name=name,
                    shade=LIGHT_SQUARE if (rank_index + file_index) % 2 else DARK_SQUARE,
                    piece=piece,
                    image=piece_image(piece) if piece else None,
                    highlight=HIGHLIGHT_FILL if name in highlighted else None,
                )
            )

    segments = []
    for arrow in annotations.arrows:
        x1, y1 = square_center(arrow.from_square)
        x2, y2 = square_center(arrow.to_square)
        segments.append(ArrowSegment(arrow.from_square, arrow.to_square, x1, y1, x2, y2))

    return BoardView(
        fen=rules.fen(),
        squares=tuple(squares),
        arrows=tuple(segments),
        svg=render_svg(rules, annotations),
    )


def render_svg(rules: RulesEngine, annotations: AnnotationStore) -> str:
    """SVG drawing of the board with highlight fills and arrows."""
    return chess.svg.board(
        rules.board,
        fill={chess.parse_square(sq): HIGHLIGHT_FILL for sq in annotations.highlights},
        arrows=[
            chess.svg.Arrow(
                chess.parse_square(a.from_square),
                chess.parse_square(a.to_square),
                color=ARROW_COLOR,
            )
            for a in annotations.arrows
        ],
        size=BOARD_SIZE_PX,
        coordinates=False,
    )


def render_tree(tree: CourseTree) -> list[TreeRow]:
    """Flatten the course tree into display rows, in stored order."""
    rows = []
    for name, course in tree.courses.items():
        rows.append(TreeRow("course", f"📘 {name}", name))
        for ci, chapter in enumerate(course.chapters):
            rows.append(TreeRow("chapter", f"📂 {chapter.title}", name, ci))
            for pi, _position in enumerate(chapter.positions):
                rows.append(TreeRow("position", f"♟ Position {pi + 1}", name, ci, pi))
    return rows
