"""
FastAPI web application for the chess study board.

The browser page is a thin client: it forwards pointer events (board pixel
coordinates plus button/modifier) and form actions here, then redraws from
the board view or SVG returned. All study state lives in one StudySession
owned by the app.

Architecture notes:
- Async endpoints with no awaits inside: every request runs to completion on
  the event loop thread before the next one starts, so the session is only
  ever touched by one logical thread. Sync handlers would be dispatched to
  FastAPI's threadpool and could interleave.
- Views are rebuilt by session listeners: state_changed() re-renders the
  board, tree_changed() re-renders the tree. GET routes serve the cached
  views.
- Static files mounted LAST: route registration is first-match, so API routes
  must be registered before the StaticFiles catch-all.
"""

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field

from study.config import Settings, load_settings
from study.controller import InteractionController
from study.course_tree import PositionNotFoundError
from study.renderer import BoardView, render_board, render_tree, square_at
from study.session import StudySession
from study.storage import KeyValueStore, Persistence

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_settings = load_settings()
logging.basicConfig(level=_settings.log_level)
_log = logging.getLogger(__name__)

# Resolved at import time so the working directory does not matter.
_STATIC_DIR = Path(__file__).parent / "static"


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class ClickRequest(BaseModel):
    """
    Primary click on the board.

    Fields:
        x, y:  Pointer position in board pixels (origin top-left).
        shift: True when the highlight modifier was held.
    """

    x: float
    y: float
    shift: bool = False


class PointerRequest(BaseModel):
    """Button press or release on the board (DOM MouseEvent.button numbering)."""

    x: float
    y: float
    button: int = 0


class CourseRequest(BaseModel):
    name: str = ""


class ChapterRequest(BaseModel):
    title: str = ""


class SavePositionRequest(BaseModel):
    explanation: str = ""


class LoadPositionRequest(BaseModel):
    """Path to a saved position, as carried by tree view rows."""

    course: str
    chapter: int = Field(ge=0)
    position: int = Field(ge=0)


class SquareOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    shade: str
    piece: tuple[str, str] | None
    image: str | None
    highlight: str | None


class ArrowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    from_square: str
    to_square: str
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: int


class BoardResponse(BaseModel):
    """
    Full board view plus the interaction state the client displays.

    Fields:
        fen:             Current position.
        squares:         64 squares, rank 8 to rank 1, file a to file h.
        arrows:          Arrow segments in board pixels.
        highlights:      Highlighted square names.
        setup_mode:      Whether clicks currently remove pieces.
        selected_square: Origin of a pending move, if any.
        explanation:     Explanation text of the loaded position.
        active_course / active_chapter / active_position: loaded path.
    """

    fen: str
    squares: list[SquareOut]
    arrows: list[ArrowOut]
    highlights: list[str]
    setup_mode: bool
    selected_square: str | None
    explanation: str
    active_course: str | None
    active_chapter: int | None
    active_position: int | None


class TreeRowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    label: str
    course: str
    chapter: int | None
    position: int | None


class TreeResponse(BaseModel):
    active_course: str | None
    rows: list[TreeRowOut]


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the app around a freshly restored StudySession.

    Args:
        settings: Runtime settings; defaults to the environment.

    Returns:
        A FastAPI app whose routes all share one session and controller.
    """
    settings = settings or _settings
    session = StudySession(Persistence(KeyValueStore(settings.storage_path)))
    session.restore()
    controller = InteractionController(session)

    app = FastAPI(title="Chess Study", version="1.0.0")
    app.state.session = session
    app.state.controller = controller

    def _redraw_board() -> None:
        app.state.board_view = render_board(session.rules, session.annotations)

    def _redraw_tree() -> None:
        app.state.tree_rows = render_tree(session.tree)

    session.on_state_changed(_redraw_board)
    session.on_tree_changed(_redraw_tree)
    _redraw_board()
    _redraw_tree()
    _log.info("Study board ready (storage=%s)", settings.storage_path)

    def _board_response() -> BoardResponse:
        view: BoardView = app.state.board_view
        return BoardResponse(
            fen=view.fen,
            squares=[SquareOut.model_validate(sq) for sq in view.squares],
            arrows=[ArrowOut.model_validate(a) for a in view.arrows],
            highlights=list(session.annotations.highlights),
            setup_mode=controller.setup_mode,
            selected_square=controller.selected_square,
            explanation=session.explanation,
            active_course=session.tree.active_course,
            active_chapter=session.active_chapter,
            active_position=session.active_position,
        )

    def _tree_response() -> TreeResponse:
        return TreeResponse(
            active_course=session.tree.active_course,
            rows=[TreeRowOut.model_validate(row) for row in app.state.tree_rows],
        )

    # -----------------------------------------------------------------------
    # Board routes
    # -----------------------------------------------------------------------

    @app.get("/api/board", response_model=BoardResponse)
    async def get_board() -> BoardResponse:
        return _board_response()

    @app.get("/api/board.svg")
    async def get_board_svg() -> Response:
        return Response(content=app.state.board_view.svg, media_type="image/svg+xml")

    @app.post("/api/pointer/click", response_model=BoardResponse)
    async def pointer_click(request: ClickRequest) -> BoardResponse:
        """Click a square: move, select, toggle a highlight or remove a piece."""
        square = square_at(request.x, request.y)
        if square is not None:
            controller.click(square, modified=request.shift)
        return _board_response()

    @app.post("/api/pointer/down", response_model=BoardResponse)
    async def pointer_down(request: PointerRequest) -> BoardResponse:
        square = square_at(request.x, request.y)
        if square is not None:
            controller.press(square, request.button)
        return _board_response()

    @app.post("/api/pointer/up", response_model=BoardResponse)
    async def pointer_up(request: PointerRequest) -> BoardResponse:
        square = square_at(request.x, request.y)
        if square is not None:
            controller.release(square, request.button)
        return _board_response()

    @app.post("/api/setup/toggle", response_model=BoardResponse)
    async def toggle_setup() -> BoardResponse:
        controller.toggle_setup()
        return _board_response()

    @app.post("/api/board/clear", response_model=BoardResponse)
    async def clear_board() -> BoardResponse:
        controller.clear_board()
        return _board_response()

    @app.post("/api/board/reset", response_model=BoardResponse)
    async def reset_board() -> BoardResponse:
        controller.reset_board()
        return _board_response()

    # -----------------------------------------------------------------------
    # Course routes
    # -----------------------------------------------------------------------

    @app.get("/api/courses", response_model=TreeResponse)
    async def get_courses() -> TreeResponse:
        return _tree_response()

    @app.post("/api/courses", response_model=TreeResponse)
    async def create_course(request: CourseRequest) -> TreeResponse:
        session.create_course(request.name)
        return _tree_response()

    @app.post("/api/chapters", response_model=TreeResponse)
    async def add_chapter(request: ChapterRequest) -> TreeResponse:
        session.add_chapter(request.title)
        return _tree_response()

    @app.post("/api/positions", response_model=TreeResponse)
    async def save_position(request: SavePositionRequest) -> TreeResponse:
        session.save_position(request.explanation)
        return _tree_response()

    @app.post("/api/positions/load", response_model=BoardResponse)
    async def load_position(request: LoadPositionRequest) -> BoardResponse:
        """
        Load a saved position into the live board.

        Raises:
            HTTPException 404: No position at the requested path.
        """
        try:
            session.load_position(request.course, request.chapter, request.position)
        except PositionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _board_response()

    @app.get("/", include_in_schema=False)
    def serve_root() -> FileResponse:
        """Serve the study board UI."""
        return FileResponse(_STATIC_DIR / "index.html")

    # -----------------------------------------------------------------------
    # Static file mount, registered last (catch-all for /static/* assets)
    # -----------------------------------------------------------------------

    app.mount("/static", StaticFiles(directory=_STATIC_DIR), name="static")
    return app


app = create_app()
