"""
Study board constants: geometry, colours, storage keys and asset paths.

Every fixed value shared between the renderer, the controller and the
persistence layer is defined here so the other modules never introduce their
own magic numbers or string keys.
"""

import chess

# ---------------------------------------------------------------------------
# Board geometry (pixels)
# ---------------------------------------------------------------------------
# The browser client draws the board at a fixed size; pointer coordinates it
# sends are relative to the top-left corner of that square.

BOARD_SIZE_PX: int = 480
SQUARE_SIZE_PX: float = BOARD_SIZE_PX / 8

FILES: str = "abcdefgh"

# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------

LIGHT_SQUARE: str = "light"
DARK_SQUARE: str = "dark"

# Single translucent overlay for highlighted squares (yellow, 60% alpha).
HIGHLIGHT_FILL: str = "#ffff0099"

ARROW_COLOR: str = "red"
ARROW_WIDTH_PX: int = 6

# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------
# Pawns reaching the back rank always promote to a queen; the board never
# asks which piece to promote to.

AUTO_PROMOTION: chess.PieceType = chess.QUEEN

# ---------------------------------------------------------------------------
# Pointer buttons (DOM MouseEvent.button values)
# ---------------------------------------------------------------------------

PRIMARY_BUTTON: int = 0
SECONDARY_BUTTON: int = 2

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------
# Two logical records, each holding one JSON document as a string.

COURSES_KEY: str = "courses"
STATE_KEY: str = "state"

# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

PIECE_ASSET_PREFIX: str = "/static/pieces"
