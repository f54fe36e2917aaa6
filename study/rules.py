"""
Rules engine adapter: a thin wrapper over python-chess.

The study board never reasons about chess rules itself. Legality, FEN
parsing/serialization and board contents all come from chess.Board; this
module only translates between square names used by the UI and the
library's integer squares, and turns library errors into boolean results.

Illegal moves are not errors here: try_move() returns False and leaves the
board untouched, which is exactly what the interaction layer wants.
"""

import logging

import chess

from study.constants import AUTO_PROMOTION

_log = logging.getLogger(__name__)

# (color, kind) pair as exposed to the renderer, e.g. ("w", "p") or ("b", "k").
PieceCode = tuple[str, str]


def _parse(square: str) -> chess.Square | None:
    try:
        return chess.parse_square(square)
    except ValueError:
        return None


class RulesEngine:
    """
    Stateful board wrapper.

    Attributes:
        board: The underlying python-chess board. Callers should prefer the
               methods below; the attribute is exposed for rendering only.
    """

    def __init__(self, fen: str = chess.STARTING_FEN) -> None:
        self.board: chess.Board = chess.Board(fen)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def fen(self) -> str:
        """Return the current position in FEN."""
        return self.board.fen()

    def piece_at(self, square: str) -> PieceCode | None:
        """Return the (color, kind) pair on a square, or None if empty/invalid."""
        sq = _parse(square)
        if sq is None:
            return None
        piece = self.board.piece_at(sq)
        if piece is None:
            return None
        return ("w" if piece.color == chess.WHITE else "b", piece.symbol().lower())

    def grid(self) -> list[list[PieceCode | None]]:
        """
        Return board contents as an 8x8 grid.

        Rows run from rank 8 (index 0) down to rank 1 (index 7); columns run
        from file a to file h. Each cell is a (color, kind) pair or None.
        """
        return [
            [self.piece_at(chess.square_name(chess.square(file, rank))) for file in range(8)]
            for rank in range(7, -1, -1)
        ]

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def try_move(self, from_square: str, to_square: str) -> bool:
        """
        Attempt a move, promoting pawns to a queen automatically.

        The promotion piece is only attached when a pawn actually reaches the
        back rank; python-chess treats a promotion flag on any other move as
        illegal.

        Args:
            from_square: Origin square name, e.g. "e2".
            to_square:   Destination square name, e.g. "e4".

        Returns:
            True if the move was legal and has been played, False otherwise.
            The board is unchanged when False is returned.
        """
        origin = _parse(from_square)
        target = _parse(to_square)
        if origin is None or target is None:
            return False

        promotion = None
        piece = self.board.piece_at(origin)
        if (
            piece is not None
            and piece.piece_type == chess.PAWN
            and chess.square_rank(target) in (0, 7)
        ):
            promotion = AUTO_PROMOTION

        move = chess.Move(origin, target, promotion=promotion)
        if move not in self.board.legal_moves:
            _log.debug("Rejected move %s%s in %s", from_square, to_square, self.fen())
            return False
        self.board.push(move)
        return True

    def load(self, fen: str) -> bool:
        """
        Replace the position with the given FEN.

        Returns:
            True on success. On a malformed FEN the board is left unchanged
            and False is returned.
        """
        try:
            board = chess.Board(fen)
        except ValueError as exc:
            _log.warning("Cannot load FEN %r: %s", fen, exc)
            return False
        self.board = board
        return True

    def remove(self, square: str) -> bool:
        """Remove the piece on a square. Returns False if there was none."""
        sq = _parse(square)
        if sq is None:
            return False
        return self.board.remove_piece_at(sq) is not None

    def clear(self) -> None:
        """Remove every piece from the board."""
        self.board.clear()

    def reset(self) -> None:
        """Return to the standard starting position."""
        self.board.reset()
