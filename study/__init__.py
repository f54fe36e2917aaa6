"""
Chess study package.

This package implements an annotated study board: a python-chess position
that the user edits with moves, arrows and square highlights, plus a tree of
courses and chapters that collects annotated positions for later review.

Modules:
    constants  : Board geometry, colours, storage keys, asset paths
    config     : Environment-driven settings (storage path, log level)
    models     : Pydantic models for positions, chapters, courses, session state
    rules      : Thin adapter over chess.Board (moves, FEN, setup edits)
    annotations: In-memory arrow and highlight store
    course_tree: Course → chapter → position bookkeeping
    storage    : JSON key-value store and the typed persistence layer
    renderer   : Pure projection of board + annotations into views and SVG
    session    : Application context owning all mutable state
    controller : Pointer/click routing (moves, highlights, arrows, setup mode)
"""
