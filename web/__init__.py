"""
Web application package for the chess study board.

Provides a FastAPI app (web.app:app) that owns the study session and serves a
small browser client from web/static. Run with: uvicorn web.app:app
"""
