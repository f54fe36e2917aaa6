"""
Runtime settings read from the environment.

Only two things are configurable: where the key-value storage file lives and
how chatty logging is. Everything else is a constant in study.constants.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_STORAGE = Path.home() / ".chess_study" / "storage.json"


@dataclass(frozen=True)
class Settings:
    """
    Resolved runtime settings.

    Attributes:
        storage_path: JSON file holding the "courses" and "state" records.
        log_level:    Name of the logging level passed to logging.basicConfig.
    """

    storage_path: Path = _DEFAULT_STORAGE
    log_level: str = "INFO"


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables.

    Recognised variables:
        CHESS_STUDY_STORAGE:   storage file path (default ~/.chess_study/storage.json)
        CHESS_STUDY_LOG_LEVEL: logging level name (default INFO; unknown names
                               fall back to INFO)

    Args:
        environ: Mapping to read from; defaults to os.environ.

    Returns:
        A frozen Settings instance.
    """
    env = os.environ if environ is None else environ
    storage = env.get("CHESS_STUDY_STORAGE")
    log_level = env.get("CHESS_STUDY_LOG_LEVEL", "INFO").upper()
    # getLevelName() maps known names to their int level, anything else to a str.
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = "INFO"
    return Settings(
        storage_path=Path(storage).expanduser() if storage else _DEFAULT_STORAGE,
        log_level=log_level,
    )
