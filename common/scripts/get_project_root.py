# common/scripts/get_project_root.py
import inspect
from pathlib import Path


def get_project_root() -> Path:
    """
    Directory that holds the caller's top-level package.

    Walks up from the calling module until a directory without
    ``__init__.py`` is reached. Falls back to the working directory when the
    caller cannot be determined (REPL, frozen apps).
    """
    frame = inspect.currentframe()
    caller_frame = frame.f_back if frame is not None else None
    caller_file = caller_frame.f_globals.get("__file__") if caller_frame else None

    if not caller_file:
        return Path.cwd()

    current_path = Path(caller_file).resolve().parent
    while current_path != current_path.parent:
        if not (current_path / "__init__.py").exists():
            return current_path
        current_path = current_path.parent

    return Path(caller_file).resolve().parent


__all__ = ["get_project_root"]
