"""File helpers for runtime state."""
import os
from pathlib import Path
from typing import Union

FILE_MODE = 0o600


def save_to_file(folder: Union[str, Path], file_name: str, content: str) -> Path:
    """Write ``content`` to ``folder/file_name``, replacing any previous file.

    The text goes to a temporary sibling first and is then renamed over the
    target, so readers never see a half-written file. The file is private to
    the owner (0600); it may hold PSKs and RADIUS secrets.

    Raises:
        OSError: If the folder cannot be created or the file written
    """
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    target = folder / file_name
    tmp = folder / f".{file_name}.tmp"
    tmp.touch(mode=FILE_MODE)
    tmp.chmod(FILE_MODE)
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, target)
    return target
