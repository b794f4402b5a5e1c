"""File system helpers for the JSON store file.

Implements the load protocol (missing or corrupt file means an empty store,
anything else is an access error) and the write path (create parents, write
the whole document, restrict permissions).
"""

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from datestore.errors import StoreAccessError
from datestore.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def mkdirp(directory: PathLike, mode: int = 0o777) -> Path:
    """Create *directory* and any missing intermediate directories.

    A concurrent creator winning the race is not an error as long as the
    path ends up being a directory.

    Args:
        directory: Directory to create
        mode: Permission bits for newly created directories (before umask)

    Returns:
        The directory path

    Raises:
        OSError: If a component exists and is not a directory, or creation
            fails for any other reason
    """
    target = Path(directory)
    missing = []
    current = target
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    for path in reversed(missing):
        try:
            path.mkdir(mode=mode)
        except FileExistsError:
            if not path.is_dir():
                raise
        else:
            logger.debug("directory_created", path=str(path))

    if not target.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(target))
    return target


def read_json(path: PathLike) -> dict[str, Any]:
    """Read the store document at *path*.

    Args:
        path: Location of the JSON file

    Returns:
        The stored mapping; empty if the file is absent or does not hold a
        JSON object

    Raises:
        StoreAccessError: If the file exists but cannot be read
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except UnicodeDecodeError:
        logger.warning("store_load_corrupt", path=str(file_path), reason="not utf-8")
        return {}
    except OSError as e:
        raise StoreAccessError(file_path, "load", e.strerror or str(e)) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("store_load_corrupt", path=str(file_path), reason=str(e))
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "store_load_corrupt",
            path=str(file_path),
            reason=f"expected object, got {type(data).__name__}",
        )
        return {}
    return data


def write_json(
    path: PathLike, data: dict[str, Any], indent: Optional[int] = 2, mode: int = 0o600
) -> None:
    """Write *data* to *path* as JSON, creating parent directories first.

    Args:
        path: Location of the JSON file
        data: Mapping to serialise
        indent: JSON indentation (None for compact output)
        mode: Permission bits for the file

    Raises:
        StoreAccessError: If the directory or file cannot be written
    """
    file_path = Path(path)
    payload = json.dumps(data, indent=indent)
    try:
        mkdirp(file_path.parent)
        fd = os.open(file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.chmod(file_path, mode)
    except OSError as e:
        raise StoreAccessError(file_path, "write", e.strerror or str(e)) from e
