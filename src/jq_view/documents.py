"""Document loading for single-file and directory mode.

In directory mode the user switches between the ``*.json`` files of one
directory by bare filename; names that could escape the directory are
refused before the filesystem is touched.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jq_view.errors import DocumentError

__all__ = ["list_json_files", "load_document", "read_document"]

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"


def list_json_files(directory: str | Path) -> list[str]:
    """Return the names of the regular ``*.json`` files in *directory*, sorted.

    Raises:
        DocumentError: If the directory cannot be read.
    """
    try:
        entries = list(Path(directory).iterdir())
    except OSError as exc:
        raise DocumentError(str(exc)) from exc
    return sorted(p.name for p in entries if p.is_file() and p.suffix == JSON_SUFFIX)


def read_document(path: str | Path) -> Any:
    """Read and parse one JSON file.

    Raises:
        DocumentError: If the file cannot be read or is not valid JSON.
    """
    try:
        text = Path(path).read_bytes()
    except OSError as exc:
        raise DocumentError(str(exc)) from exc
    try:
        return json.loads(text)
    except ValueError as exc:
        raise DocumentError(f"Invalid JSON: {exc}") from exc


def load_document(directory: str | Path, filename: str) -> Any:
    """Load *filename* from *directory*.

    Raises:
        DocumentError: ``Invalid filename`` for names containing ``..`` or a
            path separator; otherwise as :func:`read_document`.
    """
    if ".." in filename or "/" in filename or "\\" in filename:
        raise DocumentError("Invalid filename")
    logger.info("loading %s from %s", filename, directory)
    return read_document(Path(directory) / filename)
