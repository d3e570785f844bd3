"""
Idempotent file write primitives.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.installation import WriteOutcome


logger = logging.getLogger(__name__)


def write_if_absent(path: Path, content: str) -> WriteOutcome:
    """
    Create a file unless something already exists at the path.

    Existing files are never opened for writing, so user edits survive
    repeated runs.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, "x", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except FileExistsError:
        logger.info(f"Skipped existing: {path}")
        return WriteOutcome.SKIPPED_EXISTING

    logger.info(f"Created: {path}")
    return WriteOutcome.CREATED


def write_file(path: Path, content: str, mode: Optional[int] = None) -> WriteOutcome:
    """
    Write a file with full overwrite semantics (last write wins).

    With a mode, the file gets those permissions before any content is
    written, whether it is new or replaced.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    existed = path.exists()
    if mode is None:
        path.write_text(content, encoding="utf-8", newline="\n")
    else:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            if hasattr(os, "fchmod"):
                os.fchmod(fd, mode)
            f.write(content)

    if existed:
        logger.info(f"Overwrote: {path}")
        return WriteOutcome.OVERWRITTEN
    logger.info(f"Created: {path}")
    return WriteOutcome.CREATED


def dump_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"
