"""
Per-user credentials file.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from .file_writer import write_file, dump_json
from ..models.installation import WriteOutcome


# owner read/write only
CREDENTIALS_FILE_MODE = 0o600


class CredentialStore:
    """Reads and replaces the JSON credentials file under the user's profile."""

    def __init__(self, path: Path):
        self.logger = logging.getLogger(__name__)
        self.path = Path(path).expanduser()

    def save(self, api_key: str) -> WriteOutcome:
        """
        Persist the API key, replacing the whole file.

        The file is never merged: any other keys from a previous run are gone.
        """
        outcome = write_file(self.path, dump_json({"apiKey": api_key}), mode=CREDENTIALS_FILE_MODE)
        self.logger.info(f"Saved credentials to {self.path}")
        return outcome

    def load(self) -> Optional[str]:
        """Return the stored API key, or None when the file is missing or unreadable."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self.logger.warning(f"Failed to read credentials {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return data.get("apiKey") or None
