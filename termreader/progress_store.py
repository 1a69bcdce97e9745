"""Persistent reading progress, indexed by document path.

Snapshots are stored in an OS-appropriate data directory so a document
reopens where it was left.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .progress import ProgressSnapshot

logger = logging.getLogger(__name__)


class ProgressStore:
    """Manages persistent storage of per-document progress snapshots.

    Snapshots are stored in a JSON file in the user's data directory,
    keyed by the absolute path of the document being read.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir) if data_dir is not None else Path(
            platformdirs.user_data_dir("termreader"))
        self._progress_file = self._data_dir / "progress.json"
        self._cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _ensure_data_dir(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create data directory {self._data_dir}: {e}")

    def _load_all(self) -> Dict[str, Dict[str, Any]]:
        """Load all snapshots from disk.

        Returns an empty dict if the file doesn't exist or can't be read.
        """
        if self._cache is not None:
            return self._cache

        if not self._progress_file.exists():
            self._cache = {}
            return self._cache

        try:
            with open(self._progress_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load progress from {self._progress_file}: {e}")
            self._cache = {}
            return self._cache

        if not isinstance(data, dict):
            logger.warning("Progress file has invalid format (not a dict), ignoring")
            data = {}
        self._cache = data
        return self._cache

    def _save_all(self, entries: Dict[str, Dict[str, Any]]) -> bool:
        """Write all snapshots atomically (temp file + replace)."""
        self._ensure_data_dir()
        temp_file = self._progress_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(entries, f, indent=2)
            temp_file.replace(self._progress_file)
        except OSError as e:
            logger.warning(f"Could not save progress to {self._progress_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False
        self._cache = entries
        return True

    def load(self, document_path: Optional[str]) -> Optional[ProgressSnapshot]:
        """Snapshot saved for a document, or None if there is none.

        Unreadable entries are logged and ignored.
        """
        if document_path is None:
            return None
        abs_path = os.path.abspath(document_path)
        entry = self._load_all().get(abs_path)
        if entry is None:
            return None
        try:
            return ProgressSnapshot.from_dict(entry)
        except ValueError as e:
            logger.warning(f"Ignoring progress for {abs_path}: {e}")
            return None

    def save(self, document_path: Optional[str], snapshot: ProgressSnapshot) -> bool:
        """Save a snapshot for a document.

        Returns:
            True if the save was successful, False otherwise.
        """
        if document_path is None:
            return False
        abs_path = os.path.abspath(document_path)
        entries = dict(self._load_all())
        entries[abs_path] = snapshot.to_dict()
        return self._save_all(entries)

    def clear_cache(self) -> None:
        """Clear the in-memory cache of snapshots."""
        self._cache = None


# Global instance
_store: Optional[ProgressStore] = None


def get_store() -> ProgressStore:
    """Get the global progress store instance."""
    global _store
    if _store is None:
        _store = ProgressStore()
    return _store
