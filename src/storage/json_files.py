"""
Flat JSON file storage backend for Topper.

Implements the Storage interface with two files in a data directory:

| File          | Contents                                         |
|---------------|--------------------------------------------------|
| items.json    | list of item records (content_* columns)         |
| ratings.json  | list of rating events {id,userId,itemId,...}     |

Every write replaces the whole file. Writes go to a temporary file first
and are moved into place with os.replace(), so readers never see a
half-written file. commit() writes both files: temp files are written
first, then both are swapped in; if anything fails the previous contents
are restored from .backup copies.
"""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, List, Optional, Tuple

from src.config import DATA_DIR, ITEMS_FILENAME, RATINGS_FILENAME
from src.models.content_item import ContentItem
from src.models.rating import RatingEvent
from src.storage.base import PersistError, Storage, check_append_only

logger = logging.getLogger(__name__)


class JsonFileStorage(Storage):
    """
    File-backed storage implementation.

    Configuration is pulled from src.config unless overridden:
    - DATA_DIR: directory holding the data files
    - ITEMS_FILENAME / RATINGS_FILENAME: file names inside DATA_DIR
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        items_filename: str = None,
        ratings_filename: str = None,
    ):
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
        self.items_path = self.data_dir / (items_filename or ITEMS_FILENAME)
        self.ratings_path = self.data_dir / (ratings_filename or RATINGS_FILENAME)

    @property
    def name(self) -> str:
        return "json_files"

    # =========================================================================
    # Low-level file helpers
    # =========================================================================

    @staticmethod
    def _read_json_list(path: Path) -> List[dict]:
        """Read a JSON list from path; a missing file reads as []."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON list, got {type(data).__name__}")
        return data

    @staticmethod
    def _serialize(records: List[dict]) -> str:
        return json.dumps(records, indent=2, ensure_ascii=False) + "\n"

    def _write_temp(self, path: Path, records: List[dict]) -> Path:
        temp_path = path.with_name(path.name + ".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(self._serialize(records))
            f.flush()
            os.fsync(f.fileno())
        return temp_path

    def _atomic_write_many(self, pairs: List[Tuple[Path, List[dict]]]) -> None:
        """
        Write several files so that all of them change or none does.

        Raises:
            PersistError: If any step fails (originals restored).
        """
        temp_paths: List[Path] = []
        backups: List[Tuple[Path, Optional[Path]]] = []
        replaced: List[Path] = []

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)

            # Step 1: back up originals and write every temp file
            for path, records in pairs:
                backup_path = None
                if path.exists():
                    backup_path = path.with_name(path.name + ".backup")
                    shutil.copy2(path, backup_path)
                backups.append((path, backup_path))
                temp_paths.append(self._write_temp(path, records))

            # Step 2: swap temp files into place
            for (path, _), temp_path in zip(pairs, temp_paths):
                os.replace(temp_path, path)
                replaced.append(path)

        except Exception as e:
            logger.error("Atomic write of %s failed: %s", [str(p) for p, _ in pairs], e)
            for path, backup_path in backups:
                try:
                    if path in replaced:
                        if backup_path is not None:
                            os.replace(backup_path, path)
                        else:
                            path.unlink()
                    elif backup_path is not None:
                        backup_path.unlink()
                except OSError as restore_error:
                    logger.error("Could not restore %s: %s", path, restore_error)
            for temp_path in temp_paths:
                if temp_path.exists():
                    try:
                        temp_path.unlink()
                    except OSError:
                        logger.warning("Could not remove temp file %s", temp_path)
            raise PersistError(f"{type(e).__name__}: {e}") from e

        # Step 3: clean up backups
        for _, backup_path in backups:
            if backup_path is not None and backup_path.exists():
                try:
                    backup_path.unlink()
                except OSError:
                    logger.warning("Could not remove backup file %s", backup_path)

    # =========================================================================
    # Storage Interface Implementation
    # =========================================================================

    def read_items(self) -> List[ContentItem]:
        return [ContentItem.from_dict(record) for record in self._read_json_list(self.items_path)]

    def write_items(self, items: List[ContentItem]) -> None:
        self._atomic_write_many([(self.items_path, [item.to_dict() for item in items])])

    def read_ratings(self) -> List[RatingEvent]:
        return [RatingEvent.from_dict(record) for record in self._read_json_list(self.ratings_path)]

    def write_ratings(self, ratings: List[RatingEvent]) -> None:
        check_append_only(self.read_ratings(), ratings)
        self._atomic_write_many([(self.ratings_path, [r.to_dict() for r in ratings])])

    def commit(self, items: List[ContentItem], ratings: List[RatingEvent]) -> None:
        check_append_only(self.read_ratings(), ratings)
        self._atomic_write_many([
            (self.ratings_path, [r.to_dict() for r in ratings]),
            (self.items_path, [item.to_dict() for item in items]),
        ])
        logger.debug("Committed %d items and %d ratings to %s", len(items), len(ratings), self.data_dir)

    def reset(self, items: List[ContentItem], ratings: List[RatingEvent]) -> None:
        self._atomic_write_many([
            (self.ratings_path, [r.to_dict() for r in ratings]),
            (self.items_path, [item.to_dict() for item in items]),
        ])
        logger.info("Reset %s with %d items and %d ratings", self.data_dir, len(items), len(ratings))

    def write_records(self, filename: str, records: Any) -> Path:
        """
        Write an arbitrary JSON document next to the item files (seed extras).

        Returns:
            Path of the written file.
        """
        path = self.data_dir / filename
        self._atomic_write_many([(path, records)])
        return path
