import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from exceptions import DuplicateIdError, StoreLoadError, StoreWriteError
from schemas import UNASSIGNED_ID, MoodEntry

DATA_DIR = os.getenv("MOOD_DATA_DIR", "data")
STORE_FILE = os.getenv("MOOD_STORE_FILE", os.path.join(DATA_DIR, "moods.json"))

logger = logging.getLogger(__name__)


class MoodJSONStore:
    """Mood entries kept in memory and written whole to one JSON file.

    Every successful mutation rewrites the file. Ids come from a watermark
    that only moves up, so deleted ids are never handed out again.
    Calls are not locked; a host running mutations from several threads
    must serialize them itself.
    """

    def __init__(self, path: Union[str, Path] = STORE_FILE):
        self.path = Path(path)
        self._moods: List[MoodEntry] = []
        self._last_id = 0

        if self.path.exists():
            self._deserialize()
            if self._backfill_ids():
                self._serialize()

    # ---- queries ----

    def find_all(self) -> List[MoodEntry]:
        return list(self._moods)

    def find_by_id(self, entry_id: int) -> Optional[MoodEntry]:
        return next((m for m in self._moods if m.id == entry_id), None)

    # ---- mutations ----

    def create(self, entry: MoodEntry) -> MoodEntry:
        """Append and persist. An explicit id must lie above the watermark,
        so it can be neither a live id nor one freed by a delete."""
        if entry.id == UNASSIGNED_ID:
            entry.id = self._next_id()
        elif entry.id <= self._last_id:
            raise DuplicateIdError(entry.id)
        else:
            self._last_id = entry.id
        self._moods.append(entry)
        self._serialize()
        return entry

    def update(self, entry: MoodEntry) -> bool:
        """Replace the stored entry with the same id. False when none matches."""
        for index, existing in enumerate(self._moods):
            if existing.id == entry.id:
                self._moods[index] = entry
                self._serialize()
                return True
        return False

    def delete(self, entry: MoodEntry) -> bool:
        """Remove every entry with this id. False (and no write) when none matched."""
        remaining = [m for m in self._moods if m.id != entry.id]
        if len(remaining) == len(self._moods):
            return False
        self._moods = remaining
        self._serialize()
        return True

    # ---- ids ----

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def _backfill_ids(self) -> bool:
        # Watermark first, so a legacy record early in the file cannot take
        # an id that a later record already holds.
        self._last_id = max([self._last_id] + [m.id for m in self._moods])
        changed = False
        for mood in self._moods:
            if mood.id == UNASSIGNED_ID:
                mood.id = self._next_id()
                changed = True
        if changed:
            logger.info(f"Backfilled ids in {self.path}, watermark now {self._last_id}")
        return changed

    # ---- JSON file ----

    def _serialize(self) -> None:
        records = [m.to_record() for m in self._moods]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error(f"Failed to save {len(records)} moods to {self.path}: {e}")
            raise StoreWriteError(f"Could not write {self.path}: {e}") from e
        logger.info(f"Saved {len(records)} moods to {self.path}")

    def _deserialize(self) -> None:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreLoadError(f"Could not read {self.path}: {e}") from e

        if not isinstance(records, list):
            raise StoreLoadError(f"{self.path} does not hold a list of moods")
        try:
            self._moods = [MoodEntry.model_validate(r) for r in records]
        except ValidationError as e:
            raise StoreLoadError(f"Malformed mood record in {self.path}: {e}") from e
        logger.info(f"Loaded {len(self._moods)} moods from {self.path}")
