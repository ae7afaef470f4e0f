"""
On-device cache of server state

Flat collections (all transactions of every user, all users, all
subscriptions) keyed by entity id, each stored as one JSON file. The cache is
a possibly stale mirror; it is only authoritative while the server is
unreachable.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from shared.config import settings

logger = logging.getLogger(__name__)

TRANSACTIONS = 'transactions'
USERS = 'users'
SUBSCRIPTIONS = 'subscriptions'

Record = Dict[str, Any]


class LocalCache:
    """JSON-file key-value cache of wire records"""

    def __init__(self, directory: Optional[str] = None):
        self.directory = Path(directory or settings.CACHE_DIR)

    def _path(self, collection: str) -> Path:
        return self.directory / f"{collection}.json"

    def _load(self, collection: str) -> Dict[str, Record]:
        path = self._path(collection)
        if not path.exists():
            return {}

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Local cache {path.name} unreadable, starting empty: {e}")
            return {}

        # Older caches stored a plain array
        if isinstance(data, list):
            return {str(r['id']): r for r in data if isinstance(r, dict) and 'id' in r}
        if isinstance(data, dict):
            return data
        return {}

    def _save(self, collection: str, records: Dict[str, Record]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(collection)
        tmp_path = path.with_suffix('.json.tmp')
        tmp_path.write_text(json.dumps(records, ensure_ascii=False), encoding='utf-8')
        os.replace(tmp_path, path)

    # ==================== GENERIC ====================

    def all(self, collection: str) -> List[Record]:
        return list(self._load(collection).values())

    def owned_by(self, collection: str, user_id: str) -> List[Record]:
        """Records of one user only"""
        return [r for r in self._load(collection).values() if r.get('userId') == user_id]

    def upsert(self, collection: str, record: Record) -> None:
        records = self._load(collection)
        records[str(record['id'])] = record
        self._save(collection, records)

    def remove(self, collection: str, record_id: str) -> bool:
        """
        Remove a record by id

        Returns:
            True if the record existed. Removing a missing id changes nothing.
        """
        records = self._load(collection)
        if records.pop(str(record_id), None) is None:
            return False
        self._save(collection, records)
        return True

    def replace_owned(self, collection: str, user_id: str, new_records: Iterable[Record]) -> None:
        """
        Replace one user's slice of a collection, leaving other users' records untouched
        """
        records = {
            record_id: record
            for record_id, record in self._load(collection).items()
            if record.get('userId') != user_id
        }
        for record in new_records:
            records[str(record['id'])] = record
        self._save(collection, records)

    def seed(self, collection: str, new_records: Iterable[Record]) -> None:
        """Write records into an empty collection"""
        self._save(collection, {str(r['id']): r for r in new_records})
