import logging
import threading
from typing import Dict, List

from fastapi import Request

from string_analyzer.exceptions import ConflictError, NotFoundError
from string_analyzer.schemas import AnalysisRecord

logger = logging.getLogger(__name__)


class StringStore:
    """
    In-memory mapping from the exact string value to its analysis record.

    Endpoints run on a thread pool, so every operation takes the same lock.
    Iteration order is insertion order.
    """

    def __init__(self):
        self._records: Dict[str, AnalysisRecord] = {}
        self._lock = threading.Lock()

    def insert(self, key: str, record: AnalysisRecord) -> AnalysisRecord:
        with self._lock:
            if key in self._records:
                raise ConflictError("String already exists")
            self._records[key] = record
        logger.info(f"Stored string {record.sha256[:12]}")
        return record

    def get(self, key: str) -> AnalysisRecord:
        with self._lock:
            record = self._records.get(key)
        if record is None:
            raise NotFoundError("String not found")
        return record

    def delete(self, key: str) -> None:
        with self._lock:
            record = self._records.pop(key, None)
        if record is None:
            raise NotFoundError("String not found")
        logger.info(f"Deleted string {record.sha256[:12]}")

    def list_all(self) -> List[AnalysisRecord]:
        with self._lock:
            return list(self._records.values())

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records


# ------------------------------------------------------------------------------
# STORE DEPENDENCY
# ------------------------------------------------------------------------------
def get_store(request: Request) -> StringStore:
    """Dependency to provide the application's store."""
    return request.app.state.store
