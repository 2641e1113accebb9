# src/repodigest/core/selector.py
"""
Bounded top-K selection over scored file records.

TopKSelector keeps at most `capacity` records in an array-backed binary
min-heap. The root is the weakest held record, so each offer costs
O(log K) and memory stays O(K) no matter how many files are scanned.
"""
import threading
from typing import List, Optional, Tuple

from repodigest.errors import ConfigurationError
from repodigest.models import FileRecord

# (score, -sequence, record). Among equal scores the latest offer sits
# lowest, so it is the one evicted and the first-seen record stays.
_Entry = Tuple[float, int, FileRecord]


class TopKSelector:
    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ConfigurationError(f"Selector capacity must be an integer, got {capacity!r}")
        if capacity < 0:
            raise ConfigurationError(f"Selector capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._heap: List[_Entry] = []
        self._seq = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._heap)

    def peek(self) -> Optional[FileRecord]:
        """Returns the lowest-ranked held record."""
        return self._heap[0][2] if self._heap else None

    def offer(self, record: FileRecord) -> bool:
        """Returns True if the record is now held."""
        with self._lock:
            if self._capacity == 0:
                return False
            entry = (record.score, -self._seq, record)
            self._seq += 1
            if len(self._heap) < self._capacity:
                self._heap.append(entry)
                self._sift_up(len(self._heap) - 1)
                return True
            if record.score > self._heap[0][0]:
                self._heap[0] = entry
                self._sift_down(0)
                return True
            return False

    def drain(self) -> List[FileRecord]:
        """Returns held records by descending score and empties the selector."""
        with self._lock:
            entries, self._heap = self._heap, []
        entries.sort(key=lambda e: (e[0], e[1]), reverse=True)
        return [e[2] for e in entries]

    # --- heap internals ---

    @staticmethod
    def _less(a: _Entry, b: _Entry) -> bool:
        return (a[0], a[1]) < (b[0], b[1])

    def _sift_up(self, index: int) -> None:
        heap = self._heap
        while index > 0:
            parent = (index - 1) // 2
            if not self._less(heap[index], heap[parent]):
                break
            heap[index], heap[parent] = heap[parent], heap[index]
            index = parent

    def _sift_down(self, index: int) -> None:
        heap = self._heap
        length = len(heap)
        while True:
            left = 2 * index + 1
            if left >= length:
                break
            smallest = left
            right = left + 1
            if right < length and self._less(heap[right], heap[left]):
                smallest = right
            if not self._less(heap[smallest], heap[index]):
                break
            heap[index], heap[smallest] = heap[smallest], heap[index]
            index = smallest


class UnboundedCollector:
    """Keeps every offered record; same surface as TopKSelector."""

    def __init__(self):
        self._records: List[Tuple[int, FileRecord]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def offer(self, record: FileRecord) -> bool:
        with self._lock:
            self._records.append((len(self._records), record))
        return True

    def drain(self) -> List[FileRecord]:
        with self._lock:
            items, self._records = self._records, []
        items.sort(key=lambda item: (-item[1].score, item[0]))
        return [record for _, record in items]
