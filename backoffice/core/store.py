"""In-memory record store with copy-on-write collections."""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from backoffice.core.models import (
    Inmate,
    MedicalRecord,
    Resource,
    SecurityIncident,
    Staff,
    Visitor,
)
from backoffice.processing import analytics, search, stats

logger = logging.getLogger(__name__)

K = TypeVar("K")

COLLECTION_KINDS: Dict[str, type] = {
    "inmates": Inmate,
    "staff": Staff,
    "visitors": Visitor,
    "medical_records": MedicalRecord,
    "security_incidents": SecurityIncident,
    "resources": Resource,
}


def generate_id() -> str:
    """Return a fresh opaque record id."""

    return uuid.uuid4().hex


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of every collection at a single store version."""

    inmates: Tuple[Inmate, ...] = ()
    staff: Tuple[Staff, ...] = ()
    visitors: Tuple[Visitor, ...] = ()
    medical_records: Tuple[MedicalRecord, ...] = ()
    security_incidents: Tuple[SecurityIncident, ...] = ()
    resources: Tuple[Resource, ...] = ()
    version: int = 0

    def total_records(self) -> int:
        return sum(len(getattr(self, kind)) for kind in COLLECTION_KINDS)


class RecordCollection(Generic[K]):
    """One record kind, mutated only through ``add``, ``update`` and ``delete``.

    Each mutation swaps in a new tuple, so anything holding an older
    ``all()`` result keeps seeing the old contents.
    """

    def __init__(self, name: str, record_type: Type[K], owner: "RecordStore") -> None:
        self.name = name
        self.record_type = record_type
        self._owner = owner
        self._records: Tuple[K, ...] = ()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[K]:
        return iter(self._records)

    def all(self) -> Tuple[K, ...]:
        return self._records

    def get(self, record_id: str) -> Optional[K]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def add(self, record: K) -> K:
        """Store ``record`` under a freshly generated id and return the stored value."""

        self._check_type(record)
        with self._owner._lock:
            stored = replace(record, id=generate_id())
            self._records = self._records + (stored,)
            logger.debug("Added %s record %s", self.name, stored.id)
            self._owner._committed()
        return stored

    def update(
        self, record_id: str, patch: Optional[Mapping[str, Any]] = None, **fields: Any
    ) -> Optional[K]:
        """Merge fields into the matching record.

        Returns the updated record, or ``None`` when no record has that id.
        """

        changes = dict(patch or {})
        changes.update(fields)
        self._check_fields(changes)
        with self._owner._lock:
            for index, record in enumerate(self._records):
                if record.id != record_id:
                    continue
                if not changes:
                    return record
                updated = replace(record, **changes)
                self._records = self._records[:index] + (updated,) + self._records[index + 1 :]
                logger.debug("Updated %s record %s: %s", self.name, record_id, sorted(changes))
                self._owner._committed()
                return updated
        logger.warning("Update ignored: no %s record with id %s", self.name, record_id)
        return None

    def delete(self, record_id: str) -> Optional[K]:
        """Remove the matching record and return it, or ``None`` if absent."""

        with self._owner._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    self._records = self._records[:index] + self._records[index + 1 :]
                    logger.debug("Deleted %s record %s", self.name, record_id)
                    self._owner._committed()
                    return record
        logger.warning("Delete ignored: no %s record with id %s", self.name, record_id)
        return None

    def load(self, records: Iterable[K]) -> None:
        """Replace the collection, keeping supplied ids (seeding and imports).

        Missing or repeated ids get a fresh one, so ids stay unique.
        """

        loaded: List[K] = []
        seen = set()
        for record in records:
            self._check_type(record)
            if record.id in seen:
                logger.warning("Duplicate %s id %s; assigning a new id", self.name, record.id)
            if not record.id or record.id in seen:
                record = replace(record, id=generate_id())
            seen.add(record.id)
            loaded.append(record)
        with self._owner._lock:
            self._records = tuple(loaded)
            self._owner._committed()

    def _check_type(self, record: Any) -> None:
        if not isinstance(record, self.record_type):
            raise TypeError(
                f"{self.name} expects {self.record_type.__name__}, got {type(record).__name__}"
            )

    def _check_fields(self, changes: Mapping[str, Any]) -> None:
        if "id" in changes:
            raise ValueError("record ids cannot be changed")
        unknown = sorted(set(changes) - set(self.record_type.field_names()))
        if unknown:
            raise ValueError(f"unknown {self.record_type.__name__} field(s): {', '.join(unknown)}")


class RecordStore:
    """Owner of all six record collections.

    Mutations are serialized through a single lock; reads should go through
    :meth:`snapshot` so they see one consistent version.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._subscribers: List[Callable[[StoreSnapshot], None]] = []
        self.version = 0
        self.inmates: RecordCollection[Inmate] = RecordCollection("inmates", Inmate, self)
        self.staff: RecordCollection[Staff] = RecordCollection("staff", Staff, self)
        self.visitors: RecordCollection[Visitor] = RecordCollection("visitors", Visitor, self)
        self.medical_records: RecordCollection[MedicalRecord] = RecordCollection(
            "medical_records", MedicalRecord, self
        )
        self.security_incidents: RecordCollection[SecurityIncident] = RecordCollection(
            "security_incidents", SecurityIncident, self
        )
        self.resources: RecordCollection[Resource] = RecordCollection("resources", Resource, self)

    def collection(self, kind: str) -> RecordCollection:
        if kind not in COLLECTION_KINDS:
            raise KeyError(f"unknown collection {kind!r}")
        return getattr(self, kind)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                inmates=self.inmates.all(),
                staff=self.staff.all(),
                visitors=self.visitors.all(),
                medical_records=self.medical_records.all(),
                security_incidents=self.security_incidents.all(),
                resources=self.resources.all(),
                version=self.version,
            )

    def subscribe(self, callback: Callable[[StoreSnapshot], None]) -> Callable[[], None]:
        """Call ``callback`` with the new snapshot after every mutation."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _committed(self) -> None:
        self.version += 1
        if not self._subscribers:
            return
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    # Derived reads, kept here so views only need the store object.

    def search_inmates(self, query: str) -> List[Inmate]:
        return search.search_inmates(self.inmates.all(), query)

    def filter_inmates(self, status: Optional[str] = None, block: Optional[str] = None) -> List[Inmate]:
        return search.filter_inmates(self.inmates.all(), status=status, block=block)

    def search_all(self, query: str) -> search.SearchResults:
        return search.search_all(self.snapshot(), query)

    def dashboard_stats(self, today: Optional[date] = None, **kwargs: Any) -> stats.DashboardStats:
        return stats.dashboard_stats(self.snapshot(), today=today, **kwargs)

    def advanced_analytics(self, today: Optional[date] = None) -> analytics.AdvancedAnalytics:
        return analytics.advanced_analytics(self.snapshot(), today=today)
