"""
Client-side projections of backend state.

``DocumentStore`` and ``ConflictStore`` are ordered, id-keyed collections
mirrored from the backend. They are only mutated through ``apply_event``,
which is fed by two sources: optimistic inserts from the intake submitter
and full snapshots from reconciliation. Sign-out feeds a third event that
empties both.
"""
from dataclasses import dataclass
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar, Union

from ..models import Conflict, Document, DocumentStatus, StateSnapshot

T = TypeVar("T", Document, Conflict)


class Projection(Generic[T]):
    """Insertion-ordered collection of records with unique ids."""

    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = []
        self._index: Dict[str, int] = {}
        self.replace_all(items)

    def replace_all(self, items: Iterable[T]) -> None:
        """Overwrite the whole collection. Later duplicates of an id win."""
        self._items = []
        self._index = {}
        for item in items:
            self.upsert(item)

    def upsert(self, item: T) -> None:
        """Append ``item``, or replace it in place if its id is already known."""
        position = self._index.get(item.id)
        if position is None:
            self._index[item.id] = len(self._items)
            self._items.append(item)
        else:
            self._items[position] = item

    def clear(self) -> None:
        self._items = []
        self._index = {}

    def get(self, item_id: str) -> Optional[T]:
        position = self._index.get(item_id)
        return self._items[position] if position is not None else None

    def ids(self) -> List[str]:
        return [item.id for item in self._items]

    def snapshot(self) -> Tuple[T, ...]:
        return tuple(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._index

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} items)"


class DocumentStore(Projection[Document]):

    def with_status(self, status: DocumentStatus) -> List[Document]:
        return [doc for doc in self._items if doc.status == status]


class ConflictStore(Projection[Conflict]):

    def referencing(self, doc_id: str) -> List[Conflict]:
        """Conflicts that name ``doc_id``; the authoritative per-document count."""
        return [conflict for conflict in self._items if conflict.references(doc_id)]

    def unresolved(self) -> List[Conflict]:
        return [conflict for conflict in self._items if conflict.is_unresolved()]


@dataclass(frozen=True)
class OptimisticInsert:
    epoch: int
    document: Document


@dataclass(frozen=True)
class SnapshotReplaced:
    epoch: int
    snapshot: StateSnapshot


@dataclass(frozen=True)
class ProjectionsCleared:
    epoch: int


ProjectionEvent = Union[OptimisticInsert, SnapshotReplaced, ProjectionsCleared]


def apply_event(documents: DocumentStore, conflicts: ConflictStore, event: ProjectionEvent) -> None:
    """Single update path for both projections."""
    if isinstance(event, OptimisticInsert):
        documents.upsert(event.document)
    elif isinstance(event, SnapshotReplaced):
        # Snapshots are full state, never deltas
        documents.replace_all(event.snapshot.documents)
        conflicts.replace_all(event.snapshot.conflicts)
    elif isinstance(event, ProjectionsCleared):
        documents.clear()
        conflicts.clear()
    else:
        raise TypeError(f"Unknown projection event: {type(event).__name__}")
