# student_hub/core/database.py
"""
Document store access.

Services never talk to Firestore directly; they go through a ``DocumentStore``
so the live-query and conditional-update semantics are defined in one place.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Collection, Dict, Iterable, List, Mapping, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore as gcf
from google.cloud.firestore_v1.base_query import FieldFilter

from student_hub.core.exceptions import NotFound, PreconditionFailed

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], None]


class Subscription:
    """
    Handle returned by a live query.

    ``cancel`` is idempotent and once it returns no further snapshot reaches
    the callback, even if the backend still has one in flight.
    """

    def __init__(self, callback: SnapshotCallback):
        self._callback = callback
        self._lock = threading.RLock()
        self._active = True
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self._active

    def bind(self, unsubscribe: Callable[[], None]):
        """Attach the backend's detach hook"""
        with self._lock:
            if self._active:
                self._unsubscribe = unsubscribe
                return
        # Cancelled before the backend finished attaching
        unsubscribe()

    def deliver(self, documents: List[Document]):
        with self._lock:
            if not self._active:
                return
            self._callback(documents)

    def cancel(self):
        with self._lock:
            if not self._active:
                return
            self._active = False
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()


def ensure_expected_state(
    collection: str,
    doc_id: str,
    current: Mapping[str, Any],
    expected: Mapping[str, Collection[Any]]
):
    """Raise PreconditionFailed unless every expected field holds an allowed value"""
    for field, allowed in expected.items():
        value = current.get(field)
        if value not in allowed:
            raise PreconditionFailed(
                f"{collection}/{doc_id}: {field} is {value!r}, expected one of {sorted(allowed)}"
            )


class DocumentStore(ABC):
    """Collection-based storage with equality-filtered one-shot and live queries"""

    @abstractmethod
    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        ...

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]):
        ...

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    def update(self, collection: str, doc_id: str, updates: Mapping[str, Any]):
        ...

    @abstractmethod
    def delete(self, collection: str, doc_id: str):
        ...

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[Document]:
        ...

    @abstractmethod
    def listen(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]],
        callback: SnapshotCallback,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> Subscription:
        """Deliver the full matching result set now and after every change"""

    @abstractmethod
    def update_if(
        self,
        collection: str,
        doc_id: str,
        expected: Mapping[str, Collection[Any]],
        updates: Mapping[str, Any]
    ) -> Document:
        """Atomically apply ``updates`` only while ``expected`` still holds"""

    @abstractmethod
    def delete_if(self, collection: str, doc_id: str, expected: Mapping[str, Collection[Any]]):
        """Atomically delete the document only while ``expected`` still holds"""

    @abstractmethod
    def array_union(self, collection: str, doc_id: str, field: str, values: Iterable[Any]):
        ...


class FirestoreDocumentStore(DocumentStore):

    def __init__(self, client):
        self._client = client

    @staticmethod
    def _to_dict(snapshot) -> Document:
        return {'id': snapshot.id, **(snapshot.to_dict() or {})}

    def _build_query(self, collection, filters, order_by, descending):
        query = self._client.collection(collection)
        for field, value in (filters or {}).items():
            query = query.where(filter=FieldFilter(field, '==', value))
        if order_by:
            direction = gcf.Query.DESCENDING if descending else gcf.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        return query

    def add(self, collection, data):
        _, ref = self._client.collection(collection).add(dict(data))
        return ref.id

    def set(self, collection, doc_id, data):
        self._client.collection(collection).document(doc_id).set(dict(data))

    def get(self, collection, doc_id):
        snapshot = self._client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return self._to_dict(snapshot)

    def update(self, collection, doc_id, updates):
        try:
            self._client.collection(collection).document(doc_id).update(dict(updates))
        except gcp_exceptions.NotFound as e:
            raise NotFound(f"{collection}/{doc_id} does not exist") from e

    def delete(self, collection, doc_id):
        self._client.collection(collection).document(doc_id).delete()

    def query(self, collection, filters=None, order_by=None, descending=False):
        try:
            snapshots = self._build_query(collection, filters, order_by, descending).stream()
            return [self._to_dict(doc) for doc in snapshots]
        except gcp_exceptions.FailedPrecondition as e:
            # The server message carries the console link that creates the index
            logger.error(f"Query on {collection} requires an index: {e.message}")
            raise PreconditionFailed(
                f"Query on '{collection}' filtered by {sorted((filters or {}).keys())} "
                f"requires a composite index: {e.message}",
                code="missing_index"
            ) from e

    def listen(self, collection, filters, callback, order_by=None, descending=False):
        subscription = Subscription(callback)

        def on_snapshot(docs, changes, read_time):
            subscription.deliver([self._to_dict(doc) for doc in docs])

        watch = self._build_query(collection, filters, order_by, descending).on_snapshot(on_snapshot)
        subscription.bind(watch.unsubscribe)
        return subscription

    def update_if(self, collection, doc_id, expected, updates):
        ref = self._client.collection(collection).document(doc_id)
        transaction = self._client.transaction()

        @gcf.transactional
        def apply(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound(f"{collection}/{doc_id} does not exist")
            current = snapshot.to_dict() or {}
            ensure_expected_state(collection, doc_id, current, expected)
            transaction.update(ref, dict(updates))
            return {'id': snapshot.id, **current, **updates}

        return apply(transaction)

    def delete_if(self, collection, doc_id, expected):
        ref = self._client.collection(collection).document(doc_id)
        transaction = self._client.transaction()

        @gcf.transactional
        def apply(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound(f"{collection}/{doc_id} does not exist")
            ensure_expected_state(collection, doc_id, snapshot.to_dict() or {}, expected)
            transaction.delete(ref)

        apply(transaction)

    def array_union(self, collection, doc_id, field, values):
        values = list(values)
        if not values:
            return
        self.update(collection, doc_id, {field: gcf.ArrayUnion(values)})
