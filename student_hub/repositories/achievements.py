# student_hub/repositories/achievements.py
from typing import Any, Callable, Collection, Dict, List, Mapping

from student_hub.core.database import DocumentStore, Subscription
from student_hub.core.exceptions import NotFound
from student_hub.models.achievement import (
    ACHIEVEMENTS_COLLECTION,
    AchievementRecord,
    AchievementStatus,
    submitted_timestamp,
)
from student_hub.models.user import ClassPartition

RecordsCallback = Callable[[List[AchievementRecord]], None]


def _records(documents) -> List[AchievementRecord]:
    return [AchievementRecord.from_document(doc) for doc in documents]


class AchievementRepository:
    """Typed façade over the achievements collection"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def create(self, record: AchievementRecord) -> AchievementRecord:
        record_id = self.store.add(ACHIEVEMENTS_COLLECTION, record.to_document())
        return record.model_copy(update={"id": record_id})

    def get(self, record_id: str) -> AchievementRecord:
        document = self.store.get(ACHIEVEMENTS_COLLECTION, record_id)
        if document is None:
            raise NotFound("Achievement not found")
        return AchievementRecord.from_document(document)

    def delete(self, record_id: str, student_id: str, from_statuses: Collection[AchievementStatus]):
        """Delete only while the record still belongs to ``student_id`` and sits in ``from_statuses``"""
        self.store.delete_if(
            ACHIEVEMENTS_COLLECTION,
            record_id,
            {"studentId": {student_id}, "status": {status.value for status in from_statuses}}
        )

    def transition(
        self,
        record_id: str,
        from_statuses: Collection[AchievementStatus],
        updates: Mapping[str, Any]
    ) -> AchievementRecord:
        """Apply ``updates`` only if the stored status is still one of ``from_statuses``"""
        document = self.store.update_if(
            ACHIEVEMENTS_COLLECTION,
            record_id,
            {"status": {status.value for status in from_statuses}},
            updates
        )
        return AchievementRecord.from_document(document)

    # One-shot queries

    def for_student(self, student_id: str) -> List[AchievementRecord]:
        records = _records(self.store.query(ACHIEVEMENTS_COLLECTION, {"studentId": student_id}))
        records.sort(key=submitted_timestamp, reverse=True)
        return records

    def verified_for_student(self, student_id: str) -> List[AchievementRecord]:
        return _records(self.store.query(
            ACHIEVEMENTS_COLLECTION,
            {"studentId": student_id, "status": AchievementStatus.VERIFIED.value}
        ))

    def for_class(self, partition: ClassPartition) -> List[AchievementRecord]:
        if not partition.is_complete:
            return []
        return _records(self.store.query(ACHIEVEMENTS_COLLECTION, partition.as_filters()))

    def pending_for_class(self, partition: ClassPartition) -> List[AchievementRecord]:
        if not partition.is_complete:
            return []
        records = _records(self.store.query(ACHIEVEMENTS_COLLECTION, self._pending_filters(partition)))
        records.sort(key=submitted_timestamp)
        return records

    def all(self) -> List[AchievementRecord]:
        return _records(self.store.query(ACHIEVEMENTS_COLLECTION))

    # Live queries

    def listen_pending_queue(self, partition: ClassPartition, callback: RecordsCallback) -> Subscription:
        def on_snapshot(documents):
            records = _records(documents)
            records.sort(key=submitted_timestamp)
            callback(records)

        return self.store.listen(ACHIEVEMENTS_COLLECTION, self._pending_filters(partition), on_snapshot)

    def listen_class(self, partition: ClassPartition, callback: RecordsCallback) -> Subscription:
        return self.store.listen(
            ACHIEVEMENTS_COLLECTION,
            partition.as_filters(),
            lambda documents: callback(_records(documents))
        )

    def listen_student(self, student_id: str, callback: RecordsCallback) -> Subscription:
        def on_snapshot(documents):
            records = _records(documents)
            records.sort(key=submitted_timestamp, reverse=True)
            callback(records)

        return self.store.listen(ACHIEVEMENTS_COLLECTION, {"studentId": student_id}, on_snapshot)

    def listen_verified_for_student(self, student_id: str, callback: RecordsCallback) -> Subscription:
        return self.store.listen(
            ACHIEVEMENTS_COLLECTION,
            {"studentId": student_id, "status": AchievementStatus.VERIFIED.value},
            lambda documents: callback(_records(documents))
        )

    @staticmethod
    def _pending_filters(partition: ClassPartition) -> Dict[str, str]:
        return {"status": AchievementStatus.PENDING.value, **partition.as_filters()}
