# student_hub/repositories/users.py
from typing import Any, Iterable, List, Mapping, Optional

from student_hub.core.database import DocumentStore
from student_hub.core.exceptions import NotFound
from student_hub.models.user import USERS_COLLECTION, ClassPartition, Role, UserProfile


class UserRepository:
    """Profile documents keyed by identity uid"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, uid: str) -> Optional[UserProfile]:
        document = self.store.get(USERS_COLLECTION, uid)
        if document is None:
            return None
        return UserProfile.from_document(document)

    def require(self, uid: str) -> UserProfile:
        profile = self.get(uid)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    def create(self, profile: UserProfile) -> UserProfile:
        self.store.set(USERS_COLLECTION, profile.uid, profile.to_document())
        return profile

    def update(self, uid: str, updates: Mapping[str, Any]):
        self.store.update(USERS_COLLECTION, uid, updates)

    def add_skills(self, uid: str, skills: Iterable[str]):
        """Set-union ``skills`` into the profile's skillSet"""
        self.store.array_union(USERS_COLLECTION, uid, "skillSet", skills)

    def students_in_class(self, partition: ClassPartition) -> List[UserProfile]:
        if not partition.is_complete:
            return []
        documents = self.store.query(
            USERS_COLLECTION,
            {"role": Role.STUDENT.value, **partition.as_filters()}
        )
        students = [UserProfile.from_document(doc) for doc in documents]
        students.sort(key=lambda s: s.name.casefold())
        return students
