# student_hub/repositories/teammates.py
from typing import Any, Callable, List, Mapping

from student_hub.core.database import DocumentStore, Subscription
from student_hub.core.exceptions import NotFound
from student_hub.models.teammate import TEAMMATE_POSTS_COLLECTION, TeammatePost


def _posts(documents) -> List[TeammatePost]:
    return [TeammatePost.from_document(doc) for doc in documents]


class TeammatePostRepository:

    def __init__(self, store: DocumentStore):
        self.store = store

    def create(self, post: TeammatePost) -> TeammatePost:
        post_id = self.store.add(TEAMMATE_POSTS_COLLECTION, post.to_document())
        return post.model_copy(update={"id": post_id})

    def get(self, post_id: str) -> TeammatePost:
        document = self.store.get(TEAMMATE_POSTS_COLLECTION, post_id)
        if document is None:
            raise NotFound("Post not found")
        return TeammatePost.from_document(document)

    def update(self, post_id: str, updates: Mapping[str, Any]):
        self.store.update(TEAMMATE_POSTS_COLLECTION, post_id, updates)

    def delete(self, post_id: str):
        self.store.delete(TEAMMATE_POSTS_COLLECTION, post_id)

    def newest_first(self) -> List[TeammatePost]:
        return _posts(self.store.query(TEAMMATE_POSTS_COLLECTION, order_by="createdAt", descending=True))

    def listen_newest_first(self, callback: Callable[[List[TeammatePost]], None]) -> Subscription:
        return self.store.listen(
            TEAMMATE_POSTS_COLLECTION,
            None,
            lambda documents: callback(_posts(documents)),
            order_by="createdAt",
            descending=True
        )
