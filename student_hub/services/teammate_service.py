# student_hub/services/teammate_service.py
import logging
from datetime import datetime, timezone
from typing import List

from student_hub.core.exceptions import Forbidden, ValidationError
from student_hub.models.teammate import TeammatePost
from student_hub.models.user import UserProfile
from student_hub.repositories.teammates import TeammatePostRepository
from student_hub.schemas.teammate import TeammatePostCreate, TeammatePostUpdate

logger = logging.getLogger(__name__)


class TeammateService:

    def __init__(self, posts: TeammatePostRepository):
        self.posts = posts

    async def create_post(self, author: UserProfile, data: TeammatePostCreate) -> TeammatePost:
        post = TeammatePost(
            author_id=author.uid,
            author_name=author.name,
            author_email=author.email,
            department=author.department,
            year=author.year,
            goal=data.goal,
            message=data.message,
            created_at=datetime.now(timezone.utc),
        )
        post = self.posts.create(post)
        logger.info(f"Teammate post {post.id} created by {author.uid}")
        return post

    async def list_posts(self) -> List[TeammatePost]:
        return self.posts.newest_first()

    async def update_post(self, post_id: str, author: UserProfile, data: TeammatePostUpdate) -> TeammatePost:
        post = self._owned(post_id, author)
        updates = data.model_dump(exclude_none=True)
        if not updates:
            raise ValidationError("Nothing to update")
        updates["updatedAt"] = datetime.now(timezone.utc)
        self.posts.update(post_id, updates)
        return post.model_copy(update={
            "goal": updates.get("goal", post.goal),
            "message": updates.get("message", post.message),
            "updated_at": updates["updatedAt"],
        })

    async def delete_post(self, post_id: str, author: UserProfile):
        self._owned(post_id, author)
        self.posts.delete(post_id)
        logger.info(f"Teammate post {post_id} deleted by {author.uid}")

    def _owned(self, post_id: str, author: UserProfile) -> TeammatePost:
        post = self.posts.get(post_id)
        if post.author_id != author.uid:
            raise Forbidden("You can only change your own posts")
        return post
