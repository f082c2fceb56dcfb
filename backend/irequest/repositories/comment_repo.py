"""Comment Repository - Data access for request comments"""
import json
from typing import List, Optional

from sqlalchemy import delete, insert, select, update

from .database import query, transaction
from .tables import CommentRow, UserRow
from ..domain.models import Comment
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


def _mentions(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return [str(v) for v in value] if isinstance(value, list) else []


class CommentRepository:
    """Repository for comment operations"""

    def list_for_request(self, request_id: int, include_internal: bool) -> List[Comment]:
        """Comments of a request, oldest first"""
        statement = (
            select(CommentRow, UserRow.user_name.label("user_name"))
            .outerjoin(UserRow, UserRow.id == CommentRow.user_id)
            .where(CommentRow.request_id == request_id)
            .order_by(CommentRow.created_at.asc(), CommentRow.comment_id.asc())
        )
        if not include_internal:
            statement = statement.where(CommentRow.is_internal.is_(False))

        comments = []
        for row in query(statement).rows:
            entity = row[0]
            comments.append(Comment(
                comment_id=entity.comment_id,
                request_id=entity.request_id,
                user_id=entity.user_id,
                user_name=row._mapping["user_name"],
                content=entity.content,
                is_internal=entity.is_internal,
                is_edited=entity.is_edited,
                parent_comment_id=entity.parent_comment_id,
                mentioned_user_ids=_mentions(entity.mentioned_user_ids),
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                edited_at=entity.edited_at,
            ))
        return comments

    def create_comment(
        self,
        request_id: int,
        user_id: str,
        content: str,
        is_internal: bool = False,
        parent_comment_id: Optional[int] = None,
        mentioned_user_ids: Optional[List[str]] = None
    ) -> int:
        """Insert a comment and return its id"""
        statement = insert(CommentRow).values({
            CommentRow.request_id: request_id,
            CommentRow.user_id: user_id,
            CommentRow.content: content,
            CommentRow.is_internal: is_internal,
            CommentRow.is_edited: False,
            CommentRow.parent_comment_id: parent_comment_id,
            CommentRow.mentioned_user_ids: json.dumps(mentioned_user_ids) if mentioned_user_ids else None,
            CommentRow.created_at: utc_now(),
        }).returning(CommentRow.comment_id)
        comment_id = int(query(statement).scalar())
        logger.info(
            f"Created comment {comment_id} on request {request_id}",
            extra={"request_id": request_id, "user_id": user_id}
        )
        return comment_id

    def get_comment(self, comment_id: int) -> Optional[CommentRow]:
        return query(select(CommentRow).where(CommentRow.comment_id == comment_id)).scalar()

    def update_content(self, comment_id: int, content: str) -> bool:
        """Replace the text and mark the comment edited"""
        now = utc_now()
        statement = (
            update(CommentRow)
            .where(CommentRow.comment_id == comment_id)
            .values({
                CommentRow.content: content,
                CommentRow.is_edited: True,
                CommentRow.edited_at: now,
                CommentRow.updated_at: now,
            })
        )
        return query(statement).rowcount > 0

    def _reply_ids(self, comment_id: int) -> List[int]:
        """Every reply below a comment, deepest first"""
        found: List[int] = []
        frontier = [comment_id]
        while frontier:
            children = query(
                select(CommentRow.comment_id).where(CommentRow.parent_comment_id.in_(frontier))
            ).scalars()
            found.extend(children)
            frontier = children
        return list(reversed(found))

    def delete_comment(self, comment_id: int) -> bool:
        """Delete a comment together with its replies"""
        statements = [delete(CommentRow).where(CommentRow.comment_id == reply_id)
                      for reply_id in self._reply_ids(comment_id)]
        statements.append(delete(CommentRow).where(CommentRow.comment_id == comment_id))
        deleted = transaction(statements)[-1].rowcount > 0
        if deleted:
            logger.info(f"Deleted comment {comment_id}", extra={"action": "delete_comment"})
        return deleted
