"""
评论服务
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Article, Comment
from app.schemas.article import AuthorInfo
from app.schemas.comment import CommentResponse
from app.services.article_service import page_offset, is_storable_id

logger = logging.getLogger(__name__)


def _to_comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        articleId=comment.article_id,
        userId=comment.user_id,
        content=comment.content,
        user=AuthorInfo(id=comment.user.id, name=comment.user.name) if comment.user else None,
        createdAt=comment.created_at,
        updatedAt=comment.updated_at,
    )


async def list_comments(
    db: AsyncSession,
    article_id: int,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[CommentResponse], int]:
    """文章评论，按时间正序"""
    offset = page_offset(page, limit)

    count_result = await db.execute(
        select(func.count(Comment.id)).where(Comment.article_id == article_id)
    )
    total = count_result.scalar() or 0

    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.user))
        .where(Comment.article_id == article_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .offset(offset)
        .limit(limit)
    )
    return [_to_comment_response(c) for c in result.scalars().all()], total


async def get_comment(db: AsyncSession, comment_id: int) -> Optional[CommentResponse]:
    if not is_storable_id(comment_id):
        return None
    result = await db.execute(
        select(Comment)
        .options(selectinload(Comment.user))
        .where(Comment.id == comment_id)
        .execution_options(populate_existing=True)
    )
    comment = result.scalar_one_or_none()
    return _to_comment_response(comment) if comment else None


async def get_comment_permissions(db: AsyncSession, comment_id: int) -> Optional[Tuple[int, int]]:
    """
    返回 (评论作者ID, 文章作者ID)，评论不存在时返回 None
    """
    if not is_storable_id(comment_id):
        return None
    result = await db.execute(
        select(Comment.user_id, Article.author_id)
        .join(Article, Article.id == Comment.article_id)
        .where(Comment.id == comment_id)
    )
    row = result.first()
    return (row[0], row[1]) if row else None


async def create_comment(db: AsyncSession, article_id: int, user_id: int, content: str) -> CommentResponse:
    comment = Comment(article_id=article_id, user_id=user_id, content=content)
    db.add(comment)
    await db.commit()
    logger.info("评论已创建: id=%s article_id=%s", comment.id, article_id)
    return await get_comment(db, comment.id)


async def delete_comment(db: AsyncSession, comment_id: int):
    await db.execute(delete(Comment).where(Comment.id == comment_id))
    await db.commit()
