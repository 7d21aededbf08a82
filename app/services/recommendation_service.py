"""
推荐与相关文章

两者都是只读查询：按浏览量倒序，其次按创建时间倒序。
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Article
from app.schemas.article import ArticleRecord
from app.services.article_service import (
    article_query, to_article_record, has_any_genre, get_article_genre_ids, page_offset, is_storable_id
)

logger = logging.getLogger(__name__)

POPULARITY_ORDER = (Article.total_views.desc(), Article.created_at.desc(), Article.id.desc())


async def get_recommended_articles(
    db: AsyncSession,
    limit: int = 10,
    page: int = 1,
    exclude_article_id: Optional[int] = None,
) -> Tuple[List[ArticleRecord], int]:
    """
    全站热门文章（无个性化）

    Returns:
        (当前页文章, 总数)
    """
    offset = page_offset(page, limit)

    conditions = []
    if exclude_article_id is not None and is_storable_id(exclude_article_id):
        conditions.append(Article.id != exclude_article_id)

    count_result = await db.execute(
        select(func.count(Article.id)).where(*conditions)
    )
    total = count_result.scalar() or 0

    result = await db.execute(
        article_query()
        .where(*conditions)
        .order_by(*POPULARITY_ORDER)
        .offset(offset)
        .limit(limit)
    )
    return [to_article_record(article) for article in result.scalars().all()], total


async def get_related_articles(
    db: AsyncSession,
    article_id: int,
    limit: int = 5,
) -> List[ArticleRecord]:
    """
    与参考文章至少共享一个分类的其他文章

    参考文章不存在或没有分类时返回空列表，不视为错误。
    """
    if limit < 1:
        raise ValueError(f"limit必须大于等于1: {limit}")

    genre_ids = await get_article_genre_ids(db, article_id)
    if not genre_ids:
        if genre_ids is None:
            logger.debug("相关文章查询的参考文章不存在: article_id=%s", article_id)
        return []

    result = await db.execute(
        article_query()
        .where(Article.id != article_id, has_any_genre(genre_ids))
        .order_by(*POPULARITY_ORDER)
        .limit(limit)
    )
    return [to_article_record(article) for article in result.scalars().all()]
