"""
分类服务
"""
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Genre, article_genres
from app.schemas.genre import GenreResponse
from app.services.article_service import is_storable_id

logger = logging.getLogger(__name__)


def _genre_with_count_query():
    return (
        select(Genre, func.count(article_genres.c.article_id))
        .outerjoin(article_genres, article_genres.c.genre_id == Genre.id)
        .group_by(Genre.id)
    )


def _to_genre_response(genre: Genre, article_count: int) -> GenreResponse:
    return GenreResponse(
        id=genre.id,
        name=genre.name,
        articleCount=article_count or 0,
        createdAt=genre.created_at,
    )


async def list_genres(db: AsyncSession) -> List[GenreResponse]:
    """所有分类（按名称排序），附带文章数"""
    result = await db.execute(_genre_with_count_query().order_by(Genre.name))
    return [_to_genre_response(genre, count) for genre, count in result.all()]


async def get_genre(db: AsyncSession, genre_id: int) -> Optional[GenreResponse]:
    if not is_storable_id(genre_id):
        return None
    result = await db.execute(
        _genre_with_count_query()
        .where(Genre.id == genre_id)
        .execution_options(populate_existing=True)
    )
    row = result.first()
    return _to_genre_response(row[0], row[1]) if row else None


async def find_genre_by_name(db: AsyncSession, name: str) -> Optional[int]:
    """按名称查找分类（不区分大小写），返回ID"""
    result = await db.execute(
        select(Genre.id).where(func.lower(Genre.name) == name.strip().lower())
    )
    return result.scalar_one_or_none()


async def create_genre(db: AsyncSession, name: str) -> GenreResponse:
    """创建分类，调用方负责重名检查"""
    genre = Genre(name=name.strip())
    db.add(genre)
    await db.commit()
    logger.info("分类已创建: id=%s name=%s", genre.id, genre.name)
    return await get_genre(db, genre.id)
