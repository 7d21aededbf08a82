"""
文章查询与读写服务

所有函数显式接收 AsyncSession，返回 pydantic 记录而不是 ORM 对象。
"""
import json
import logging
from math import ceil
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy import select, update, delete, insert, func, or_, false
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Article, Genre, Comment, ArticleView, article_genres
from app.schemas.article import ArticleRecord, AuthorInfo, GenreInfo

logger = logging.getLogger(__name__)

# Integer 主键列的上限
MAX_ID = 2 ** 31 - 1


def is_storable_id(value: int) -> bool:
    """ID是否落在主键列范围内，范围外的ID不可能对应任何记录"""
    return 1 <= value <= MAX_ID


# ----------------------------------------------------
# 分页
# ----------------------------------------------------
def page_offset(page: int, limit: int) -> int:
    """
    计算分页偏移量

    Raises:
        ValueError: page 或 limit 小于 1
    """
    if page < 1:
        raise ValueError(f"page必须大于等于1: {page}")
    if limit < 1:
        raise ValueError(f"limit必须大于等于1: {limit}")
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """总页数，没有数据时为0"""
    return ceil(total / limit) if total > 0 else 0


# ----------------------------------------------------
# 分类ID解析
# ----------------------------------------------------
def parse_genre_ids(raw: Union[None, str, Sequence]) -> Optional[List[int]]:
    """
    解析请求中的分类ID列表

    支持 JSON 数组字符串 "[1, 2]"、逗号分隔 "1,2"、以及重复的表单字段。
    未提供（None 或空字符串）时返回 None。

    Raises:
        ValueError: 格式错误
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        if text.startswith("["):
            try:
                values = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"分类ID不是合法的JSON数组: {raw!r}") from e
            if not isinstance(values, list):
                raise ValueError(f"分类ID必须是数组: {raw!r}")
        else:
            values = [part.strip() for part in text.split(",")]
    else:
        values = list(raw)
        if len(values) == 1 and isinstance(values[0], str):
            return parse_genre_ids(values[0])

    genre_ids = []
    for value in values:
        if isinstance(value, bool):
            raise ValueError(f"非法的分类ID: {value!r}")
        if isinstance(value, int):
            genre_id = value
        elif isinstance(value, str) and value.strip().isdigit():
            genre_id = int(value.strip())
        else:
            raise ValueError(f"非法的分类ID: {value!r}")
        if not is_storable_id(genre_id):
            raise ValueError(f"分类ID超出范围: {genre_id}")
        genre_ids.append(genre_id)

    # 去重并保持顺序
    return list(dict.fromkeys(genre_ids))


# ----------------------------------------------------
# 记录转换
# ----------------------------------------------------
def article_query():
    """带作者与分类预加载的文章查询"""
    return select(Article).options(
        selectinload(Article.author),
        selectinload(Article.genres),
    )


def to_article_record(article: Article) -> ArticleRecord:
    return ArticleRecord(
        id=article.id,
        title=article.title,
        content=article.content,
        thumbnail=article.thumbnail,
        authorId=article.author_id,
        totalViews=article.total_views,
        createdAt=article.created_at,
        updatedAt=article.updated_at,
        author=AuthorInfo(id=article.author.id, name=article.author.name) if article.author else None,
        genres=[
            GenreInfo(id=genre.id, name=genre.name)
            for genre in sorted(article.genres, key=lambda g: g.id)
        ],
    )


def has_any_genre(genre_ids: Iterable[int]):
    """文章至少关联其中一个分类（成员约束，不计数）"""
    storable = [genre_id for genre_id in genre_ids if is_storable_id(genre_id)]
    return Article.id.in_(
        select(article_genres.c.article_id).where(article_genres.c.genre_id.in_(storable))
    )


async def article_exists(db: AsyncSession, article_id: int) -> bool:
    if not is_storable_id(article_id):
        return False
    result = await db.execute(select(Article.id).where(Article.id == article_id))
    return result.scalar_one_or_none() is not None


async def get_article_genre_ids(db: AsyncSession, article_id: int) -> Optional[List[int]]:
    """
    获取文章的分类ID列表，文章不存在时返回 None
    """
    if not await article_exists(db, article_id):
        return None

    result = await db.execute(
        select(article_genres.c.genre_id).where(article_genres.c.article_id == article_id)
    )
    return [row[0] for row in result.all()]


# ----------------------------------------------------
# 查询
# ----------------------------------------------------
async def get_article(db: AsyncSession, article_id: int) -> Optional[ArticleRecord]:
    """获取单篇文章，不存在时返回 None"""
    if not is_storable_id(article_id):
        return None
    result = await db.execute(
        article_query()
        .where(Article.id == article_id)
        .execution_options(populate_existing=True)
    )
    article = result.scalar_one_or_none()
    return to_article_record(article) if article else None


async def list_articles(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    genre_ids: Optional[List[int]] = None,
    author_id: Optional[int] = None,
    query: Optional[str] = None,
    article_id: Optional[int] = None,
) -> Tuple[List[ArticleRecord], int]:
    """
    分页查询文章列表，按创建时间倒序

    Args:
        genre_ids: 文章需至少属于其中一个分类
        author_id: 作者ID精确匹配
        query: 标题或内容的不区分大小写子串匹配
        article_id: 参考文章，存在时排除自身并只返回与其分类有交集的文章

    Returns:
        (当前页文章, 总数)
    """
    offset = page_offset(page, limit)

    conditions = []
    if query:
        conditions.append(
            or_(
                Article.title.ilike(f"%{query}%"),
                Article.content.ilike(f"%{query}%")
            )
        )
    if author_id is not None:
        conditions.append(Article.author_id == author_id if is_storable_id(author_id) else false())
    if genre_ids:
        conditions.append(has_any_genre(genre_ids))
    if article_id is not None:
        reference_genre_ids = await get_article_genre_ids(db, article_id)
        if reference_genre_ids is not None:
            conditions.append(Article.id != article_id)
            conditions.append(has_any_genre(reference_genre_ids))

    count_result = await db.execute(
        select(func.count(Article.id)).where(*conditions)
    )
    total = count_result.scalar() or 0

    result = await db.execute(
        article_query()
        .where(*conditions)
        .order_by(Article.created_at.desc(), Article.id.desc())
        .offset(offset)
        .limit(limit)
    )
    articles = result.scalars().all()

    return [to_article_record(article) for article in articles], total


# ----------------------------------------------------
# 写入
# ----------------------------------------------------
async def _link_genres(db: AsyncSession, article_id: int, genre_ids: List[int]):
    """关联已存在的分类，不存在的ID直接忽略"""
    if not genre_ids:
        return
    result = await db.execute(select(Genre.id).where(Genre.id.in_(genre_ids)))
    existing = [row[0] for row in result.all()]
    if existing:
        await db.execute(
            insert(article_genres),
            [{"article_id": article_id, "genre_id": genre_id} for genre_id in existing]
        )


async def create_article(
    db: AsyncSession,
    author_id: int,
    title: str,
    content: str,
    thumbnail: Optional[str] = None,
    genre_ids: Optional[List[int]] = None,
) -> ArticleRecord:
    """创建文章，分类在空集合上追加"""
    new_article = Article(
        title=title,
        content=content,
        thumbnail=thumbnail,
        author_id=author_id,
        total_views=0,
    )
    db.add(new_article)
    await db.flush()

    if genre_ids:
        await _link_genres(db, new_article.id, genre_ids)

    await db.commit()
    logger.info("文章已创建: id=%s author_id=%s", new_article.id, author_id)
    return await get_article(db, new_article.id)


async def update_article(
    db: AsyncSession,
    article_id: int,
    title: Optional[str] = None,
    content: Optional[str] = None,
    thumbnail: Optional[str] = None,
    genre_ids: Optional[List[int]] = None,
) -> Optional[ArticleRecord]:
    """
    更新文章

    只修改传入的字段；genre_ids 不为 None 时整体替换分类集合（空列表即清空）。
    """
    values = {}
    if title is not None:
        values["title"] = title
    if content is not None:
        values["content"] = content
    if thumbnail is not None:
        values["thumbnail"] = thumbnail

    if values or genre_ids is not None:
        values["updated_at"] = func.now()
        await db.execute(
            update(Article).where(Article.id == article_id).values(**values)
        )

    if genre_ids is not None:
        await db.execute(
            delete(article_genres).where(article_genres.c.article_id == article_id)
        )
        await _link_genres(db, article_id, genre_ids)

    await db.commit()
    return await get_article(db, article_id)


async def delete_article(db: AsyncSession, article_id: int):
    """删除文章及其评论、分类关联和浏览记录"""
    await db.execute(delete(ArticleView).where(ArticleView.article_id == article_id))
    await db.execute(delete(Comment).where(Comment.article_id == article_id))
    await db.execute(delete(article_genres).where(article_genres.c.article_id == article_id))
    await db.execute(delete(Article).where(Article.id == article_id))
    await db.commit()
    logger.info("文章已删除: id=%s", article_id)


async def track_article_view(db: AsyncSession, article_id: int) -> bool:
    """
    浏览量加一

    在数据库端原子自增，不在应用里读改写。失败只记录日志并回滚，
    不影响文章读取。
    """
    try:
        await db.execute(
            update(Article)
            .where(Article.id == article_id)
            .values(total_views=Article.total_views + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return True
    except SQLAlchemyError:
        logger.exception("记录文章浏览失败: article_id=%s", article_id)
        await db.rollback()
        return False
