"""
文章管理API
"""
import logging
from typing import Optional, List, Tuple

from fastapi import APIRouter, Depends, HTTPException, status, Query, Form, File, UploadFile, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.schemas.article import ArticleListResponse, RecommendedArticlesResponse
from app.schemas.common import ResponseModel, PaginationModel
from app.services import article_service, recommendation_service
from app.services.article_service import parse_genre_ids, total_pages
from app.services.media_storage import MediaStorage, MediaStorageError, get_media_storage
from app.utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["文章管理"])

GENRE_IDS_IGNORED = "分类ID格式错误，已忽略"


def parse_genre_ids_soft(raw) -> Tuple[Optional[List[int]], bool]:
    """
    解析分类ID，格式错误时记录日志并返回 (None, True)，调用方不修改分类
    """
    try:
        return parse_genre_ids(raw), False
    except ValueError as e:
        logger.warning("分类ID解析失败，忽略分类变更: %s", e)
        return None, True


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


async def _discard_upload(media_storage: MediaStorage, url: str):
    """数据库写入失败时删除刚上传的缩略图"""
    try:
        await media_storage.delete(url)
    except MediaStorageError as e:
        logger.warning("清理未落库的缩略图失败: url=%s error=%s", url, e)


def _require_media_storage(media_storage: Optional[MediaStorage]) -> MediaStorage:
    if media_storage is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="媒体存储未配置，无法上传缩略图"
        )
    return media_storage


@router.get("/articles", response_model=ResponseModel)
async def get_articles(
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="每页数量"),
    genreId: Optional[List[int]] = Query(None, description="分类ID，可重复"),
    authorId: Optional[int] = Query(None, description="作者ID"),
    query: Optional[str] = Query(None, description="搜索关键词（标题或内容）"),
    articleId: Optional[int] = Query(None, description="参考文章ID：排除自身并按其分类筛选"),
    db: AsyncSession = Depends(get_db)
):
    """
    获取文章列表
    """
    articles, total = await article_service.list_articles(
        db,
        page=page,
        limit=limit,
        genre_ids=genreId,
        author_id=authorId,
        query=query,
        article_id=articleId,
    )

    response_data = ArticleListResponse(
        articles=articles,
        currentPage=page,
        totalPages=total_pages(total, limit),
        totalItems=total,
    )
    return ResponseModel(code=200, data=response_data)


@router.get("/articles/recommendations", response_model=ResponseModel)
async def get_recommendations(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="每页数量"),
    page: int = Query(1, ge=1, description="页码"),
    articleId: Optional[int] = Query(None, description="需要排除的文章ID"),
    db: AsyncSession = Depends(get_db)
):
    """
    获取推荐文章（按浏览量排序）
    """
    articles, total = await recommendation_service.get_recommended_articles(
        db, limit=limit, page=page, exclude_article_id=articleId
    )

    response_data = RecommendedArticlesResponse(
        articles=articles,
        pagination=PaginationModel(
            currentPage=page,
            totalPages=total_pages(total, limit),
            pageSize=limit,
            totalItems=total,
        )
    )
    return ResponseModel(code=200, data=response_data)


@router.get("/articles/{article_id}", response_model=ResponseModel)
async def get_article(
    article_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    获取文章详情，同时记录一次浏览
    """
    article = await article_service.get_article(db, article_id)
    if not article:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="文章不存在"
        )

    # 浏览计数失败不影响读取
    await article_service.track_article_view(db, article_id)

    return ResponseModel(code=200, data=article)


@router.get("/articles/{article_id}/related", response_model=ResponseModel)
async def get_related_articles(
    article_id: int,
    limit: int = Query(settings.RELATED_ARTICLES_LIMIT, ge=1, le=settings.MAX_PAGE_SIZE, description="返回数量"),
    db: AsyncSession = Depends(get_db)
):
    """
    获取相关文章（共享分类），参考文章不存在时返回空列表
    """
    articles = await recommendation_service.get_related_articles(db, article_id, limit=limit)
    return ResponseModel(code=200, data=articles)


@router.post("/articles", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_article(
    title: str = Form(..., min_length=1, max_length=255, description="文章标题"),
    content: str = Form(..., min_length=1, description="文章内容"),
    genreIds: Optional[List[str]] = Form(None, description="分类ID，JSON数组或逗号分隔"),
    thumbnail: Optional[UploadFile] = File(None, description="缩略图"),
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
    media_storage: Optional[MediaStorage] = Depends(get_media_storage)
):
    """
    创建文章
    """
    message = "文章创建成功"
    genre_ids, genre_ids_ignored = parse_genre_ids_soft(genreIds)
    if genre_ids_ignored:
        message = f"{message}，{GENRE_IDS_IGNORED}"

    thumbnail_url = None
    if _has_file(thumbnail):
        thumbnail_url = await _require_media_storage(media_storage).upload(thumbnail)

    try:
        article = await article_service.create_article(
            db,
            author_id=current_user_id,
            title=title,
            content=content,
            thumbnail=thumbnail_url,
            genre_ids=genre_ids,
        )
    except Exception:
        if thumbnail_url:
            await _discard_upload(media_storage, thumbnail_url)
        raise

    return ResponseModel(code=201, message=message, data=article)


@router.put("/articles/{article_id}", response_model=ResponseModel)
async def update_article(
    article_id: int,
    title: Optional[str] = Form(None, min_length=1, max_length=255, description="文章标题"),
    content: Optional[str] = Form(None, min_length=1, description="文章内容"),
    genreIds: Optional[List[str]] = Form(None, description="分类ID，提供时整体替换"),
    thumbnail: Optional[UploadFile] = File(None, description="新缩略图"),
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
    media_storage: Optional[MediaStorage] = Depends(get_media_storage)
):
    """
    更新文章（仅作者）
    """
    article = await article_service.get_article(db, article_id)
    if not article:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="文章不存在"
        )

    if article.authorId != current_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="无权编辑此文章"
        )

    message = "更新成功"
    genre_ids, genre_ids_ignored = parse_genre_ids_soft(genreIds)
    if genre_ids_ignored:
        message = f"{message}，{GENRE_IDS_IGNORED}"

    new_thumbnail = None
    if _has_file(thumbnail):
        new_thumbnail = await _require_media_storage(media_storage).upload(thumbnail)

    try:
        updated = await article_service.update_article(
            db,
            article_id,
            title=title,
            content=content,
            thumbnail=new_thumbnail,
            genre_ids=genre_ids,
        )
    except Exception:
        if new_thumbnail:
            await _discard_upload(media_storage, new_thumbnail)
        raise

    # 新图已落库后再删除旧图
    if new_thumbnail and article.thumbnail:
        try:
            await media_storage.delete(article.thumbnail)
        except MediaStorageError as e:
            logger.warning("删除旧缩略图失败: article_id=%s error=%s", article_id, e)

    return ResponseModel(code=200, message=message, data=updated)


@router.delete("/articles/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
    media_storage: Optional[MediaStorage] = Depends(get_media_storage)
):
    """
    删除文章（仅作者）
    """
    article = await article_service.get_article(db, article_id)
    if not article:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="文章不存在"
        )

    if article.authorId != current_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="无权删除此文章"
        )

    await article_service.delete_article(db, article_id)

    if article.thumbnail and media_storage is not None:
        try:
            await media_storage.delete(article.thumbnail)
        except MediaStorageError as e:
            logger.warning("删除缩略图失败: article_id=%s error=%s", article_id, e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
