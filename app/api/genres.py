"""
分类管理API
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.schemas.article import ArticleListResponse
from app.schemas.common import ResponseModel
from app.schemas.genre import GenreCreate
from app.services import article_service, genre_service
from app.services.article_service import total_pages
from app.utils.auth import get_current_user_id

router = APIRouter(prefix="/api", tags=["分类管理"])


@router.get("/genres", response_model=ResponseModel)
async def get_genres(db: AsyncSession = Depends(get_db)):
    """
    获取所有分类
    """
    genres = await genre_service.list_genres(db)
    return ResponseModel(code=200, data=genres)


@router.get("/genres/{genre_id}", response_model=ResponseModel)
async def get_genre(genre_id: int, db: AsyncSession = Depends(get_db)):
    genre = await genre_service.get_genre(db, genre_id)
    if not genre:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="分类不存在"
        )
    return ResponseModel(code=200, data=genre)


@router.post("/genres", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_genre(
    genre_data: GenreCreate,
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    创建分类，名称不区分大小写唯一
    """
    if await genre_service.find_genre_by_name(db, genre_data.name) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="分类已存在"
        )

    try:
        genre = await genre_service.create_genre(db, genre_data.name)
    except IntegrityError:
        # 并发创建同名分类
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="分类已存在"
        )

    return ResponseModel(code=201, message="分类创建成功", data=genre)


@router.get("/genres/{genre_id}/articles", response_model=ResponseModel)
async def get_genre_articles(
    genre_id: int,
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="每页数量"),
    db: AsyncSession = Depends(get_db)
):
    """
    获取分类下的文章
    """
    if await genre_service.get_genre(db, genre_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="分类不存在"
        )

    articles, total = await article_service.list_articles(
        db, page=page, limit=limit, genre_ids=[genre_id]
    )
    response_data = ArticleListResponse(
        articles=articles,
        currentPage=page,
        totalPages=total_pages(total, limit),
        totalItems=total,
    )
    return ResponseModel(code=200, data=response_data)
