"""
评论API
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.schemas.comment import CommentCreate
from app.schemas.common import ResponseModel, PaginationModel
from app.services import article_service, comment_service
from app.services.article_service import total_pages
from app.utils.auth import get_current_user_id

router = APIRouter(prefix="/api", tags=["评论"])


async def _ensure_article_exists(db: AsyncSession, article_id: int):
    if not await article_service.article_exists(db, article_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="文章不存在"
        )


@router.get("/articles/{article_id}/comments", response_model=ResponseModel)
async def get_comments(
    article_id: int,
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE, description="每页数量"),
    db: AsyncSession = Depends(get_db)
):
    """
    获取文章评论（按时间正序）
    """
    await _ensure_article_exists(db, article_id)

    comments, total = await comment_service.list_comments(db, article_id, page=page, limit=limit)
    return ResponseModel(
        code=200,
        data={
            "comments": comments,
            "pagination": PaginationModel(
                currentPage=page,
                totalPages=total_pages(total, limit),
                pageSize=limit,
                totalItems=total,
            )
        }
    )


@router.post("/articles/{article_id}/comments", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_comment(
    article_id: int,
    comment_data: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    发表评论
    """
    await _ensure_article_exists(db, article_id)

    comment = await comment_service.create_comment(
        db, article_id=article_id, user_id=current_user_id, content=comment_data.content
    )
    return ResponseModel(code=201, message="评论成功", data=comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id)
):
    """
    删除评论（评论作者或文章作者）
    """
    permissions = await comment_service.get_comment_permissions(db, comment_id)
    if permissions is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="评论不存在"
        )

    comment_author_id, article_author_id = permissions
    if current_user_id not in (comment_author_id, article_author_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="无权删除此评论"
        )

    await comment_service.delete_comment(db, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
