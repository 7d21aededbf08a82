"""
评论Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.schemas.article import AuthorInfo


class CommentCreate(BaseModel):
    """创建评论请求模型"""
    content: str = Field(..., min_length=1, description="评论内容")


class CommentResponse(BaseModel):
    """评论响应模型"""
    id: int
    articleId: int
    userId: int
    content: str
    user: Optional[AuthorInfo] = None
    createdAt: datetime
    updatedAt: datetime
