"""
文章Schema模型
"""
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.schemas.common import PaginationModel


class AuthorInfo(BaseModel):
    """作者信息"""
    id: int
    name: Optional[str] = None

    class Config:
        from_attributes = True


class GenreInfo(BaseModel):
    """分类信息"""
    id: int
    name: str

    class Config:
        from_attributes = True


class ArticleRecord(BaseModel):
    """文章记录（含作者与分类）"""
    id: int
    title: str
    content: str
    thumbnail: Optional[str] = None
    authorId: int
    totalViews: int = 0
    createdAt: datetime
    updatedAt: datetime
    author: Optional[AuthorInfo] = None
    genres: List[GenreInfo] = []


class ArticleListResponse(BaseModel):
    """文章列表响应模型"""
    articles: List[ArticleRecord]
    currentPage: int
    totalPages: int
    totalItems: int


class RecommendedArticlesResponse(BaseModel):
    """推荐文章响应模型"""
    articles: List[ArticleRecord]
    pagination: PaginationModel
