"""
分类Schema模型
"""
from pydantic import BaseModel, Field
from datetime import datetime


class GenreCreate(BaseModel):
    """创建分类请求模型"""
    name: str = Field(..., min_length=1, max_length=100, description="分类名称")


class GenreResponse(BaseModel):
    """分类响应模型"""
    id: int
    name: str
    articleCount: int = 0
    createdAt: datetime
