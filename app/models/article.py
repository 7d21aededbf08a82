"""
文章模型
"""
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Table, func
from sqlalchemy.orm import relationship
from app.db.database import Base


# 文章-分类多对多关联表
article_genres = Table(
    "article_genres",
    Base.metadata,
    Column("article_id", Integer, ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    thumbnail = Column(String, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total_views = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # 关系一律显式 selectinload，禁止隐式懒加载
    author = relationship("User", back_populates="articles", lazy="raise")
    genres = relationship("Genre", secondary=article_genres, back_populates="articles", lazy="raise")
