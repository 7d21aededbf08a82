from .user import User
from .article import Article, article_genres
from .genre import Genre
from .comment import Comment
from .visitor import Visitor, ArticleView

__all__ = [
    "User",
    "Article",
    "article_genres",
    "Genre",
    "Comment",
    "Visitor",
    "ArticleView"
]
