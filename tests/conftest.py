"""
测试夹具：每个测试使用独立的SQLite文件数据库
"""
from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import insert

from main import create_app
from app.db.database import init_models
from app.models import User, Article, Genre, article_genres
from app.services.media_storage import MediaStorage, get_media_storage
from app.utils.auth import create_access_token

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


class FakeMediaStorage(MediaStorage):
    """记录上传/删除调用的内存媒体存储"""

    def __init__(self):
        self.uploaded = []
        self.deleted = []

    async def upload(self, file) -> str:
        url = f"https://media.test/articles/thumb{len(self.uploaded) + 1}.png"
        self.uploaded.append((url, file.filename))
        return url

    async def delete(self, url: str) -> None:
        self.deleted.append(url)


class Seeder:
    """直接写库的测试数据工具"""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def user(self, name: str = "author") -> int:
        async with self.session_factory() as session:
            user = User(name=name)
            session.add(user)
            await session.commit()
            return user.id

    async def genre(self, name: str) -> int:
        async with self.session_factory() as session:
            genre = Genre(name=name)
            session.add(genre)
            await session.commit()
            return genre.id

    async def article(
        self,
        author_id: int,
        title: str = "Untitled",
        content: str = "Some content",
        views: int = 0,
        genre_ids: Iterable[int] = (),
        minutes_ago: Optional[int] = None,
        thumbnail: Optional[str] = None,
    ) -> int:
        async with self.session_factory() as session:
            created_at = BASE_TIME - timedelta(minutes=minutes_ago or 0)
            article = Article(
                title=title,
                content=content,
                author_id=author_id,
                total_views=views,
                thumbnail=thumbnail,
                created_at=created_at,
                updated_at=created_at,
            )
            session.add(article)
            await session.flush()
            genre_ids = list(genre_ids)
            if genre_ids:
                await session.execute(
                    insert(article_genres),
                    [{"article_id": article.id, "genre_id": genre_id} for genre_id in genre_ids]
                )
            await session.commit()
            return article.id


def auth_headers(user_id: int) -> dict:
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def app(tmp_path):
    application = create_app(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest.fixture
def media_storage(app):
    storage = FakeMediaStorage()
    app.dependency_overrides[get_media_storage] = lambda: storage
    return storage


@pytest.fixture
async def client(app, media_storage):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
async def db(app):
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def seed(app):
    return Seeder(app.state.session_factory)


@pytest.fixture
def headers():
    return auth_headers
